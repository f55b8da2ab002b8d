from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import normalize_phone
from ..core.exceptions import UnknownSenderError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeDirectory:
    """Resolves chat senders and tenant managers."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def identify(self, sender: str) -> Employee:
        try:
            phone = normalize_phone(sender)
        except ValidationError:
            raise UnknownSenderError("Numéro non reconnu. Contactez votre RH.")

        matches = list(self._employees.find_active_by_phone(phone))
        if not matches:
            raise UnknownSenderError("Numéro non reconnu. Contactez votre RH.")
        if len(matches) > 1:
            logger.warning("Phone %s belongs to %d tenants, using the oldest record", phone, len(matches))
        return matches[0]

    def manager_for(self, tenant_id: str) -> Optional[Employee]:
        """Exactly one manager per tenant is expected; the earliest created wins otherwise."""
        managers = list(self._employees.find_managers(tenant_id))
        if len(managers) > 1:
            logger.info("Tenant %s has %d managers, routing to %s", tenant_id, len(managers), managers[0].employee_id)
        return managers[0] if managers else None
