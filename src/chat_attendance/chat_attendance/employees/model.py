from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_LEAVE_BALANCE
from ..core.enums import EmployeeStatus, Role, WorkProfile


@dataclass(frozen=True)
class Employee:
    """Domain entity: one employee of one tenant, identified by phone number.

    Note: plain data object, no DB access code here.
    """

    employee_id: str
    tenant_id: str
    name: Optional[str]
    phone_number: str
    role: Role = Role.EMPLOYEE
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    work_profile: WorkProfile = WorkProfile.MOBILE
    site_id: Optional[str] = None
    leave_balance: Decimal = Decimal(DEFAULT_LEAVE_BALANCE)
    created_at: Optional[datetime] = None
    tenant_name: Optional[str] = None

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER and self.is_active

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    @property
    def display_name(self) -> str:
        return self.name or "Employé"
