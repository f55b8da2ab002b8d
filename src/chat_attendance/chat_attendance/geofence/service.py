from __future__ import annotations

import logging
from typing import Optional

from ..employees.model import Employee
from ..sites.repository import SiteRepository
from .validator import Coordinate, GeofenceValidator, GeofenceVerdict

logger = logging.getLogger(__name__)


class LocationService:
    """Resolves the employee's site (same tenant only) and runs the validator."""

    def __init__(self, sites: SiteRepository, validator: GeofenceValidator | None = None):
        self._sites = sites
        self._validator = validator or GeofenceValidator()

    def evaluate_location(self, employee: Employee, position: Optional[Coordinate]) -> GeofenceVerdict:
        site = None
        if employee.site_id:
            site = self._sites.get_by_id(tenant_id=employee.tenant_id, site_id=employee.site_id)

        verdict = self._validator.evaluate(employee.work_profile, position, site)
        if verdict.warn:
            logger.warning(
                "Location flagged for employee %s (tenant %s): %s distance=%s",
                employee.employee_id,
                employee.tenant_id,
                verdict.reason.value,
                verdict.distance,
            )
        return verdict
