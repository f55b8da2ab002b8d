from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import format_day, now_utc
from ..core.enums import RequestStatus
from ..core.exceptions import AuthorizationError, ConfigurationError, ConflictError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import EmployeeDirectory
from .model import LeaveRequest
from .parser import LeaveCommandParser, ParseFailure
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaveRequestCreated:
    request: LeaveRequest
    manager: Employee

    @property
    def short_id(self) -> str:
        return self.request.short_id

    @property
    def formatted_date(self) -> str:
        return format_day(self.request.start_at)

    @property
    def message(self) -> str:
        return f"Demande de congé #{self.short_id} créée pour le {self.formatted_date}."


@dataclass(frozen=True)
class LeaveDecisionApplied:
    request: LeaveRequest
    employee: Optional[Employee]
    id_fragment: str

    @property
    def status(self) -> RequestStatus:
        return self.request.status

    @property
    def decision_text(self) -> str:
        return "approuvée ✅" if self.status == RequestStatus.APPROVED else "refusée ❌"

    @property
    def message(self) -> str:
        return f"Demande #{self.id_fragment} {self.decision_text}."


class LeaveWorkflow:
    """Leave requests typed by employees and decided by their tenant's manager.

    Tenant isolation is absolute: a manager's reply is only ever matched
    against PENDING requests of the manager's own tenant.
    """

    def __init__(
        self,
        requests: LeaveRequestRepository,
        employees: EmployeeRepository,
        *,
        directory: EmployeeDirectory | None = None,
        parser: LeaveCommandParser | None = None,
    ):
        self._requests = requests
        self._employees = employees
        self._directory = directory or EmployeeDirectory(employees)
        self._parser = parser or LeaveCommandParser()

    def create_request(self, employee: Employee, date_text: str, *, today: date | None = None) -> LeaveRequestCreated:
        parsed = self._parser.parse_leave_date(date_text, today=today)
        if isinstance(parsed, ParseFailure):
            raise ValidationError(parsed.reason)

        leave_date = parsed.payload
        request = self._requests.create(
            tenant_id=employee.tenant_id,
            employee_id=employee.employee_id,
            start_at=leave_date.start,
            end_at=leave_date.end,
        )
        logger.info("Leave request %s created by %s for %s", request.short_id, employee.employee_id, leave_date.start.date())

        manager = self._directory.manager_for(employee.tenant_id)
        if manager is None:
            # The request stays PENDING so an admin can resolve it by hand.
            logger.warning("Tenant %s has no manager, leave request %s is orphaned", employee.tenant_id, request.short_id)
            raise ConfigurationError("Aucun manager trouvé pour votre entreprise. Contactez votre RH.", request=request)

        return LeaveRequestCreated(request=request, manager=manager)

    def apply_manager_decision(
        self,
        manager: Employee,
        message_text: str,
        *,
        now: datetime | None = None,
    ) -> LeaveDecisionApplied:
        if not manager.is_manager:
            raise AuthorizationError("Seul un manager peut valider ou refuser une demande.")

        parsed = self._parser.parse_decision(message_text)
        if isinstance(parsed, ParseFailure):
            raise ValidationError(parsed.reason)

        decision = parsed.payload
        request = self._requests.decide_pending_by_prefix(
            tenant_id=manager.tenant_id,
            id_prefix=decision.id_fragment,
            status=decision.status,
            decided_by=manager.employee_id,
            decided_at=now or now_utc(),
        )
        if request is None:
            raise ConflictError(f"Demande #{decision.id_fragment} introuvable ou déjà traitée.")

        logger.info(
            "Leave request %s %s by manager %s (tenant %s)",
            request.short_id,
            request.status.value,
            manager.employee_id,
            manager.tenant_id,
        )
        employee = self._employees.get_by_id(tenant_id=manager.tenant_id, employee_id=request.employee_id)
        return LeaveDecisionApplied(request=request, employee=employee, id_fragment=decision.id_fragment)
