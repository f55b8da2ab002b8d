from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, never on a concrete DB.
    Every lookup except the sender lookup by phone is tenant-scoped.
    """

    def find_active_by_phone(self, phone_number: str) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, *, tenant_id: str, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def find_managers(self, tenant_id: str) -> Sequence[Employee]:
        """Active managers of the tenant, oldest first."""
        raise NotImplementedError
