from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Job role, used to decide who may answer leave requests."""

    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"


class EmployeeStatus(str, Enum):
    """Lifecycle state. Archival is a soft delete, the row is kept."""

    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class WorkProfile(str, Enum):
    """Whether check-ins are location-restricted."""

    MOBILE = "MOBILE"
    SEDENTARY = "SEDENTARY"


class SessionStatus(str, Enum):
    PRESENT = "PRESENT"


class RequestStatus(str, Enum):
    """Leave request workflow. APPROVED and REJECTED are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
