from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_SITE_RADIUS_METERS


@dataclass(frozen=True)
class Site:
    site_id: str
    tenant_id: str
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius: Optional[int] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def effective_radius(self) -> int:
        return int(self.radius) if self.radius else DEFAULT_SITE_RADIUS_METERS
