"""Geofencing: is a reported position close enough to the employee's site?

A check-in is never blocked here. Out-of-radius or unverifiable positions
come back compliant with ``warn=True`` so GPS noise cannot erase a
legitimate attendance record; the warning is shown to the sender instead.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.enums import WorkProfile
from ..sites.model import Site


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


class GeofenceReason(str, Enum):
    MOBILE_PROFILE = "MOBILE_PROFILE"
    LOCATION_MISSING = "LOCATION_MISSING"
    NO_SITE = "NO_SITE"
    SITE_NOT_LOCATED = "SITE_NOT_LOCATED"
    WITHIN_RADIUS = "WITHIN_RADIUS"
    OUTSIDE_RADIUS = "OUTSIDE_RADIUS"


@dataclass(frozen=True)
class GeofenceVerdict:
    compliant: bool
    distance: Optional[int]
    warn: bool
    reason: GeofenceReason
    radius: Optional[int] = None

    @property
    def message(self) -> str:
        if self.reason == GeofenceReason.LOCATION_MISSING:
            return "⚠️ Localisation non fournie. Pointage enregistré sous réserve."
        if self.reason == GeofenceReason.NO_SITE:
            return "⚠️ Aucun site de rattachement. Pointage enregistré."
        if self.reason == GeofenceReason.WITHIN_RADIUS:
            return f"✅ Pointage validé ({self.distance}m du site)"
        if self.reason == GeofenceReason.OUTSIDE_RADIUS:
            return (
                f"⚠️ Attention, vous êtes à {self.distance}m de votre lieu de travail "
                f"(rayon autorisé: {self.radius}m). Pointage enregistré sous réserve."
            )
        return "✅ Pointage validé"


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """Great-circle distance in meters, rounded to the nearest meter."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return int(round(EARTH_RADIUS_METERS * c))


class GeofenceValidator:
    """Pure rules, evaluated in order. No state, no I/O."""

    def evaluate(
        self,
        profile: WorkProfile,
        position: Optional[Coordinate],
        site: Optional[Site],
    ) -> GeofenceVerdict:
        if profile == WorkProfile.MOBILE:
            return GeofenceVerdict(compliant=True, distance=None, warn=False, reason=GeofenceReason.MOBILE_PROFILE)

        if position is None:
            return GeofenceVerdict(compliant=True, distance=None, warn=True, reason=GeofenceReason.LOCATION_MISSING)

        if site is None:
            return GeofenceVerdict(compliant=True, distance=None, warn=True, reason=GeofenceReason.NO_SITE)

        if not site.has_coordinates:
            return GeofenceVerdict(compliant=True, distance=None, warn=False, reason=GeofenceReason.SITE_NOT_LOCATED)

        distance = haversine_distance(position.latitude, position.longitude, site.latitude, site.longitude)
        radius = site.effective_radius
        if distance <= radius:
            return GeofenceVerdict(
                compliant=True, distance=distance, warn=False, reason=GeofenceReason.WITHIN_RADIUS, radius=radius
            )
        return GeofenceVerdict(
            compliant=True, distance=distance, warn=True, reason=GeofenceReason.OUTSIDE_RADIUS, radius=radius
        )
