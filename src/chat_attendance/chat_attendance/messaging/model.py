from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from ..common.datetime_utils import as_utc
from ..common.validators import require_coordinate
from ..core.exceptions import ValidationError
from ..geofence.validator import Coordinate


class EventKind(str, Enum):
    TEXT = "text"
    LOCATION = "location"


@dataclass(frozen=True)
class InboundEvent:
    """One chat message as handed over by the channel adapter."""

    sender: str
    kind: EventKind = EventKind.TEXT
    text: str = ""
    position: Optional[Coordinate] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "InboundEvent":
        if not isinstance(payload, dict):
            raise ValidationError("Corps de requête invalide")

        sender = str(payload.get("from") or "").strip()
        if not sender:
            raise ValidationError("Champ 'from' manquant")

        try:
            kind = EventKind(str(payload.get("type") or EventKind.TEXT.value).lower())
        except ValueError:
            raise ValidationError("Type de message non pris en charge")

        position = None
        if kind == EventKind.LOCATION:
            location = payload.get("location") or {}
            lat, lon = require_coordinate(location.get("latitude"), location.get("longitude"))
            position = Coordinate(latitude=lat, longitude=lon)

        return cls(
            sender=sender,
            kind=kind,
            text=str(payload.get("text") or ""),
            position=position,
            timestamp=parse_timestamp(payload.get("timestamp")),
        )


@dataclass(frozen=True)
class OutboundMessage:
    """Addressed payload; delivery is the caller's job."""

    to: str
    text: str

    def to_dict(self) -> dict:
        return {"to": self.to, "text": self.text}


def parse_timestamp(value) -> Optional[datetime]:
    """Epoch seconds (as int or digit string) or ISO-8601; None when absent."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)) or (isinstance(value, str) and value.strip().isdigit()):
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    try:
        return as_utc(datetime.fromisoformat(str(value).strip()))
    except ValueError:
        raise ValidationError("Horodatage invalide")
