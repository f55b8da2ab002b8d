from __future__ import annotations

import re

from ..core.exceptions import ValidationError

_PHONE_NOISE = re.compile(r"[\s\-().]")


def normalize_phone(value: str) -> str:
    """Normalize a chat sender id to E.164-like '+33612345678'."""
    if not value or not value.strip():
        raise ValidationError("Numéro de téléphone manquant")
    cleaned = _PHONE_NOISE.sub("", value.strip())
    if cleaned.startswith("00"):
        cleaned = cleaned[2:]
    if not cleaned.startswith("+"):
        cleaned = f"+{cleaned}"
    if not cleaned[1:].isdigit():
        raise ValidationError("Numéro de téléphone invalide")
    return cleaned


def require_coordinate(latitude, longitude) -> tuple[float, float]:
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("Coordonnées GPS invalides")
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise ValidationError("Coordonnées GPS hors limites")
    return lat, lon
