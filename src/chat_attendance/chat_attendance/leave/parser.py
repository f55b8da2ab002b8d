"""Parsing of human-typed leave commands.

Everything here is pure: no I/O, no exceptions for bad input. Each parser
returns either ``Matched(kind, payload)`` or ``ParseFailure(reason)`` where
``reason`` is guidance that can be sent back to the sender as is.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional, Union

from ..core.enums import RequestStatus


class CommandKind(str, Enum):
    LEAVE_REQUEST = "LEAVE_REQUEST"
    LEAVE_DATE = "LEAVE_DATE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"


@dataclass(frozen=True)
class Matched:
    kind: CommandKind
    payload: Any


@dataclass(frozen=True)
class ParseFailure:
    reason: str


ParseResult = Union[Matched, ParseFailure]


@dataclass(frozen=True)
class LeaveDate:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Decision:
    status: RequestStatus
    id_fragment: str


DATE_FORMAT_HINT = "Format date invalide. Essayez 'Congé 25/12' ou 'Congé 25/12/2026'."
DECISION_FORMAT_HINT = "Format invalide. Utilisez 'OK [ID]' pour approuver ou 'NON [ID]' pour refuser."

APPROVE_TOKENS = ("OK", "OUI", "APPROVE", "VALIDE", "ACCEPTE")
REJECT_TOKENS = ("NON", "REFUSE", "REJECT", "REJETTE")

_DATE_RE = re.compile(r"^(\d{1,2})[/\-](\d{1,2})(?:[/\-](\d{2,4}))?$")
_LEAVE_RE = re.compile(r"^(?:cong[ée]s?|leave)(?:\s+(?P<rest>.*))?$", re.IGNORECASE)
# Token, then '#' and/or whitespace, then the id fragment.
_FRAGMENT = r"(?:\s*#\s*|\s+)([A-Za-z0-9][A-Za-z0-9\-]*)(?:\s|$)"
_APPROVE_RE = re.compile(rf"^({'|'.join(APPROVE_TOKENS)}){_FRAGMENT}", re.IGNORECASE)
_REJECT_RE = re.compile(rf"^({'|'.join(REJECT_TOKENS)}){_FRAGMENT}", re.IGNORECASE)


class LeaveCommandParser:
    def parse_leave_command(self, text: str) -> ParseResult:
        """'Congé 25/12' -> Matched(LEAVE_REQUEST, '25/12'). The date itself is not validated here."""
        m = _LEAVE_RE.match((text or "").strip())
        if not m:
            return ParseFailure("Pas une demande de congé")
        return Matched(CommandKind.LEAVE_REQUEST, (m.group("rest") or "").strip())

    def parse_leave_date(self, text: str, *, today: Optional[date] = None) -> ParseResult:
        """DD/MM or DD/MM/YYYY ('/' or '-'), as a same-day [00:00:00, 23:59:59] interval."""
        m = _DATE_RE.match((text or "").strip())
        if not m:
            return ParseFailure(DATE_FORMAT_HINT)

        day = int(m.group(1))
        month = int(m.group(2))
        if m.group(3):
            year = int(m.group(3))
            if year < 100:
                year += 2000
        else:
            year = (today or date.today()).year

        if not 1 <= day <= 31 or not 1 <= month <= 12:
            return ParseFailure(DATE_FORMAT_HINT)

        try:
            leave_day = date(year, month, day)
        except ValueError:
            # Day overflow for that month, e.g. 31/02.
            return ParseFailure(DATE_FORMAT_HINT)
        if leave_day.day != day:
            return ParseFailure(DATE_FORMAT_HINT)

        return Matched(
            CommandKind.LEAVE_DATE,
            LeaveDate(
                start=datetime.combine(leave_day, time(0, 0, 0)),
                end=datetime.combine(leave_day, time(23, 59, 59)),
            ),
        )

    def parse_decision(self, text: str) -> ParseResult:
        """Manager reply: approval tokens are tried before rejection tokens."""
        cleaned = (text or "").strip()

        m = _APPROVE_RE.match(cleaned)
        if m:
            return Matched(CommandKind.APPROVE, Decision(RequestStatus.APPROVED, m.group(2).lower()))

        m = _REJECT_RE.match(cleaned)
        if m:
            return Matched(CommandKind.REJECT, Decision(RequestStatus.REJECTED, m.group(2).lower()))

        return ParseFailure(DECISION_FORMAT_HINT)

    def is_decision(self, text: str) -> bool:
        return isinstance(self.parse_decision(text), Matched)
