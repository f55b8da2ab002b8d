"""Chat-ready text for the report projections."""

from __future__ import annotations

from decimal import Decimal

from ..common.datetime_utils import format_clock, format_day, local_time
from ..core.constants import DEFAULT_DISPLAY_TIMEZONE, DEFAULT_HISTORY_DAYS
from ..core.enums import RequestStatus
from .model import HistoryEntry, WeeklySummary

LEAVE_STATUS_LABELS = {
    RequestStatus.PENDING: "En attente",
    RequestStatus.APPROVED: "Validée",
    RequestStatus.REJECTED: "Refusée",
}


def _format_balance(value) -> str:
    # Decimal("25.00") -> "25", Decimal("12.50") -> "12.5"
    return f"{Decimal(value).normalize():f}"


def format_weekly_summary(summary: WeeklySummary) -> str:
    ongoing = " _(en cours)_" if summary.ongoing_session else ""
    worked = f"{summary.hours}h" + (f" {summary.minutes}m" if summary.minutes > 0 else "")

    if summary.last_leave is not None:
        label = LEAVE_STATUS_LABELS.get(summary.last_leave.status, summary.last_leave.status.value)
        leave_info = f"• Dernière demande : {summary.last_leave.start_at.strftime('%d/%m')} ({label})"
    else:
        leave_info = "• Dernière demande : Aucune"

    return (
        "📊 *Mon Espace Salarié*\n"
        f"👤 {summary.employee_name}\n"
        "\n"
        f"⏱️ *Cette semaine* (depuis le {format_day(summary.week_start)}) :\n"
        f"• Travaillé : {worked}{ongoing}\n"
        f"• Présence : {summary.days_worked} jour(s)\n"
        "\n"
        "🏖️ *Mes Congés* :\n"
        f"• Solde disponible : {_format_balance(summary.leave_balance)} jours\n"
        f"{leave_info}"
    )


def format_history_entry(entry: HistoryEntry, tz_name: str = DEFAULT_DISPLAY_TIMEZONE) -> str:
    day = local_time(entry.check_in, tz_name).strftime("%d/%m")
    start = format_clock(entry.check_in, tz_name)
    if entry.in_progress:
        return f"📅 {day} : {start} - En cours..."

    hours, mins = divmod(entry.duration_minutes or 0, 60)
    duration = f"{hours}h" + (f"{mins:02d}min" if mins else "")
    return f"📅 {day} : {start} - {format_clock(entry.check_out, tz_name)} ({duration})"


def format_history(
    entries: list[HistoryEntry],
    employee_name: str,
    *,
    days: int = DEFAULT_HISTORY_DAYS,
    tz_name: str = DEFAULT_DISPLAY_TIMEZONE,
) -> str:
    title = f"📋 *Historique des {days} derniers jours*"
    if not entries:
        return f"{title}\n\n_Aucun pointage trouvé._"
    lines = "\n".join(format_history_entry(e, tz_name) for e in entries)
    return f"{title}\n👤 {employee_name}\n\n{lines}"
