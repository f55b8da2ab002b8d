from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from ..attendance.service import SessionTracker
from ..common.datetime_utils import as_utc, now_utc
from ..core.constants import DEFAULT_DISPLAY_TIMEZONE, DEFAULT_HISTORY_DAYS
from ..core.enums import RequestStatus
from ..core.exceptions import DomainError, StorageError, UnknownSenderError, ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeDirectory
from ..geofence.service import LocationService
from ..leave.parser import LeaveCommandParser, Matched
from ..leave.service import LeaveWorkflow
from ..reports.formatters import format_history, format_weekly_summary
from ..reports.service import WeeklyAggregator
from .model import EventKind, InboundEvent, OutboundMessage

logger = logging.getLogger(__name__)

CHECK_IN_WORDS = {"hi", "bonjour", "hello", "salut", "start"}
CHECK_OUT_WORDS = {"bye", "au revoir", "stop", "fin", "ciao"}
SUMMARY_WORDS = {"moi", "mon espace", "solde", "résumé", "resume"}
HISTORY_WORDS = {"historique", "history"}
HELP_WORDS = {"help", "aide", "?"}

RETRY_TEXT = "⚠️ Erreur temporaire, votre message n'a pas été enregistré. Réessayez dans un instant."
UNKNOWN_SENDER_TEXT = "❌ Numéro non reconnu. Contactez votre RH."


class MessageRouter:
    """Turns one inbound chat event into addressed replies.

    The first message of the returned list always answers the sender; the
    others are side-channel notifications (manager or employee).
    """

    def __init__(
        self,
        *,
        directory: EmployeeDirectory,
        tracker: SessionTracker,
        locations: LocationService,
        leave: LeaveWorkflow,
        reports: WeeklyAggregator,
        parser: LeaveCommandParser | None = None,
        display_timezone: str = DEFAULT_DISPLAY_TIMEZONE,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._directory = directory
        self._tracker = tracker
        self._locations = locations
        self._leave = leave
        self._reports = reports
        self._parser = parser or LeaveCommandParser()
        self._tz = display_timezone
        self._clock = clock

    def handle(self, event: InboundEvent) -> list[OutboundMessage]:
        received_at = as_utc(self._clock())
        try:
            employee = self._directory.identify(event.sender)
        except UnknownSenderError:
            logger.info("Message from unknown sender %s", event.sender)
            return [OutboundMessage(to=event.sender, text=UNKNOWN_SENDER_TEXT)]
        except StorageError:
            return [OutboundMessage(to=event.sender, text=RETRY_TEXT)]

        logger.info("Received %s message from employee %s (tenant %s)", event.kind.value, employee.employee_id, employee.tenant_id)
        try:
            return self._dispatch(employee, event, received_at)
        except StorageError:
            return [self._reply(employee, RETRY_TEXT)]
        except ValidationError as exc:
            logger.debug("Rejected input from %s: %s", employee.employee_id, exc)
            return [self._reply(employee, f"⚠️ {exc}")]
        except DomainError as exc:
            return [self._reply(employee, f"⚠️ {exc}")]

    @staticmethod
    def _reply(employee: Employee, text: str) -> OutboundMessage:
        return OutboundMessage(to=employee.phone_number, text=text)

    def _dispatch(self, employee: Employee, event: InboundEvent, received_at: datetime) -> list[OutboundMessage]:
        now = as_utc(event.timestamp) if event.timestamp else received_at

        if event.kind == EventKind.LOCATION:
            return self._on_location(employee, event, now)

        text = event.text.strip()

        leave_cmd = self._parser.parse_leave_command(text)
        if isinstance(leave_cmd, Matched):
            return self._on_leave_request(employee, leave_cmd.payload, now)

        if employee.is_manager and self._parser.is_decision(text):
            return self._on_manager_decision(employee, text, now)

        command = text.lower()
        if command in CHECK_IN_WORDS:
            result = self._tracker.check_in(employee, now=now, received_at=received_at)
            return [self._reply(employee, f"✅ {result.message} Bon travail {employee.display_name} !")]

        if command in CHECK_OUT_WORDS:
            result = self._tracker.check_out(employee, now=now, received_at=received_at)
            return [self._reply(employee, f"👋 {result.message} Bonne soirée {employee.display_name} !")]

        if command in SUMMARY_WORDS:
            summary = self._reports.summarize(employee.employee_id, employee.tenant_id, now)
            return [self._reply(employee, format_weekly_summary(summary))]

        if command in HISTORY_WORDS:
            entries = self._reports.history(employee.employee_id, employee.tenant_id, DEFAULT_HISTORY_DAYS, now)
            return [self._reply(employee, format_history(entries, employee.display_name, tz_name=self._tz))]

        if command in HELP_WORDS:
            return [self._reply(employee, self._help_text(employee))]

        return [
            self._reply(
                employee,
                f'🤔 Je ne comprends pas "{text}".\n\n'
                'Dites *"Hi"* pour pointer votre entrée, *"Bye"* pour pointer votre sortie,\n'
                'ou *"Congé 25/12"* pour demander un congé.\n'
                'Tapez *"Help"* pour plus d\'informations.',
            )
        ]

    def _on_location(self, employee: Employee, event: InboundEvent, now: datetime) -> list[OutboundMessage]:
        if self._tracker.today_session(employee, now=now) is None:
            return [
                self._reply(
                    employee,
                    '⚠️ Vous devez d\'abord pointer votre entrée avec "Hi" avant d\'envoyer votre position.',
                )
            ]
        verdict = self._locations.evaluate_location(employee, event.position)
        if event.position is not None:
            self._tracker.record_location(employee, event.position, verdict, now=now)
        return [self._reply(employee, verdict.message)]

    def _on_leave_request(self, employee: Employee, date_text: str, now: datetime) -> list[OutboundMessage]:
        created = self._leave.create_request(employee, date_text, today=now.date())
        short_id = created.short_id
        manager_text = (
            "📋 *Nouvelle demande de congé*\n\n"
            f"👤 De: *{employee.display_name}*\n"
            f"📅 Date: *{created.formatted_date}*\n"
            f"🆔 ID: *#{short_id}*\n\n"
            "Répondez:\n"
            f"• *OK {short_id}* pour approuver\n"
            f"• *NON {short_id}* pour refuser"
        )
        return [
            self._reply(
                employee,
                f"✅ {created.message}\n\nEnvoyée au manager, vous recevrez une notification dès qu'elle sera traitée.",
            ),
            OutboundMessage(to=created.manager.phone_number, text=manager_text),
        ]

    def _on_manager_decision(self, manager: Employee, text: str, now: datetime) -> list[OutboundMessage]:
        applied = self._leave.apply_manager_decision(manager, text, now=now)
        out = [self._reply(manager, f"✅ {applied.message}")]

        if applied.employee is not None:
            short_id = applied.request.short_id
            if applied.status == RequestStatus.APPROVED:
                employee_text = (
                    "🎉 *Bonne nouvelle !*\n\n"
                    f"Votre demande de congé #{short_id} a été *approuvée* par votre manager ! 😎"
                )
            else:
                employee_text = (
                    "😔 *Demande refusée*\n\n"
                    f"Votre demande de congé #{short_id} a été *refusée* par votre manager. "
                    "Contactez-le pour plus d'informations."
                )
            out.append(OutboundMessage(to=applied.employee.phone_number, text=employee_text))
        return out

    def _help_text(self, employee: Employee) -> str:
        lines = [
            "📋 *Commandes disponibles :*",
            "",
            "• *Hi/Bonjour* → Pointer votre entrée",
            "• *Bye/Au revoir* → Pointer votre sortie",
            "• *Congé DD/MM* → Demander un congé",
            "• *Moi* → Résumé de la semaine",
            "• *Historique* → Pointages des 10 derniers jours",
        ]
        if employee.is_manager:
            lines.append("• *OK [ID]* / *NON [ID]* → Répondre à une demande de congé")
        lines += [
            "• *Help* → Afficher cette aide",
            "",
            f"Vous êtes connecté en tant que *{employee.display_name}* ({employee.role.value})"
            + (f" chez *{employee.tenant_name}*." if employee.tenant_name else "."),
        ]
        return "\n".join(lines)
