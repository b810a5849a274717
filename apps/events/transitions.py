"""
State changes of events requested by users.

User input names a transition; only names in ``Transition`` are ever mapped
onto the state machine methods of ``Event``. Every call returns a
``TransitionResult`` instead of raising, so views only translate outcomes
into responses.
"""

import dataclasses
import enum
import logging
from typing import Optional

from django.db import transaction
from django_fsm import can_proceed

from . import mailers
from .exceptions import MAIL_ERRORS
from .models import Event

logger = logging.getLogger(__name__)


class Transition(str, enum.Enum):
    START_REVIEW = "start_review"
    ACCEPT = "accept"
    REJECT = "reject"
    CONFIRM = "confirm"
    UNCONFIRM = "unconfirm"
    SCHEDULE = "schedule"
    CANCEL = "cancel"
    WITHDRAW = "withdraw"
    RESET = "reset"


# Transitions that notify speakers when mailing is requested
MAIL_KINDS = {
    Transition.ACCEPT: mailers.ACCEPT,
    Transition.REJECT: mailers.REJECT,
}


class Outcome(str, enum.Enum):
    SUCCESS = "success"
    INVALID_TRANSITION = "invalid_transition"
    PRECONDITION_FAILED = "precondition_failed"
    MAIL_FAILED = "mail_failed"


class Reason(str, enum.Enum):
    UNKNOWN_TRANSITION = "unknown_transition"
    NOT_ALLOWED = "not_allowed"
    NOTIFICATIONS_MISSING = "notifications_missing"
    CONFERENCE_EMAIL_MISSING = "conference_email_missing"
    SPEAKER_EMAIL_MISSING = "speaker_email_missing"
    DELIVERY_FAILED = "delivery_failed"


@dataclasses.dataclass(frozen=True)
class TransitionResult:
    outcome: Outcome
    message: str
    event: Event
    reason: Optional[Reason] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS


def mail_precondition_failure(event: Event) -> Optional[TransitionResult]:
    """Check that mails can be sent for ``event``; None when they can."""
    conference = event.conference
    if not conference.notifications.exists():
        return TransitionResult(
            Outcome.PRECONDITION_FAILED,
            "No notification text present. Please change the default text for "
            "your needs, before accepting/ rejecting events.",
            event,
            Reason.NOTIFICATIONS_MISSING,
        )
    if not conference.email:
        return TransitionResult(
            Outcome.PRECONDITION_FAILED,
            "Cannot send mails: Please specify an email address for this conference.",
            event,
            Reason.CONFERENCE_EMAIL_MISSING,
        )
    if any(not speaker.email for speaker in event.speakers):
        return TransitionResult(
            Outcome.PRECONDITION_FAILED,
            "Cannot send mails: Not all speakers have email addresses.",
            event,
            Reason.SPEAKER_EMAIL_MISSING,
        )
    return None


def apply_transition(
    event: Event, name: str, actor=None, send_mail: bool = False
) -> TransitionResult:
    """
    Run the transition called ``name`` on ``event`` on behalf of the person
    ``actor``, optionally notifying the speakers.

    The mails are sent inside the transaction that saves the new state, so a
    delivery error rolls the state back. Speakers mailed before the failing
    one have already received the notification by then.
    """
    try:
        requested = Transition(name)
    except ValueError:
        return TransitionResult(
            Outcome.INVALID_TRANSITION,
            f"Unknown transition: {name}.",
            event,
            Reason.UNKNOWN_TRANSITION,
        )

    if send_mail:
        failure = mail_precondition_failure(event)
        if failure is not None:
            return failure

    method = getattr(event, requested.value)
    if not can_proceed(method):
        return TransitionResult(
            Outcome.INVALID_TRANSITION,
            f"Cannot {requested.value} an event in state {event.state}.",
            event,
            Reason.NOT_ALLOWED,
        )

    try:
        with transaction.atomic():
            method(coordinator=actor)
            event.save()
            if send_mail and requested in MAIL_KINDS:
                mailers.send_state_notification(event, MAIL_KINDS[requested])
    except MAIL_ERRORS as e:
        logger.warning(f"Mail delivery failed for event {event.pk}: {e}")
        event.refresh_from_db()
        return TransitionResult(
            Outcome.MAIL_FAILED,
            f"Cannot send mails: {e}.",
            event,
            Reason.DELIVERY_FAILED,
        )

    logger.info(
        f"Event {event.pk} is now {event.state} "
        f"({requested.value} by {actor or 'system'})"
    )
    return TransitionResult(Outcome.SUCCESS, "Event was successfully updated.", event)
