import logging
import re

from django.core.mail import EmailMessage

from .exceptions import MailDeliveryError, NotificationMissing

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"%\{(\w+)\}")

ACCEPT = "accept"
REJECT = "reject"


def notification_for(event):
    """Pick the notification text in the event's language, else the first one."""
    notifications = event.conference.notifications
    notification = notifications.filter(locale=event.language).first()
    if notification is None:
        notification = notifications.first()
    if notification is None:
        raise NotificationMissing()
    return notification


def render_text(text, event, person):
    values = {
        "conference": event.conference.title,
        "event": event.title,
        "forename": person.first_name,
        "surname": person.last_name,
        "public_name": str(person),
    }
    # Unknown placeholders are left as they are
    return PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), m.group(0)), text)


def send_state_notification(event, kind):
    """
    Mail every speaker of ``event`` the acceptance or rejection text.

    Returns the number of mails sent. Backend errors propagate to the caller.
    """
    if kind not in (ACCEPT, REJECT):
        raise ValueError(f"Unknown notification kind: {kind}")
    if not event.conference.email:
        raise MailDeliveryError("Please specify an email address for this conference")

    notification = notification_for(event)
    subject_template = getattr(notification, f"{kind}_subject")
    body_template = getattr(notification, f"{kind}_body")

    sent = 0
    for person in event.speakers:
        message = EmailMessage(
            subject=render_text(subject_template, event, person),
            body=render_text(body_template, event, person),
            from_email=event.conference.email,
            to=[person.email],
        )
        sent += message.send(fail_silently=False)

    logger.info(f"Sent {sent} {kind} notification(s) for event {event.pk}")
    return sent
