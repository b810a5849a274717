import smtplib

from django.core.mail import BadHeaderError
from rest_framework import status
from rest_framework.exceptions import APIException


class EventBaseException(APIException):
    """Base exception for all event-related errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "An event error occurred."
    default_code = "event_error"


class MailDeliveryError(EventBaseException):
    """Raised when a state notification cannot be delivered."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Notification mail could not be delivered"
    default_code = "mail_delivery_error"


class NotificationMissing(MailDeliveryError):
    """Raised when no notification text exists for the conference."""

    default_detail = "No notification text present"
    default_code = "notification_missing"


# Errors raised while building or delivering a mail. BadHeaderError and
# encoding failures are ValueErrors raised when the message is rendered.
MAIL_ERRORS = (
    MailDeliveryError,
    BadHeaderError,
    ValueError,
    smtplib.SMTPException,
    OSError,
)
