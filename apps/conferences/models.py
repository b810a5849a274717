import reversion
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


class Conference(models.Model):
    """A conference running a call for papers."""

    title = models.CharField(_("Title"), max_length=255)
    acronym = models.SlugField(_("Acronym"), max_length=100, unique=True)
    email = models.EmailField(
        _("Email"),
        blank=True,
        help_text=_("Sender address for notifications to speakers."),
    )
    default_timeslots = models.PositiveIntegerField(_("Default Timeslots"), default=3)
    timeslot_duration = models.PositiveIntegerField(
        _("Timeslot Duration"), default=15, help_text=_("Minutes")
    )
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Conference")
        verbose_name_plural = _("Conferences")
        ordering = ["-created_at"]

    def __str__(self):
        return self.title

    @property
    def notifications(self):
        """Notification texts of this conference's call for papers."""
        try:
            return self.call_for_papers.notifications.all()
        except CallForPapers.DoesNotExist:
            return Notification.objects.none()


class ConferenceUser(models.Model):
    """Per-conference role of a crew member."""

    class Role(models.TextChoices):
        ORGA = "orga", _("Orga")
        COORDINATOR = "coordinator", _("Coordinator")
        REVIEWER = "reviewer", _("Reviewer")

    conference = models.ForeignKey(
        Conference, on_delete=models.CASCADE, related_name="conference_users"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="conference_users",
    )
    role = models.CharField(_("Role"), max_length=20, choices=Role.choices)

    class Meta:
        verbose_name = _("Conference User")
        verbose_name_plural = _("Conference Users")
        unique_together = ["conference", "user"]

    def __str__(self):
        return f"{self.user} ({self.role}) @ {self.conference.acronym}"


class Track(models.Model):
    conference = models.ForeignKey(
        Conference, on_delete=models.CASCADE, related_name="tracks"
    )
    name = models.CharField(_("Name"), max_length=255)
    color = models.CharField(_("Color"), max_length=7, default="#fefd7f")

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Room(models.Model):
    conference = models.ForeignKey(
        Conference, on_delete=models.CASCADE, related_name="rooms"
    )
    name = models.CharField(_("Name"), max_length=255)
    size = models.PositiveIntegerField(_("Size"), null=True, blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


@reversion.register(follow=["notifications"])
class CallForPapers(models.Model):
    """The open submission period of a conference."""

    conference = models.OneToOneField(
        Conference, on_delete=models.CASCADE, related_name="call_for_papers"
    )
    start_date = models.DateField(_("Start Date"))
    end_date = models.DateField(_("End Date"))
    hard_deadline = models.DateField(_("Hard Deadline"), null=True, blank=True)
    welcome_text = models.TextField(_("Welcome Text"), blank=True)
    info_url = models.URLField(_("Info URL"), blank=True)
    contact_email = models.EmailField(_("Contact Email"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Call for Papers")
        verbose_name_plural = _("Calls for Papers")

    def __str__(self):
        return f"Call for Papers: {self.conference.title}"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError(_("End date must not be before start date."))


@reversion.register()
class Notification(models.Model):
    """Acceptance and rejection mail texts for one locale."""

    call_for_papers = models.ForeignKey(
        CallForPapers, on_delete=models.CASCADE, related_name="notifications"
    )
    locale = models.CharField(_("Locale"), max_length=10, default="en")
    accept_subject = models.CharField(_("Accept Subject"), max_length=255)
    accept_body = models.TextField(_("Accept Body"))
    reject_subject = models.CharField(_("Reject Subject"), max_length=255)
    reject_body = models.TextField(_("Reject Body"))

    class Meta:
        verbose_name = _("Notification")
        verbose_name_plural = _("Notifications")
        ordering = ["locale"]
        unique_together = ["call_for_papers", "locale"]

    def __str__(self):
        return f"{self.call_for_papers} [{self.locale}]"
