import logging

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Avg, Count
from django.utils.translation import gettext_lazy as _
from django_fsm import FSMField, transition

from apps.accounts.models import Person
from apps.conferences.models import Conference, Room, Track

logger = logging.getLogger(__name__)


class EventQuerySet(models.QuerySet):
    """Custom queryset for Event with the filters the review workflow needs."""

    def accepted(self):
        return self.filter(state__in=Event.ACCEPTED_STATES)

    def for_review(self):
        return self.filter(state__in=Event.REVIEWABLE_STATES)

    def associated_with(self, person):
        return self.filter(event_people__person=person).distinct()

    def search(self, term):
        return self.filter(
            models.Q(title__icontains=term)
            | models.Q(description__icontains=term)
            | models.Q(abstract__icontains=term)
            | models.Q(track__name__icontains=term)
            | models.Q(event_type=term)
        ).distinct()


class Event(models.Model):
    """
    A talk or session proposal going through the call for papers.

    The ``state`` field is driven exclusively by the transition methods below;
    ``apps.events.transitions`` is the only caller that maps user input onto
    them.
    """

    class EventType(models.TextChoices):
        LECTURE = "lecture", _("Lecture")
        WORKSHOP = "workshop", _("Workshop")
        PODIUM = "podium", _("Podium")
        LIGHTNING_TALK = "lightning_talk", _("Lightning Talk")
        MEETING = "meeting", _("Meeting")
        FILM = "film", _("Film")
        CONCERT = "concert", _("Concert")
        DJSET = "djset", _("DJ Set")
        PERFORMANCE = "performance", _("Performance")
        OTHER = "other", _("Other")

    class State(models.TextChoices):
        NEW = "new", _("New")
        REVIEW = "review", _("Review")
        WITHDRAWN = "withdrawn", _("Withdrawn")
        UNCONFIRMED = "unconfirmed", _("Unconfirmed")
        CONFIRMED = "confirmed", _("Confirmed")
        SCHEDULED = "scheduled", _("Scheduled")
        CANCELED = "canceled", _("Canceled")
        REJECTED = "rejected", _("Rejected")

    ACCEPTED_STATES = [State.UNCONFIRMED, State.CONFIRMED, State.SCHEDULED]
    REVIEWABLE_STATES = [State.NEW, State.REVIEW]

    conference = models.ForeignKey(
        Conference, on_delete=models.CASCADE, related_name="events"
    )
    title = models.CharField(_("Title"), max_length=255)
    subtitle = models.CharField(_("Subtitle"), max_length=255, blank=True)
    event_type = models.CharField(
        _("Event Type"),
        max_length=20,
        choices=EventType.choices,
        default=EventType.LECTURE,
    )
    state = FSMField(_("State"), default=State.NEW, choices=State.choices)
    time_slots = models.PositiveIntegerField(_("Time Slots"), default=3)
    start_time = models.DateTimeField(_("Start Time"), null=True, blank=True)
    public = models.BooleanField(_("Public"), default=True)
    language = models.CharField(_("Language"), max_length=10, default="en")
    abstract = models.TextField(_("Abstract"), blank=True)
    description = models.TextField(_("Description"), blank=True)
    logo = models.ImageField(_("Logo"), upload_to="event_logos/", blank=True, null=True)
    track = models.ForeignKey(
        Track,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="events",
    )
    room = models.ForeignKey(
        Room,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="events",
    )
    note = models.TextField(_("Note"), blank=True, help_text=_("Internal note"))
    submission_note = models.TextField(_("Submission Note"), blank=True)
    do_not_record = models.BooleanField(_("Do Not Record"), default=False)
    recording_license = models.CharField(
        _("Recording License"), max_length=255, blank=True
    )

    # Denormalised from EventRating, see signals
    event_ratings_count = models.PositiveIntegerField(
        _("Ratings Count"), default=0, editable=False
    )
    average_rating = models.FloatField(
        _("Average Rating"), null=True, blank=True, editable=False
    )

    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        verbose_name = _("Event")
        verbose_name_plural = _("Events")
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["conference", "state"], name="events_event_conf_state_idx"
            ),
            models.Index(
                fields=["event_ratings_count"], name="events_event_ratings_cnt_idx"
            ),
        ]

    def __str__(self):
        return self.title

    @classmethod
    def ids_by_least_reviewed(cls, conference, person):
        """Ids of events still to be rated by ``person``, least-rated first."""
        return list(
            cls.objects.filter(conference=conference)
            .for_review()
            .exclude(event_ratings__person=person)
            .order_by("event_ratings_count", "id")
            .values_list("id", flat=True)
        )

    @property
    def speakers(self):
        return Person.objects.filter(
            event_people__event=self,
            event_people__event_role__in=EventPerson.SPEAKER_ROLES,
        ).distinct()

    def clean_event_attributes(self):
        """Blank organizer-only fields before showing the event to others."""
        self.note = ""
        self.submission_note = ""
        return self

    def recalculate_ratings(self):
        stats = self.event_ratings.aggregate(count=Count("id"), average=Avg("rating"))
        self.event_ratings_count = stats["count"]
        self.average_rating = stats["average"]
        self.save(update_fields=["event_ratings_count", "average_rating"])

    def _ensure_coordinator(self, coordinator):
        if coordinator is None:
            return
        EventPerson.objects.get_or_create(
            event=self,
            person=coordinator,
            event_role=EventPerson.EventRole.COORDINATOR,
        )

    # Transitions. Mail delivery for accept/reject is handled by the caller
    # after the state change, inside the same database transaction.

    @transition(field=state, source=State.NEW, target=State.REVIEW)
    def start_review(self, **kwargs):
        pass

    @transition(
        field=state, source=[State.NEW, State.REVIEW], target=State.UNCONFIRMED
    )
    def accept(self, coordinator=None, **kwargs):
        self._ensure_coordinator(coordinator)

    @transition(field=state, source=[State.NEW, State.REVIEW], target=State.REJECTED)
    def reject(self, coordinator=None, **kwargs):
        self._ensure_coordinator(coordinator)

    @transition(field=state, source=State.UNCONFIRMED, target=State.CONFIRMED)
    def confirm(self, **kwargs):
        pass

    @transition(field=state, source=State.CONFIRMED, target=State.UNCONFIRMED)
    def unconfirm(self, **kwargs):
        pass

    @transition(field=state, source=State.CONFIRMED, target=State.SCHEDULED)
    def schedule(self, **kwargs):
        pass

    @transition(
        field=state,
        source=[State.UNCONFIRMED, State.CONFIRMED, State.SCHEDULED],
        target=State.CANCELED,
    )
    def cancel(self, **kwargs):
        pass

    @transition(
        field=state,
        source=[State.NEW, State.REVIEW, State.UNCONFIRMED, State.CONFIRMED],
        target=State.WITHDRAWN,
    )
    def withdraw(self, **kwargs):
        pass

    @transition(
        field=state,
        source=[State.WITHDRAWN, State.CANCELED, State.REJECTED],
        target=State.NEW,
    )
    def reset(self, **kwargs):
        pass


class EventPerson(models.Model):
    class EventRole(models.TextChoices):
        SUBMITTER = "submitter", _("Submitter")
        SPEAKER = "speaker", _("Speaker")
        MODERATOR = "moderator", _("Moderator")
        COORDINATOR = "coordinator", _("Coordinator")

    class RoleState(models.TextChoices):
        IDEA = "idea", _("Idea")
        OFFER = "offer", _("Offer")
        UNCLEAR = "unclear", _("Unclear")
        CONFIRMED = "confirmed", _("Confirmed")
        DECLINED = "declined", _("Declined")
        CANCELED = "canceled", _("Canceled")
        ATTENDING = "attending", _("Attending")

    SPEAKER_ROLES = [EventRole.SPEAKER, EventRole.MODERATOR]

    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="event_people"
    )
    person = models.ForeignKey(
        Person, on_delete=models.CASCADE, related_name="event_people"
    )
    event_role = models.CharField(
        _("Event Role"),
        max_length=20,
        choices=EventRole.choices,
        default=EventRole.SPEAKER,
    )
    role_state = models.CharField(
        _("Role State"), max_length=20, choices=RoleState.choices, blank=True
    )

    class Meta:
        verbose_name = _("Event Person")
        verbose_name_plural = _("Event People")
        ordering = ["event_role", "id"]

    def __str__(self):
        return f"{self.person} ({self.event_role})"


class EventRating(models.Model):
    """A reviewer's rating of an event."""

    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="event_ratings"
    )
    person = models.ForeignKey(
        Person, on_delete=models.CASCADE, related_name="event_ratings"
    )
    rating = models.FloatField(
        _("Rating"),
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    comment = models.TextField(_("Comment"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)
    updated_at = models.DateTimeField(_("Updated At"), auto_now=True)

    class Meta:
        verbose_name = _("Event Rating")
        verbose_name_plural = _("Event Ratings")
        unique_together = ["event", "person"]

    def __str__(self):
        return f"{self.person} rated {self.event}: {self.rating}"


class EventFeedback(models.Model):
    """Attendee feedback on a held event."""

    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="event_feedbacks"
    )
    rating = models.PositiveSmallIntegerField(
        _("Rating"), validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(_("Comment"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Feedback on {self.event}: {self.rating}"


class EventAttachment(models.Model):
    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="event_attachments"
    )
    title = models.CharField(_("Title"), max_length=255)
    attachment = models.FileField(_("Attachment"), upload_to="event_attachments/")
    public = models.BooleanField(_("Public"), default=True)

    def __str__(self):
        return self.title


class Link(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="links")
    title = models.CharField(_("Title"), max_length=255)
    url = models.URLField(_("URL"))

    def __str__(self):
        return self.title


class Ticket(models.Model):
    event = models.OneToOneField(
        Event, on_delete=models.CASCADE, related_name="ticket"
    )
    remote_ticket_id = models.CharField(_("Remote Ticket ID"), max_length=255)

    def __str__(self):
        return self.remote_ticket_id
