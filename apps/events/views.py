import logging

from django.db.models import Avg, Count, Prefetch
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.urls import reverse
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from guardian.shortcuts import assign_perm
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response

from apps.accounts.models import Person
from apps.accounts.permissions import IsNotSubmitter
from apps.common.pagination import CustomPageNumberPagination
from apps.conferences.mixins import ConferenceScopedMixin

from . import transitions
from .filters import EventFilter
from .models import Event, EventPerson, EventRating
from .pdf import render_event_cards
from .permissions import (
    EventAbility,
    accessible_events,
    can_crud_events,
)
from .renderers import PDFRenderer
from .serializers import (
    EventCreateUpdateSerializer,
    EventDetailSerializer,
    EventFeedbackSummarySerializer,
    EventFormSerializer,
    EventListSerializer,
    EventPersonDetailSerializer,
    EventPersonSerializer,
    EventRatingSerializer,
    UpdateStateSerializer,
)

logger = logging.getLogger(__name__)

TRANSITION_STATUS = {
    transitions.Outcome.SUCCESS: status.HTTP_200_OK,
    transitions.Outcome.INVALID_TRANSITION: status.HTTP_400_BAD_REQUEST,
    transitions.Outcome.PRECONDITION_FAILED: status.HTTP_409_CONFLICT,
    transitions.Outcome.MAIL_FAILED: status.HTTP_502_BAD_GATEWAY,
}


def current_person(user):
    """The person record of ``user``, created on first use."""
    person, created = Person.objects.get_or_create(
        user=user,
        defaults={
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
        },
    )
    return person


@extend_schema_view(
    list=extend_schema(
        summary="List events",
        description="Paginated, searchable list of the conference's events.",
        parameters=[OpenApiParameter("term", str, description="Full text search")],
    ),
    retrieve=extend_schema(summary="Get event details"),
    create=extend_schema(summary="Create event"),
    update=extend_schema(summary="Update event"),
    partial_update=extend_schema(summary="Partially update event"),
    destroy=extend_schema(summary="Delete event"),
)
class EventViewSet(ConferenceScopedMixin, viewsets.ModelViewSet):
    """
    Event management for the crew of a conference: listing and search,
    review progress, CRUD and state transitions.
    """

    permission_classes = [IsNotSubmitter, EventAbility]
    filter_backends = [DjangoFilterBackend]
    filterset_class = EventFilter
    pagination_class = CustomPageNumberPagination

    def get_serializer_class(self):
        """Return appropriate serializer based on action."""
        if self.action in ["list", "my", "ratings"]:
            return EventListSerializer
        elif self.action == "feedbacks":
            return EventFeedbackSummarySerializer
        elif self.action in ["create", "update", "partial_update", "edit"]:
            return EventCreateUpdateSerializer
        elif self.action == "new":
            return EventFormSerializer
        elif self.action == "edit_people":
            return EventPersonSerializer
        elif self.action == "people":
            return EventPersonDetailSerializer
        elif self.action == "rating":
            return EventRatingSerializer
        elif self.action == "update_state":
            return UpdateStateSerializer
        return EventDetailSerializer

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Event.objects.none()
        return (
            Event.objects.filter(conference=self.conference)
            .select_related("conference", "track", "room", "ticket")
            .prefetch_related(
                Prefetch(
                    "event_people",
                    queryset=EventPerson.objects.select_related("person"),
                )
            )
        )

    def search(self, queryset):
        """Apply search filters and restrict to events the user may read."""
        queryset = self.filter_queryset(queryset)
        queryset = accessible_events(self.request.user, self.conference, queryset)
        return queryset.distinct()

    def clean_events_attributes(self, events):
        if can_crud_events(self.request.user, self.conference):
            return events
        for event in events:
            event.clean_event_attributes()
        return events

    def paginated_events(self, queryset, **extra):
        page = self.paginate_queryset(queryset)
        self.clean_events_attributes(page)
        serializer = self.get_serializer(page, many=True)
        return self.paginator.get_paginated_response(serializer.data, **extra)

    def list(self, request, *args, **kwargs):
        return self.paginated_events(self.search(self.get_queryset()))

    def retrieve(self, request, *args, **kwargs):
        event = self.get_object()
        self.clean_events_attributes([event])
        serializer = self.get_serializer(event)
        return Response(serializer.data)

    @extend_schema(summary="List the caller's events")
    @action(detail=False, methods=["get"])
    def my(self, request, acronym=None):
        """Events the caller is associated with as speaker, coordinator, etc."""
        person = current_person(request.user)
        return self.paginated_events(
            self.search(self.get_queryset().associated_with(person))
        )

    @extend_schema(
        summary="Event cards as PDF",
        parameters=[OpenApiParameter("accepted", bool)],
        responses={200: OpenApiTypes.BINARY},
    )
    @action(
        detail=False, methods=["get"], renderer_classes=[PDFRenderer, JSONRenderer]
    )
    def cards(self, request, acronym=None):
        events = self.get_queryset()
        if request.query_params.get("accepted"):
            events = events.accepted()
        events = accessible_events(request.user, self.conference, events)

        pdf_content = render_event_cards(events.order_by("title"))
        response = HttpResponse(pdf_content, content_type="application/pdf")
        response["Content-Disposition"] = (
            f'inline; filename="{self.conference.acronym}-cards.pdf"'
        )
        return response

    @extend_schema(summary="Review progress")
    @action(detail=False, methods=["get"])
    def ratings(self, request, acronym=None):
        """Events with rating counters, plus totals for the conference and caller."""
        all_events = Event.objects.filter(conference=self.conference)
        events_total = all_events.count()
        events_reviewed_total = all_events.filter(event_ratings_count__gt=0).count()
        person = current_person(request.user)
        events_reviewed = all_events.filter(event_ratings__person=person).count()

        return self.paginated_events(
            self.search(self.get_queryset()),
            totals={
                "events_total": events_total,
                "events_reviewed_total": events_reviewed_total,
                "events_no_review_total": events_total - events_reviewed_total,
                "events_reviewed": events_reviewed,
                "events_no_review": events_total - events_reviewed,
            },
        )

    @extend_schema(summary="Feedback on accepted events")
    @action(detail=False, methods=["get"])
    def feedbacks(self, request, acronym=None):
        queryset = (
            self.get_queryset()
            .accepted()
            .annotate(
                feedbacks_count=Count("event_feedbacks", distinct=True),
                average_feedback=Avg("event_feedbacks__rating"),
            )
        )
        return self.paginated_events(self.search(queryset))

    @extend_schema(summary="Start a batch review", request=None)
    @action(detail=False, methods=["post"], url_path="start_review")
    def start_review(self, request, acronym=None):
        """Queue the events the caller has not rated yet, least reviewed first."""
        person = current_person(request.user)
        ids = Event.ids_by_least_reviewed(self.conference, person)
        request.session["review_ids"] = ids

        if not ids:
            return Response(
                {"detail": "You have already reviewed all events.", "review_ids": []}
            )
        return Response(
            {
                "review_ids": ids,
                "next_event": ids[0],
                "location": reverse(
                    "events:event-rating",
                    kwargs={"acronym": self.conference.acronym, "pk": ids[0]},
                ),
            }
        )

    @extend_schema(summary="The caller's rating of an event")
    @action(detail=True, methods=["get", "put", "delete"])
    def rating(self, request, acronym=None, pk=None):
        event = self.get_object()
        person = current_person(request.user)

        if request.method == "GET":
            rating = get_object_or_404(EventRating, event=event, person=person)
            return Response(self.get_serializer(rating).data)

        if request.method == "DELETE":
            deleted, _ = EventRating.objects.filter(event=event, person=person).delete()
            if not deleted:
                return Response(status=status.HTTP_404_NOT_FOUND)
            return Response(status=status.HTTP_204_NO_CONTENT)

        rating = EventRating.objects.filter(event=event, person=person).first()
        serializer = self.get_serializer(rating, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(event=event, person=person)
        logger.info(f"{person} rated event {event.pk}")

        review_ids = [i for i in request.session.get("review_ids", []) if i != event.pk]
        request.session["review_ids"] = review_ids
        data = dict(serializer.data)
        data["next_event"] = review_ids[0] if review_ids else None
        return Response(
            data, status=status.HTTP_200_OK if rating else status.HTTP_201_CREATED
        )

    @extend_schema(summary="People of an event")
    @action(detail=True, methods=["get"])
    def people(self, request, acronym=None, pk=None):
        event = self.get_object()
        serializer = self.get_serializer(event.event_people.all(), many=True)
        return Response(serializer.data)

    @extend_schema(summary="Defaults for a new event")
    @action(detail=False, methods=["get"])
    def new(self, request, acronym=None):
        event = Event(
            conference=self.conference,
            time_slots=self.conference.default_timeslots,
        )
        return Response(self.get_serializer(event).data)

    @extend_schema(summary="Editable attributes of an event")
    @action(detail=True, methods=["get"])
    def edit(self, request, acronym=None, pk=None):
        event = self.get_object()
        return Response(self.get_serializer(event).data)

    @extend_schema(summary="Editable people of an event")
    @action(detail=True, methods=["get"], url_path="edit_people")
    def edit_people(self, request, acronym=None, pk=None):
        event = self.get_object()
        serializer = self.get_serializer(event.event_people.all(), many=True)
        return Response(
            {"id": event.pk, "title": event.title, "event_people": serializer.data}
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        event = serializer.instance
        location = reverse(
            "events:event-detail",
            kwargs={"acronym": self.conference.acronym, "pk": event.pk},
        )
        data = EventDetailSerializer(event, context=self.get_serializer_context()).data
        return Response(
            data, status=status.HTTP_201_CREATED, headers={"Location": location}
        )

    def perform_create(self, serializer):
        """Create event and grant the creator object permissions."""
        event = serializer.save()
        assign_perm("events.view_event", self.request.user, event)
        assign_perm("events.change_event", self.request.user, event)
        logger.info(f"Event created: {event.title} by {self.request.user.username}")

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        event = self.get_object()
        serializer = self.get_serializer(event, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        event = self.get_queryset().get(pk=event.pk)
        serializer = EventDetailSerializer(event, context=self.get_serializer_context())
        return Response(serializer.data)

    def perform_update(self, serializer):
        event = serializer.save()
        logger.info(f"Event updated: {event.title} by {self.request.user.username}")

    def perform_destroy(self, instance):
        logger.info(f"Event deleted: {instance.title} by {self.request.user.username}")
        instance.delete()

    @extend_schema(
        summary="Change the state of an event",
        request=UpdateStateSerializer,
    )
    @action(detail=True, methods=["post"], url_path="update_state")
    def update_state(self, request, acronym=None, pk=None):
        event = self.get_object()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = transitions.apply_transition(
            event,
            serializer.validated_data["transition"],
            actor=current_person(request.user),
            send_mail=serializer.validated_data["send_mail"],
        )

        payload = {
            "detail": result.message,
            "outcome": result.outcome.value,
            "state": result.event.state,
        }
        if not result.ok:
            logger.info(
                f"State change of event {event.pk} refused: {result.outcome.value}"
            )
        if result.reason is not None:
            payload["reason"] = result.reason.value
        if result.reason is transitions.Reason.NOTIFICATIONS_MISSING:
            payload["location"] = reverse(
                "conferences:call-for-papers",
                kwargs={"acronym": self.conference.acronym},
            )
        return Response(payload, status=TRANSITION_STATUS[result.outcome])
