from django.db import transaction
from rest_framework import serializers
from rest_framework.exceptions import ValidationError

from apps.accounts.models import Person
from apps.common.serializers import NestedAttributesSerializer, save_nested_attributes

from .models import (
    Event,
    EventAttachment,
    EventPerson,
    EventRating,
    Link,
    Ticket,
)


class PersonSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="__str__", read_only=True)

    class Meta:
        model = Person
        fields = ["id", "name", "first_name", "last_name", "public_name", "email"]
        read_only_fields = fields


class EventPersonSerializer(NestedAttributesSerializer):
    person_name = serializers.CharField(source="person.__str__", read_only=True)

    class Meta:
        model = EventPerson
        fields = ["id", "person", "person_name", "event_role", "role_state", "_destroy"]


class EventPersonDetailSerializer(serializers.ModelSerializer):
    person = PersonSerializer(read_only=True)

    class Meta:
        model = EventPerson
        fields = ["id", "person", "event_role", "role_state"]
        read_only_fields = fields


class EventAttachmentSerializer(NestedAttributesSerializer):
    class Meta:
        model = EventAttachment
        fields = ["id", "title", "attachment", "public", "_destroy"]
        extra_kwargs = {"attachment": {"required": False}}


class LinkSerializer(NestedAttributesSerializer):
    class Meta:
        model = Link
        fields = ["id", "title", "url", "_destroy"]


class TicketSerializer(serializers.ModelSerializer):
    _destroy = serializers.BooleanField(required=False, default=False, write_only=True)

    class Meta:
        model = Ticket
        fields = ["id", "remote_ticket_id", "_destroy"]
        read_only_fields = ["id"]


class EventListSerializer(serializers.ModelSerializer):
    """Compact representation for event tables."""

    track_name = serializers.CharField(
        source="track.name", read_only=True, default=None
    )
    speakers = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "subtitle",
            "event_type",
            "state",
            "track",
            "track_name",
            "language",
            "public",
            "speakers",
            "event_ratings_count",
            "average_rating",
            "created_at",
        ]
        read_only_fields = fields

    def get_speakers(self, obj):
        return [
            str(ep.person)
            for ep in obj.event_people.all()
            if ep.event_role in EventPerson.SPEAKER_ROLES
        ]


class EventFeedbackSummarySerializer(EventListSerializer):
    feedbacks_count = serializers.IntegerField(read_only=True)
    average_feedback = serializers.FloatField(read_only=True)

    class Meta(EventListSerializer.Meta):
        fields = EventListSerializer.Meta.fields + [
            "feedbacks_count",
            "average_feedback",
        ]
        read_only_fields = fields


class EventFormSerializer(serializers.ModelSerializer):
    """Scalar event attributes as edited by organizers."""

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "subtitle",
            "event_type",
            "state",
            "time_slots",
            "start_time",
            "public",
            "language",
            "abstract",
            "description",
            "logo",
            "track",
            "room",
            "note",
            "submission_note",
            "do_not_record",
            "recording_license",
        ]
        read_only_fields = ["id", "state"]

    def _validate_in_conference(self, value, label):
        conference = self.context.get("conference")
        if value is not None and conference is not None:
            if value.conference_id != conference.pk:
                raise ValidationError(f"{label} belongs to another conference.")
        return value

    def validate_track(self, value):
        return self._validate_in_conference(value, "Track")

    def validate_room(self, value):
        return self._validate_in_conference(value, "Room")


class EventCreateUpdateSerializer(EventFormSerializer):
    """Event attributes plus nested attachments, links, people and ticket."""

    event_attachments = EventAttachmentSerializer(many=True, required=False)
    links = LinkSerializer(many=True, required=False)
    event_people = EventPersonSerializer(many=True, required=False)
    ticket = TicketSerializer(required=False, allow_null=True)

    NESTED = ("event_attachments", "links", "event_people")

    class Meta(EventFormSerializer.Meta):
        fields = EventFormSerializer.Meta.fields + [
            "event_attachments",
            "links",
            "event_people",
            "ticket",
        ]

    @transaction.atomic
    def create(self, validated_data) -> Event:
        nested = {name: validated_data.pop(name, []) for name in self.NESTED}
        ticket = validated_data.pop("ticket", None)
        validated_data["conference"] = self.context["conference"]

        event = Event.objects.create(**validated_data)
        self._save_nested(event, nested, ticket)
        return event

    @transaction.atomic
    def update(self, instance, validated_data) -> Event:
        nested = {name: validated_data.pop(name, None) for name in self.NESTED}
        has_ticket = "ticket" in validated_data
        ticket = validated_data.pop("ticket", None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        self._save_nested(
            instance,
            {name: items for name, items in nested.items() if items is not None},
            ticket,
            has_ticket=has_ticket,
        )
        return instance

    def _save_nested(self, event, nested, ticket, has_ticket=True):
        for related_name, items in nested.items():
            save_nested_attributes(event, related_name, items, "event")

        if not has_ticket or ticket is None:
            return
        if ticket.pop("_destroy", False):
            Ticket.objects.filter(event=event).delete()
        else:
            Ticket.objects.update_or_create(event=event, defaults=ticket)


class EventDetailSerializer(EventCreateUpdateSerializer):
    event_people = EventPersonDetailSerializer(many=True, read_only=True)
    track_name = serializers.CharField(
        source="track.name", read_only=True, default=None
    )
    room_name = serializers.CharField(source="room.name", read_only=True, default=None)

    class Meta(EventCreateUpdateSerializer.Meta):
        fields = EventCreateUpdateSerializer.Meta.fields + [
            "track_name",
            "room_name",
            "event_ratings_count",
            "average_rating",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class EventRatingSerializer(serializers.ModelSerializer):
    person = PersonSerializer(read_only=True)

    class Meta:
        model = EventRating
        fields = [
            "id",
            "event",
            "person",
            "rating",
            "comment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "event", "person", "created_at", "updated_at"]


class UpdateStateSerializer(serializers.Serializer):
    transition = serializers.CharField()
    send_mail = serializers.BooleanField(required=False, default=False)
