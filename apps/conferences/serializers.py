from django.db import transaction
from rest_framework import serializers
from rest_framework.exceptions import ValidationError

from apps.common.serializers import NestedAttributesSerializer, save_nested_attributes

from .models import CallForPapers, Notification


class NotificationSerializer(NestedAttributesSerializer):
    class Meta:
        model = Notification
        fields = [
            "id",
            "locale",
            "accept_subject",
            "accept_body",
            "reject_subject",
            "reject_body",
            "_destroy",
        ]


class CallForPapersSerializer(serializers.ModelSerializer):
    notifications = NotificationSerializer(many=True, required=False)
    conference = serializers.CharField(source="conference.acronym", read_only=True)

    class Meta:
        model = CallForPapers
        fields = [
            "id",
            "conference",
            "start_date",
            "end_date",
            "hard_deadline",
            "welcome_text",
            "info_url",
            "contact_email",
            "notifications",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, attrs):
        start_date = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end_date = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start_date and end_date and end_date < start_date:
            raise ValidationError(
                {"end_date": "End date must not be before start date."}
            )

        notifications = attrs.get("notifications")
        if notifications is not None:
            locales = self.resulting_locales(notifications)
            if len(locales) != len(set(locales)):
                raise ValidationError({"notifications": "Locales must be unique."})
        return attrs

    def resulting_locales(self, notifications):
        """Locales of the stored notifications once ``notifications`` is applied."""
        stored = {}
        if self.instance is not None:
            stored = dict(self.instance.notifications.values_list("pk", "locale"))
        added = []
        for item in notifications:
            pk = item.get("id")
            if pk is None:
                if not item.get("_destroy"):
                    added.append(item["locale"])
            elif pk in stored:
                if item.get("_destroy"):
                    del stored[pk]
                elif "locale" in item:
                    stored[pk] = item["locale"]
        return list(stored.values()) + added

    @transaction.atomic
    def create(self, validated_data):
        notifications = validated_data.pop("notifications", [])
        call_for_papers = CallForPapers.objects.create(
            conference=self.context["conference"], **validated_data
        )
        save_nested_attributes(
            call_for_papers, "notifications", notifications, "call_for_papers"
        )
        return call_for_papers

    @transaction.atomic
    def update(self, instance, validated_data):
        notifications = validated_data.pop("notifications", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        if notifications is not None:
            save_nested_attributes(
                instance, "notifications", notifications, "call_for_papers"
            )
        return instance


class VersionSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    date_created = serializers.DateTimeField(source="revision.date_created")
    user = serializers.CharField(source="revision.user", default=None)
    comment = serializers.CharField(source="revision.comment")
    field_dict = serializers.DictField()
