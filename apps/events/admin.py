from django.contrib import admin
from django_fsm import can_proceed
from guardian.admin import GuardedModelAdmin

from .models import (
    Event,
    EventAttachment,
    EventFeedback,
    EventPerson,
    EventRating,
    Link,
    Ticket,
)


class EventPersonInline(admin.TabularInline):
    model = EventPerson
    extra = 0
    raw_id_fields = ["person"]


class EventAttachmentInline(admin.TabularInline):
    model = EventAttachment
    extra = 0


class LinkInline(admin.TabularInline):
    model = Link
    extra = 0


class TicketInline(admin.StackedInline):
    model = Ticket
    extra = 0


class EventRatingInline(admin.TabularInline):
    model = EventRating
    extra = 0
    raw_id_fields = ["person"]
    readonly_fields = ["created_at"]


@admin.register(Event)
class EventAdmin(GuardedModelAdmin):
    list_display = [
        "title",
        "conference",
        "event_type",
        "state",
        "track",
        "event_ratings_count",
        "average_rating",
        "created_at",
    ]
    list_filter = ["state", "event_type", "conference", "track"]
    search_fields = ["title", "subtitle", "abstract"]
    readonly_fields = ["state", "event_ratings_count", "average_rating"]
    inlines = [
        EventPersonInline,
        EventAttachmentInline,
        LinkInline,
        TicketInline,
        EventRatingInline,
    ]
    actions = ["start_review"]

    @admin.action(description="Start review of selected new events")
    def start_review(self, request, queryset):
        started = 0
        for event in queryset:
            if can_proceed(event.start_review):
                event.start_review()
                event.save()
                started += 1
        self.message_user(request, f"Started review of {started} event(s).")


@admin.register(EventFeedback)
class EventFeedbackAdmin(admin.ModelAdmin):
    list_display = ["event", "rating", "created_at"]
    list_filter = ["rating"]
    raw_id_fields = ["event"]
