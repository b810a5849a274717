from django.contrib import admin
from reversion.admin import VersionAdmin

from .models import CallForPapers, Conference, ConferenceUser, Notification, Room, Track


class ConferenceUserInline(admin.TabularInline):
    model = ConferenceUser
    extra = 0
    raw_id_fields = ["user"]


class TrackInline(admin.TabularInline):
    model = Track
    extra = 0


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0


class NotificationInline(admin.StackedInline):
    model = Notification
    extra = 0


@admin.register(Conference)
class ConferenceAdmin(admin.ModelAdmin):
    list_display = ["title", "acronym", "email", "created_at"]
    search_fields = ["title", "acronym"]
    prepopulated_fields = {"acronym": ("title",)}
    inlines = [ConferenceUserInline, TrackInline, RoomInline]


@admin.register(CallForPapers)
class CallForPapersAdmin(VersionAdmin):
    list_display = ["__str__", "start_date", "end_date", "hard_deadline"]
    inlines = [NotificationInline]
