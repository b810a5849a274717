"""
Permissions for the events app.

Abilities are plain functions of an explicit ``(user, conference)`` or
``(user, event)`` pair so they can be used from views, serializers and
services alike. The DRF permission classes at the bottom map viewset actions
onto them.
"""

from guardian.shortcuts import get_objects_for_user
from rest_framework import permissions

from apps.conferences.models import ConferenceUser
from apps.conferences.permissions import conference_role, is_admin

CRUD_ROLES = (ConferenceUser.Role.ORGA, ConferenceUser.Role.COORDINATOR)
READ_ROLES = CRUD_ROLES + (ConferenceUser.Role.REVIEWER,)


def can_crud_events(user, conference):
    return is_admin(user) or conference_role(user, conference) in CRUD_ROLES


def can_read_events(user, conference):
    return is_admin(user) or conference_role(user, conference) in READ_ROLES


def can_rate_events(user, conference):
    return can_read_events(user, conference)


def can_access_feedback(user, conference):
    return can_crud_events(user, conference)


def can_read_event(user, event):
    if can_read_events(user, event.conference):
        return True
    return user.has_perm("events.view_event", event)


def can_update_event(user, event):
    if can_crud_events(user, event.conference):
        return True
    return user.has_perm("events.change_event", event)


def can_destroy_event(user, event):
    return (
        is_admin(user)
        or conference_role(user, event.conference) == ConferenceUser.Role.ORGA
    )


def accessible_events(user, conference, queryset):
    """Restrict ``queryset`` to the events ``user`` may read."""
    if can_read_events(user, conference):
        return queryset
    granted = get_objects_for_user(
        user,
        "events.view_event",
        klass=queryset.model.objects.filter(conference=conference),
        accept_global_perms=False,
    )
    return queryset.filter(pk__in=granted.values_list("pk", flat=True))


class EventAbility(permissions.BasePermission):
    """
    Per-action abilities for ``EventViewSet``. The view must expose the
    conference it is scoped to as ``view.conference``.
    """

    conference_abilities = {
        "cards": can_crud_events,
        "new": can_crud_events,
        "create": can_crud_events,
        "ratings": can_rate_events,
        "start_review": can_rate_events,
        "rating": can_rate_events,
        "feedbacks": can_access_feedback,
    }
    object_abilities = {
        "retrieve": can_read_event,
        "people": can_read_event,
        "rating": can_read_event,
        "edit": can_update_event,
        "edit_people": can_update_event,
        "update": can_update_event,
        "partial_update": can_update_event,
        "update_state": can_update_event,
        "destroy": can_destroy_event,
    }

    def has_permission(self, request, view):
        ability = self.conference_abilities.get(view.action)
        if ability is None:
            # list, my and object actions are narrowed by queryset or object
            return True
        return ability(request.user, view.conference)

    def has_object_permission(self, request, view, obj):
        ability = self.object_abilities.get(view.action)
        if ability is None:
            return False
        return ability(request.user, obj)
