from rest_framework import permissions

from .models import ConferenceUser


def conference_role(user, conference):
    """Return the user's role in ``conference`` or None."""
    if not user or not user.is_authenticated:
        return None
    return (
        ConferenceUser.objects.filter(conference=conference, user=user)
        .values_list("role", flat=True)
        .first()
    )


def is_admin(user):
    return bool(user and user.is_authenticated and user.is_admin)


def can_manage_conference(user, conference):
    return (
        is_admin(user)
        or conference_role(user, conference) == ConferenceUser.Role.ORGA
    )


def can_view_conference(user, conference):
    return is_admin(user) or conference_role(user, conference) is not None


class ConferenceAbility(permissions.BasePermission):
    """Crew of a conference may read its settings; orga may change them."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return can_view_conference(request.user, view.conference)
        return can_manage_conference(request.user, view.conference)
