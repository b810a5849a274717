from rest_framework import permissions


class IsNotSubmitter(permissions.BasePermission):
    """
    Speakers without a crew role manage their proposals elsewhere and have no
    access to the conference management API.
    """

    message = "Submitters cannot access event management."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and not user.is_submitter)

