import logging

import reversion
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from reversion.models import Version

from apps.accounts.permissions import IsNotSubmitter

from .mixins import ConferenceScopedMixin
from .models import CallForPapers
from .permissions import ConferenceAbility
from .serializers import CallForPapersSerializer, VersionSerializer

logger = logging.getLogger(__name__)


class CallForPapersViewSet(ConferenceScopedMixin, viewsets.GenericViewSet):
    """
    The call for papers of a conference, a singular resource. Every change is
    recorded as a revision.
    """

    serializer_class = CallForPapersSerializer
    permission_classes = [IsNotSubmitter, ConferenceAbility]

    def get_object(self):
        obj = get_object_or_404(CallForPapers, conference=self.conference)
        self.check_object_permissions(self.request, obj)
        return obj

    @extend_schema(summary="Get the call for papers")
    def retrieve(self, request, *args, **kwargs):
        return Response(self.get_serializer(self.get_object()).data)

    @extend_schema(summary="Open the call for papers")
    def create(self, request, *args, **kwargs):
        if CallForPapers.objects.filter(conference=self.conference).exists():
            return Response(
                {"detail": "This conference already has a call for papers."},
                status=status.HTTP_409_CONFLICT,
            )
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self._save_revision(serializer, "Created call for papers")
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(summary="Update the call for papers")
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        serializer = self.get_serializer(
            self.get_object(), data=request.data, partial=partial
        )
        serializer.is_valid(raise_exception=True)
        self._save_revision(serializer, "Updated call for papers")
        return Response(serializer.data)

    def partial_update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return self.update(request, *args, **kwargs)

    @extend_schema(summary="Revision history", responses=VersionSerializer(many=True))
    @action(detail=False, methods=["get"])
    def versions(self, request, acronym=None):
        versions = Version.objects.get_for_object(self.get_object()).select_related(
            "revision", "revision__user"
        )
        return Response(VersionSerializer(versions, many=True).data)

    def _save_revision(self, serializer, comment):
        with reversion.create_revision():
            call_for_papers = serializer.save()
            reversion.set_user(self.request.user)
            reversion.set_comment(comment)
        logger.info(
            f"{comment} of {self.conference.acronym} by {self.request.user.username}"
        )
        return call_for_papers
