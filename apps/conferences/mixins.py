from django.shortcuts import get_object_or_404
from django.utils.functional import cached_property

from .models import Conference


class ConferenceScopedMixin:
    """Resolve the conference from the ``acronym`` URL keyword argument."""

    conference_url_kwarg = "acronym"

    @cached_property
    def conference(self) -> Conference:
        return get_object_or_404(
            Conference, acronym=self.kwargs[self.conference_url_kwarg]
        )

    def get_serializer_context(self):
        context = super().get_serializer_context()
        # Schema generation instantiates views without URL kwargs
        if not getattr(self, "swagger_fake_view", False):
            context["conference"] = self.conference
        return context
