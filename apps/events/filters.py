import django_filters
from django.db.models import Q

from apps.conferences.models import Track

from .models import Event


class EventFilter(django_filters.FilterSet):
    """
    Search for events.

    A non-empty ``term`` searches title, description, abstract and track name
    and matches the event type exactly, all OR-combined; besides it only the
    ``s`` ordering is honoured. Without ``term`` the structured filters apply.
    """

    term = django_filters.CharFilter(method="filter_term")

    title = django_filters.CharFilter(lookup_expr="icontains")
    subtitle = django_filters.CharFilter(lookup_expr="icontains")
    abstract = django_filters.CharFilter(lookup_expr="icontains")
    description = django_filters.CharFilter(lookup_expr="icontains")
    state = django_filters.MultipleChoiceFilter(choices=Event.State.choices)
    event_type = django_filters.MultipleChoiceFilter(choices=Event.EventType.choices)
    track = django_filters.ModelMultipleChoiceFilter(queryset=Track.objects.all())
    track_name = django_filters.CharFilter(
        field_name="track__name", lookup_expr="icontains"
    )
    language = django_filters.CharFilter(lookup_expr="iexact")
    public = django_filters.BooleanFilter()
    do_not_record = django_filters.BooleanFilter()
    speaker = django_filters.CharFilter(method="filter_speaker")
    rated = django_filters.BooleanFilter(method="filter_rated")
    created_at = django_filters.DateTimeFromToRangeFilter()

    s = django_filters.OrderingFilter(
        fields=(
            ("title", "title"),
            ("state", "state"),
            ("event_type", "event_type"),
            ("track__name", "track_name"),
            ("language", "language"),
            ("average_rating", "average_rating"),
            ("event_ratings_count", "event_ratings_count"),
            ("start_time", "start_time"),
            ("created_at", "created_at"),
        )
    )

    class Meta:
        model = Event
        fields = [
            "term",
            "title",
            "subtitle",
            "abstract",
            "description",
            "state",
            "event_type",
            "track",
            "track_name",
            "language",
            "public",
            "do_not_record",
            "speaker",
            "rated",
            "created_at",
        ]

    def filter_queryset(self, queryset):
        term = self.form.cleaned_data.get("term")
        if term:
            queryset = self.filter_term(queryset, "term", term)
            return self.filters["s"].filter(queryset, self.form.cleaned_data.get("s"))
        return super().filter_queryset(queryset)

    def filter_term(self, queryset, name, value):
        return queryset.filter(
            Q(title__icontains=value)
            | Q(description__icontains=value)
            | Q(abstract__icontains=value)
            | Q(track__name__icontains=value)
            | Q(event_type=value)
        )

    def filter_speaker(self, queryset, name, value):
        return queryset.filter(
            Q(event_people__person__public_name__icontains=value)
            | Q(event_people__person__first_name__icontains=value)
            | Q(event_people__person__last_name__icontains=value)
        )

    def filter_rated(self, queryset, name, value):
        """Filter events by whether they have any rating."""
        if value is True:
            return queryset.filter(event_ratings_count__gt=0)
        elif value is False:
            return queryset.filter(event_ratings_count=0)
        return queryset
