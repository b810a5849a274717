import logging
from datetime import timedelta

from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import Avg, Count
from django.utils import timezone

from apps.events.models import Event

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Perform maintenance tasks for events app"

    def add_arguments(self, parser):
        parser.add_argument(
            "--recount-ratings",
            action="store_true",
            help="Recompute cached rating counts and averages",
        )
        parser.add_argument(
            "--stale-reviews",
            action="store_true",
            help="List events waiting for review without any rating",
        )
        parser.add_argument(
            "--days",
            type=int,
            default=14,
            help="Age in days after which an unrated event is stale (default: 14)",
        )
        parser.add_argument(
            "--conference",
            help="Only process events of the conference with this acronym",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be done without making changes",
        )

    def handle(self, *args, **options):
        self.dry_run = options["dry_run"]
        self.events = Event.objects.all()
        if options["conference"]:
            self.events = self.events.filter(
                conference__acronym=options["conference"]
            )

        if self.dry_run:
            self.stdout.write(
                self.style.WARNING("DRY RUN MODE - No changes will be made")
            )

        if options["recount_ratings"]:
            self.recount_ratings()

        if options["stale_reviews"]:
            self.list_stale_reviews(options["days"])

        # If no specific task is specified, run all maintenance tasks
        if not any([options["recount_ratings"], options["stale_reviews"]]):
            self.stdout.write("Running all maintenance tasks...")
            self.recount_ratings()
            self.list_stale_reviews(options["days"])

        self.stdout.write(
            self.style.SUCCESS("Event maintenance completed successfully")
        )

    def recount_ratings(self):
        """Fix events whose cached rating stats drifted from their ratings."""
        self.stdout.write("Recounting event ratings...")

        stats = self.events.annotate(
            actual_count=Count("event_ratings"),
            actual_average=Avg("event_ratings__rating"),
        )

        fixed = 0
        with transaction.atomic():
            for event in stats:
                if (
                    event.event_ratings_count == event.actual_count
                    and event.average_rating == event.actual_average
                ):
                    continue
                fixed += 1
                self.stdout.write(
                    f"  {event.title}: {event.event_ratings_count} -> "
                    f"{event.actual_count} ratings"
                )
                if not self.dry_run:
                    Event.objects.filter(pk=event.pk).update(
                        event_ratings_count=event.actual_count,
                        average_rating=event.actual_average,
                    )

        if fixed:
            logger.info(f"Recounted ratings of {fixed} events")
        self.stdout.write(f"Fixed rating stats of {fixed} events")

    def list_stale_reviews(self, days):
        """Report reviewable events nobody rated within ``days``."""
        self.stdout.write(f"Looking for events without ratings after {days} days...")

        cutoff = timezone.now() - timedelta(days=days)
        stale = (
            self.events.for_review()
            .filter(event_ratings_count=0, created_at__lt=cutoff)
            .select_related("conference")
            .order_by("created_at")
        )

        count = stale.count()
        if count == 0:
            self.stdout.write("No stale reviews")
            return

        for event in stale:
            self.stdout.write(
                f"  [{event.conference.acronym}] {event.title} "
                f"({event.state}, submitted {event.created_at:%Y-%m-%d})"
            )
        self.stdout.write(self.style.WARNING(f"Found {count} stale reviews"))
