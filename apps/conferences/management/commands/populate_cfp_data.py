import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from faker import Faker

from apps.accounts.models import Person
from apps.conferences.models import (
    CallForPapers,
    Conference,
    ConferenceUser,
    Notification,
    Room,
    Track,
)
from apps.events.models import Event, EventFeedback, EventPerson, EventRating

User = get_user_model()

fake = Faker()


class Command(BaseCommand):
    help = "Populate database with a demo conference, its call for papers and events"

    def add_arguments(self, parser):
        parser.add_argument(
            "--acronym", default="democon", help="Acronym of the demo conference"
        )
        parser.add_argument(
            "--events", type=int, default=30, help="Number of events to create"
        )
        parser.add_argument(
            "--reviewers", type=int, default=3, help="Number of reviewers to create"
        )
        parser.add_argument(
            "--clear", action="store_true", help="Clear existing data before populating"
        )

    def handle(self, *args, **options):
        self.stdout.write("Starting data population...")

        if options["clear"]:
            self.clear_data(options["acronym"])

        with transaction.atomic():
            conference = self.create_conference(options["acronym"])
            reviewers = self.create_crew(conference, options["reviewers"])
            self.create_events(conference, reviewers, options["events"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Successfully populated conference {conference.acronym}!"
            )
        )

    def clear_data(self, acronym):
        """Clear the demo conference and everything hanging off it."""
        self.stdout.write("Clearing existing data...")
        count, _ = Conference.objects.filter(acronym=acronym).delete()
        self.stdout.write(f"Deleted {count} objects")

    def create_conference(self, acronym):
        conference, created = Conference.objects.get_or_create(
            acronym=acronym,
            defaults={
                "title": f"{fake.catch_phrase()} Conference",
                "email": fake.company_email(),
            },
        )
        if not created:
            self.stdout.write(f"Reusing conference {acronym}")
            return conference

        for _ in range(4):
            Track.objects.create(conference=conference, name=fake.word().title())
        for number in range(1, 4):
            Room.objects.create(
                conference=conference,
                name=f"Room {number}",
                size=random.choice([50, 120, 300]),
            )

        today = timezone.now().date()
        call_for_papers = CallForPapers.objects.create(
            conference=conference,
            start_date=today - timedelta(days=30),
            end_date=today + timedelta(days=30),
            hard_deadline=today + timedelta(days=37),
            welcome_text=fake.paragraph(),
            info_url=fake.url(),
            contact_email=conference.email,
        )
        Notification.objects.create(
            call_for_papers=call_for_papers,
            locale="en",
            accept_subject="Your submission %{event} was accepted",
            accept_body=(
                "Dear %{forename} %{surname},\n\n"
                "we are happy to accept %{event} for %{conference}."
            ),
            reject_subject="Your submission %{event} was not accepted",
            reject_body=(
                "Dear %{forename} %{surname},\n\n"
                "unfortunately %{event} could not be accepted for %{conference}."
            ),
        )
        self.stdout.write(f"Created conference {conference.title}")
        return conference

    def create_user(self, role=User.Role.CREW):
        first_name = fake.first_name()
        last_name = fake.last_name()
        user = User.objects.create_user(
            username=f"{fake.user_name()}{random.randint(100, 999)}",
            email=fake.unique.email(),
            password="password123",
            first_name=first_name,
            last_name=last_name,
            role=role,
        )
        person = user.person
        person.first_name = first_name
        person.last_name = last_name
        person.email = user.email
        person.save()
        return user

    def create_crew(self, conference, num_reviewers):
        orga = self.create_user()
        ConferenceUser.objects.create(
            conference=conference, user=orga, role=ConferenceUser.Role.ORGA
        )
        reviewers = []
        for _ in range(num_reviewers):
            user = self.create_user()
            ConferenceUser.objects.create(
                conference=conference, user=user, role=ConferenceUser.Role.REVIEWER
            )
            reviewers.append(user.person)
        self.stdout.write(
            f"Created orga {orga.username} and {num_reviewers} reviewers"
        )
        return reviewers

    def create_events(self, conference, reviewers, num_events):
        self.stdout.write(f"Creating {num_events} events...")
        tracks = list(conference.tracks.all())

        for _ in range(num_events):
            event = Event.objects.create(
                conference=conference,
                title=fake.catch_phrase(),
                subtitle=fake.sentence(nb_words=6),
                event_type=random.choice(Event.EventType.values),
                time_slots=conference.default_timeslots,
                language=random.choice(["en", "de"]),
                abstract=fake.paragraph(),
                description=fake.text(max_nb_chars=1000),
                track=random.choice(tracks) if tracks else None,
                do_not_record=random.random() < 0.1,
            )
            speaker = self.create_user(role=User.Role.SUBMITTER).person
            EventPerson.objects.create(
                event=event,
                person=speaker,
                event_role=EventPerson.EventRole.SUBMITTER,
            )
            EventPerson.objects.create(
                event=event,
                person=speaker,
                event_role=EventPerson.EventRole.SPEAKER,
                role_state=EventPerson.RoleState.CONFIRMED,
            )

            raters = random.sample(reviewers, k=random.randint(0, len(reviewers)))
            for reviewer in raters:
                EventRating.objects.create(
                    event=event,
                    person=reviewer,
                    rating=random.randint(1, 5),
                    comment=fake.sentence() if random.random() < 0.5 else "",
                )

            if random.random() < 0.3:
                event.start_review()
                event.save()

            for _ in range(random.randint(0, 3)):
                EventFeedback.objects.create(
                    event=event,
                    rating=random.randint(1, 5),
                    comment=fake.sentence(),
                )

        self.stdout.write(f"Created {Person.objects.count()} people in total")
