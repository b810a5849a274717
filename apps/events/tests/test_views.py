"""
View tests for the events API.
"""

import smtplib
from unittest.mock import patch

from django.core import mail
from django.urls import reverse
from guardian.shortcuts import assign_perm
from rest_framework import status

from apps.accounts.models import Person

from ..models import Event, EventFeedback, EventPerson, EventRating, Link, Ticket
from .base import BaseViewTestCase


class EventAccessTest(BaseViewTestCase):
    """Who may use the events API at all."""

    def test_unauthenticated(self):
        response = self.client.get(self.list_url())
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_submitter_is_denied(self):
        self.authenticate(self.submitter)

        for url in (self.list_url(), self.event_url(self.talk)):
            response = self.client.get(url)
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
            self.assertEqual(
                response.data["detail"], "Submitters cannot access event management."
            )

    def test_unknown_conference(self):
        self.authenticate(self.admin)
        url = reverse("events:event-list", kwargs={"acronym": "nope"})

        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_event_of_other_conference_is_not_found(self):
        self.authenticate(self.admin)
        url = reverse(
            "events:event-detail",
            kwargs={"acronym": self.conference.acronym, "pk": self.foreign_event.pk},
        )

        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_crew_without_role_sees_nothing(self):
        self.authenticate(self.crew)

        response = self.client.get(self.list_url())
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["results"], [])

        response = self.client.get(self.event_url(self.talk))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_object_grant_opens_single_event(self):
        assign_perm("events.view_event", self.crew, self.talk)
        self.authenticate(self.crew)

        response = self.client.get(self.list_url())
        self.assertEqual(self.titles(response), ["Hardening Linux"])

        response = self.client.get(self.event_url(self.talk))
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class EventListViewTest(BaseViewTestCase):
    def test_index(self):
        self.authenticate()

        response = self.client.get(self.list_url())

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.titles(response), ["Hardening Linux", "Python Packaging"])
        self.assertEqual(response.data["pagination"]["count"], 2)
        talk = next(e for e in response.data["results"] if e["id"] == self.talk.pk)
        self.assertEqual(talk["track_name"], "Security")
        self.assertEqual(talk["speakers"], [str(self.speaker)])

    def test_search_term(self):
        self.authenticate(self.reviewer)

        response = self.client.get(self.list_url(), {"term": "kernel"})
        self.assertEqual(self.titles(response), ["Hardening Linux"])

        response = self.client.get(self.list_url(), {"term": "workshop"})
        self.assertEqual(self.titles(response), ["Python Packaging"])

    def test_structured_filter_and_sort(self):
        self.authenticate()

        response = self.client.get(self.list_url(), {"language": "de"})
        self.assertEqual(self.titles(response), ["Python Packaging"])

        response = self.client.get(self.list_url(), {"s": "-title"})
        self.assertEqual(
            [e["title"] for e in response.data["results"]],
            ["Python Packaging", "Hardening Linux"],
        )

    def test_page_size(self):
        self.authenticate()

        response = self.client.get(self.list_url(), {"page_size": 1, "page": 2})

        self.assertEqual(len(response.data["results"]), 1)
        self.assertEqual(response.data["pagination"]["current_page"], 2)
        self.assertEqual(response.data["pagination"]["total_pages"], 2)

    def test_xml_format(self):
        self.authenticate()

        response = self.client.get(self.list_url(), {"format": "xml"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response["Content-Type"].startswith("application/xml"))
        self.assertIn(b"Hardening Linux", response.content)

    def test_my(self):
        EventPerson.objects.create(
            event=self.workshop,
            person=self.coordinator.person,
            event_role=EventPerson.EventRole.COORDINATOR,
        )
        self.authenticate(self.coordinator)

        response = self.client.get(self.list_url("my"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.titles(response), ["Python Packaging"])


class EventCardsViewTest(BaseViewTestCase):
    def test_cards_pdf(self):
        self.authenticate()

        response = self.client.get(self.list_url("cards"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertTrue(response.content.startswith(b"%PDF"))
        self.assertIn("froscon-cards.pdf", response["Content-Disposition"])

    def test_cards_accepted_only_without_events(self):
        self.authenticate()

        response = self.client.get(self.list_url("cards"), {"accepted": "1"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_cards_need_crud_ability(self):
        self.authenticate(self.reviewer)

        response = self.client.get(self.list_url("cards"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class EventReviewViewTest(BaseViewTestCase):
    def test_ratings_totals(self):
        other = Person.objects.create(first_name="Other")
        EventRating.objects.create(event=self.talk, person=other, rating=4)
        EventRating.objects.create(
            event=self.workshop, person=self.reviewer.person, rating=2
        )
        self.authenticate(self.reviewer)

        response = self.client.get(self.list_url("ratings"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data["totals"],
            {
                "events_total": 2,
                "events_reviewed_total": 2,
                "events_no_review_total": 0,
                "events_reviewed": 1,
                "events_no_review": 1,
            },
        )
        self.assertEqual(len(response.data["results"]), 2)

    def test_reviewer_sees_cleaned_attributes(self):
        self.authenticate(self.reviewer)
        response = self.client.get(self.event_url(self.talk))
        self.assertEqual(response.data["note"], "")
        self.assertEqual(response.data["submission_note"], "")

        self.authenticate(self.orga)
        response = self.client.get(self.event_url(self.talk))
        self.assertEqual(response.data["note"], "internal only")

    def test_feedbacks(self):
        Event.objects.filter(pk=self.workshop.pk).update(state=Event.State.CONFIRMED)
        EventFeedback.objects.create(event=self.workshop, rating=5)
        EventFeedback.objects.create(event=self.workshop, rating=3)
        EventFeedback.objects.create(event=self.talk, rating=1)
        self.authenticate(self.coordinator)

        response = self.client.get(self.list_url("feedbacks"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["results"]), 1)
        workshop = response.data["results"][0]
        self.assertEqual(workshop["feedbacks_count"], 2)
        self.assertEqual(workshop["average_feedback"], 4.0)

    def test_feedbacks_denied_to_reviewer(self):
        self.authenticate(self.reviewer)
        response = self.client.get(self.list_url("feedbacks"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_start_review_then_rate(self):
        self.authenticate(self.reviewer)

        response = self.client.post(self.list_url("start-review"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["review_ids"], [self.talk.pk, self.workshop.pk])
        self.assertEqual(response.data["next_event"], self.talk.pk)
        self.assertEqual(response.data["location"], self.event_url(self.talk, "rating"))

        response = self.client.put(
            self.event_url(self.talk, "rating"), {"rating": 4, "comment": "solid"}
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["next_event"], self.workshop.pk)
        self.talk.refresh_from_db()
        self.assertEqual(self.talk.event_ratings_count, 1)
        self.assertEqual(self.talk.average_rating, 4.0)

    def test_start_review_when_everything_is_rated(self):
        for event in (self.talk, self.workshop):
            EventRating.objects.create(
                event=event, person=self.reviewer.person, rating=3
            )
        self.authenticate(self.reviewer)

        response = self.client.post(self.list_url("start-review"))

        self.assertEqual(
            response.data["detail"], "You have already reviewed all events."
        )
        self.assertEqual(response.data["review_ids"], [])

    def test_rating_lifecycle(self):
        self.authenticate(self.reviewer)
        url = self.event_url(self.talk, "rating")

        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.put(url, {"rating": 3})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.put(url, {"rating": 5, "comment": "changed my mind"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(EventRating.objects.get().rating, 5)

        response = self.client.get(url)
        self.assertEqual(response.data["comment"], "changed my mind")

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(EventRating.objects.exists())

    def test_rating_out_of_range(self):
        self.authenticate(self.reviewer)

        response = self.client.put(self.event_url(self.talk, "rating"), {"rating": 6})

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertIn("rating", response.data)


class EventDetailViewTest(BaseViewTestCase):
    def test_show(self):
        self.authenticate(self.reviewer)

        response = self.client.get(self.event_url(self.talk))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["title"], "Hardening Linux")
        self.assertEqual(response.data["state"], "new")
        self.assertEqual(response.data["track_name"], "Security")
        self.assertEqual(
            response.data["event_people"][0]["person"]["id"], self.speaker.pk
        )

    def test_people(self):
        self.authenticate(self.reviewer)

        response = self.client.get(self.event_url(self.talk, "people"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["event_role"], "speaker")

    def test_new(self):
        self.authenticate()

        response = self.client.get(self.list_url("new"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["id"])
        self.assertEqual(response.data["state"], "new")
        self.assertEqual(response.data["time_slots"], self.conference.default_timeslots)
        self.assertFalse(Event.objects.filter(title="").exists())

    def test_new_denied_to_reviewer(self):
        self.authenticate(self.reviewer)
        response = self.client.get(self.list_url("new"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_edit_and_edit_people(self):
        self.authenticate(self.coordinator)

        response = self.client.get(self.event_url(self.talk, "edit"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["note"], "internal only")

        response = self.client.get(self.event_url(self.talk, "edit-people"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["event_people"][0]["person"], self.speaker.pk)

    def test_edit_denied_to_reviewer(self):
        self.authenticate(self.reviewer)
        response = self.client.get(self.event_url(self.talk, "edit"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class EventCreateUpdateViewTest(BaseViewTestCase):
    def test_create(self):
        self.authenticate(self.coordinator)
        data = {
            "title": "Container Escapes",
            "event_type": "lecture",
            "track": self.track.pk,
            "links": [{"title": "Slides", "url": "https://example.com/slides"}],
            "event_people": [{"person": self.speaker.pk, "event_role": "speaker"}],
            "ticket": {"remote_ticket_id": "RT-42"},
        }

        response = self.client.post(self.list_url(), data)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        event = Event.objects.get(title="Container Escapes")
        self.assertEqual(response["Location"], self.event_url(event))
        self.assertEqual(event.conference, self.conference)
        self.assertEqual(event.state, Event.State.NEW)
        self.assertEqual(event.links.get().title, "Slides")
        self.assertEqual(event.ticket.remote_ticket_id, "RT-42")
        self.assertEqual(list(event.speakers), [self.speaker])
        self.assertTrue(self.coordinator.has_perm("events.change_event", event))

    def test_create_ignores_state(self):
        self.authenticate()

        response = self.client.post(
            self.list_url(), {"title": "Sneaky", "state": "confirmed"}
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["state"], "new")

    def test_create_invalid(self):
        self.authenticate()

        response = self.client.post(self.list_url(), {"subtitle": "no title"})

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertIn("title", response.data)

    def test_create_with_track_of_other_conference(self):
        self.authenticate()

        response = self.client.post(
            self.list_url(), {"title": "Lost", "track": self.other_track.pk}
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertIn("track", response.data)

    def test_create_denied_to_reviewer(self):
        self.authenticate(self.reviewer)
        response = self.client.post(self.list_url(), {"title": "Nope"})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_nested_attributes(self):
        slides = Link.objects.create(
            event=self.talk, title="Slides", url="https://example.com/slides"
        )
        Ticket.objects.create(event=self.talk, remote_ticket_id="RT-1")
        speaker_role = self.talk.event_people.get()
        self.authenticate()

        response = self.client.patch(
            self.event_url(self.talk),
            {
                "subtitle": "Now with eBPF",
                "state": "confirmed",
                "links": [
                    {"id": slides.pk, "_destroy": True},
                    {"title": "Video", "url": "https://example.com/video"},
                ],
                "event_people": [{"id": speaker_role.pk, "event_role": "moderator"}],
                "ticket": {"_destroy": True},
            },
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.talk.refresh_from_db()
        self.assertEqual(self.talk.subtitle, "Now with eBPF")
        self.assertEqual(self.talk.state, Event.State.NEW)
        self.assertEqual([link.title for link in self.talk.links.all()], ["Video"])
        self.assertFalse(Ticket.objects.filter(event=self.talk).exists())
        speaker_role.refresh_from_db()
        self.assertEqual(speaker_role.event_role, "moderator")
        self.assertEqual(response.data["links"][0]["title"], "Video")

    def test_put_destroys_nested_child_by_id(self):
        slides = Link.objects.create(
            event=self.talk, title="Slides", url="https://example.com/slides"
        )
        video = Link.objects.create(
            event=self.talk, title="Video", url="https://example.com/video"
        )
        self.authenticate()

        response = self.client.put(
            self.event_url(self.talk),
            {
                "title": self.talk.title,
                "links": [
                    {"id": slides.pk, "_destroy": True},
                    {"id": video.pk, "title": "Recording"},
                ],
            },
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Link.objects.filter(pk=slides.pk).exists())
        video.refresh_from_db()
        self.assertEqual(video.title, "Recording")
        self.assertEqual(video.url, "https://example.com/video")

    def test_put_still_requires_fields_of_new_children(self):
        self.authenticate()

        response = self.client.put(
            self.event_url(self.talk),
            {"title": self.talk.title, "links": [{"title": "No url"}]},
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertIn("url", response.data["links"][0])

    def test_update_rejects_foreign_nested_ids(self):
        foreign_link = Link.objects.create(
            event=self.foreign_event, title="Theirs", url="https://example.com/x"
        )
        self.authenticate()

        response = self.client.patch(
            self.event_url(self.talk),
            {"links": [{"id": foreign_link.pk, "title": "Mine"}]},
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        foreign_link.refresh_from_db()
        self.assertEqual(foreign_link.title, "Theirs")

    def test_update_with_object_grant(self):
        assign_perm("events.view_event", self.crew, self.talk)
        assign_perm("events.change_event", self.crew, self.talk)
        self.authenticate(self.crew)

        response = self.client.patch(self.event_url(self.talk), {"title": "Renamed"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.talk.refresh_from_db()
        self.assertEqual(self.talk.title, "Renamed")

    def test_destroy(self):
        self.authenticate(self.coordinator)
        response = self.client.delete(self.event_url(self.talk))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.authenticate(self.orga)
        response = self.client.delete(self.event_url(self.talk))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Event.objects.filter(pk=self.talk.pk).exists())


class EventUpdateStateViewTest(BaseViewTestCase):
    def update_state(self, event, transition, send_mail=False):
        return self.client.post(
            self.event_url(event, "update-state"),
            {"transition": transition, "send_mail": send_mail},
        )

    def test_success(self):
        self.authenticate(self.coordinator)

        response = self.update_state(self.talk, "accept")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["detail"], "Event was successfully updated.")
        self.assertEqual(response.data["state"], "unconfirmed")
        self.assertTrue(
            self.talk.event_people.filter(
                person=self.coordinator.person,
                event_role=EventPerson.EventRole.COORDINATOR,
            ).exists()
        )

    def test_unknown_transition(self):
        self.authenticate()

        response = self.update_state(self.talk, "destroy")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["reason"], "unknown_transition")
        self.assertEqual(response.data["state"], "new")

    def test_not_allowed_from_state(self):
        self.authenticate()

        response = self.update_state(self.talk, "schedule")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["reason"], "not_allowed")

    def test_missing_notifications_points_to_call_for_papers(self):
        self.authenticate()

        response = self.update_state(self.talk, "accept", send_mail=True)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["reason"], "notifications_missing")
        self.assertEqual(
            response.data["location"],
            reverse(
                "conferences:call-for-papers",
                kwargs={"acronym": self.conference.acronym},
            ),
        )
        self.talk.refresh_from_db()
        self.assertEqual(self.talk.state, Event.State.NEW)

    def test_accept_with_mail(self):
        self.create_notification(self.conference)
        self.authenticate()

        response = self.update_state(self.talk, "accept", send_mail=True)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, [self.speaker.email])

    def test_mail_failure(self):
        self.create_notification(self.conference)
        self.authenticate()

        with patch(
            "django.core.mail.EmailMessage.send",
            side_effect=smtplib.SMTPException("mail server down"),
        ):
            response = self.update_state(self.talk, "reject", send_mail=True)

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(
            response.data["detail"], "Cannot send mails: mail server down."
        )
        self.assertEqual(response.data["state"], "new")
        self.talk.refresh_from_db()
        self.assertEqual(self.talk.state, Event.State.NEW)

    def test_header_error_is_reported_as_mail_failure(self):
        self.create_notification(self.conference)
        self.talk.title = "Hardening\nLinux"
        self.talk.save()
        self.authenticate()

        response = self.update_state(self.talk, "accept", send_mail=True)

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data["outcome"], "mail_failed")
        self.assertEqual(response.data["state"], "new")
        self.assertEqual(len(mail.outbox), 0)

    def test_reviewer_cannot_change_state(self):
        self.authenticate(self.reviewer)

        response = self.update_state(self.talk, "accept")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.talk.refresh_from_db()
        self.assertEqual(self.talk.state, Event.State.NEW)
