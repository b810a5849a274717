from django.test import TestCase
from guardian.shortcuts import assign_perm

from apps.conferences.models import ConferenceUser

from ..models import Event
from ..permissions import (
    accessible_events,
    can_crud_events,
    can_destroy_event,
    can_rate_events,
    can_read_event,
    can_read_events,
    can_update_event,
)
from .base import CFPTestMixin


class AbilityTests(CFPTestMixin, TestCase):
    def setUp(self):
        self.conference = self.create_conference()
        self.other_conference = self.create_conference("othercon")
        self.event = self.create_event(self.conference)

        self.admin = self.create_user("admin", role="admin")
        self.superuser = self.create_user("root", is_superuser=True)
        self.orga = self.create_crew_member(
            self.conference, "orga", ConferenceUser.Role.ORGA
        )
        self.coordinator = self.create_crew_member(
            self.conference, "coordinator", ConferenceUser.Role.COORDINATOR
        )
        self.reviewer = self.create_crew_member(
            self.conference, "reviewer", ConferenceUser.Role.REVIEWER
        )
        self.crew = self.create_user("crew")

    def test_admin_can_do_everything(self):
        for user in (self.admin, self.superuser):
            self.assertTrue(can_crud_events(user, self.conference))
            self.assertTrue(can_destroy_event(user, self.event))
            self.assertTrue(can_crud_events(user, self.other_conference))

    def test_orga(self):
        self.assertTrue(can_crud_events(self.orga, self.conference))
        self.assertTrue(can_update_event(self.orga, self.event))
        self.assertTrue(can_destroy_event(self.orga, self.event))
        self.assertFalse(can_crud_events(self.orga, self.other_conference))

    def test_coordinator_cannot_destroy(self):
        self.assertTrue(can_crud_events(self.coordinator, self.conference))
        self.assertTrue(can_update_event(self.coordinator, self.event))
        self.assertFalse(can_destroy_event(self.coordinator, self.event))

    def test_reviewer_reads_and_rates(self):
        self.assertTrue(can_read_events(self.reviewer, self.conference))
        self.assertTrue(can_rate_events(self.reviewer, self.conference))
        self.assertTrue(can_read_event(self.reviewer, self.event))
        self.assertFalse(can_crud_events(self.reviewer, self.conference))
        self.assertFalse(can_update_event(self.reviewer, self.event))

    def test_crew_without_conference_role(self):
        self.assertFalse(can_read_events(self.crew, self.conference))
        self.assertFalse(can_read_event(self.crew, self.event))
        self.assertFalse(can_update_event(self.crew, self.event))

    def test_object_grants_extend_access(self):
        assign_perm("events.view_event", self.crew, self.event)
        self.assertTrue(can_read_event(self.crew, self.event))
        self.assertFalse(can_update_event(self.crew, self.event))

        assign_perm("events.change_event", self.crew, self.event)
        self.assertTrue(can_update_event(self.crew, self.event))
        self.assertFalse(can_destroy_event(self.crew, self.event))

    def test_accessible_events(self):
        granted = self.event
        hidden = self.create_event(self.conference, title="Hidden")
        foreign = self.create_event(self.other_conference, title="Foreign")
        assign_perm("events.view_event", self.crew, granted)
        assign_perm("events.view_event", self.crew, foreign)
        events = Event.objects.filter(conference=self.conference)

        self.assertEqual(
            list(accessible_events(self.crew, self.conference, events)), [granted]
        )
        self.assertCountEqual(
            accessible_events(self.reviewer, self.conference, events),
            [granted, hidden],
        )
