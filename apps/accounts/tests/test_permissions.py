from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory, TestCase

from ..permissions import IsNotSubmitter

User = get_user_model()


class IsNotSubmitterTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.permission = IsNotSubmitter()

    def has_permission(self, user):
        request = self.factory.get("/")
        request.user = user
        return self.permission.has_permission(request, None)

    def test_anonymous(self):
        self.assertFalse(self.has_permission(AnonymousUser()))

    def test_roles(self):
        for role, allowed in (
            (User.Role.SUBMITTER, False),
            (User.Role.CREW, True),
            (User.Role.ADMIN, True),
        ):
            user = User(username=role, email=f"{role}@example.com", role=role)
            self.assertEqual(self.has_permission(user), allowed, role)

    def test_superuser_with_submitter_role(self):
        user = User(username="root", is_superuser=True, role=User.Role.SUBMITTER)
        self.assertTrue(self.has_permission(user))
