from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _
from guardian.mixins import GuardianUserMixin


class User(GuardianUserMixin, AbstractUser):
    """
    Custom User model with a global role and Guardian permissions.

    The global role decides whether a user belongs to the conference crew at
    all; per-conference roles live on ``conferences.ConferenceUser``.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", _("Admin")
        CREW = "crew", _("Crew")
        SUBMITTER = "submitter", _("Submitter")

    email = models.EmailField(
        _("email address"),
        unique=True,
        error_messages={"unique": _("A user with that email already exists.")},
    )
    role = models.CharField(
        _("role"),
        max_length=20,
        choices=Role.choices,
        default=Role.SUBMITTER,
        help_text=_("Global role. Submitters have no access to event management."),
    )

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ["username"]

    def __str__(self):
        return self.username

    def save(self, *args, **kwargs):
        """Ensure email is stored in lowercase."""
        if self.email:
            self.email = self.email.lower()
        super().save(*args, **kwargs)

    def get_full_name(self):
        """Return the first_name plus the last_name, with a space in between."""
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username

    @property
    def is_admin(self):
        return self.is_superuser or self.role == self.Role.ADMIN

    @property
    def is_submitter(self):
        return not self.is_superuser and self.role == self.Role.SUBMITTER


class Person(models.Model):
    """A speaker, reviewer or coordinator as seen by the conference."""

    user = models.OneToOneField(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="person",
    )
    first_name = models.CharField(_("first name"), max_length=150, blank=True)
    last_name = models.CharField(_("last name"), max_length=150, blank=True)
    public_name = models.CharField(_("public name"), max_length=255, blank=True)
    email = models.EmailField(_("email address"), blank=True)
    created_at = models.DateTimeField(_("Created At"), auto_now_add=True)

    class Meta:
        verbose_name = _("person")
        verbose_name_plural = _("people")
        ordering = ["public_name", "last_name", "first_name"]

    def __str__(self):
        return self.public_name or self.full_name or self.email

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
