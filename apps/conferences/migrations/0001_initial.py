import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Conference",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                (
                    "acronym",
                    models.SlugField(
                        max_length=100, unique=True, verbose_name="Acronym"
                    ),
                ),
                (
                    "email",
                    models.EmailField(
                        blank=True,
                        help_text="Sender address for notifications to speakers.",
                        max_length=254,
                        verbose_name="Email",
                    ),
                ),
                (
                    "default_timeslots",
                    models.PositiveIntegerField(
                        default=3, verbose_name="Default Timeslots"
                    ),
                ),
                (
                    "timeslot_duration",
                    models.PositiveIntegerField(
                        default=15, help_text="Minutes", verbose_name="Timeslot Duration"
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created At"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="Updated At"),
                ),
            ],
            options={
                "verbose_name": "Conference",
                "verbose_name_plural": "Conferences",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="CallForPapers",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("start_date", models.DateField(verbose_name="Start Date")),
                ("end_date", models.DateField(verbose_name="End Date")),
                (
                    "hard_deadline",
                    models.DateField(
                        blank=True, null=True, verbose_name="Hard Deadline"
                    ),
                ),
                (
                    "welcome_text",
                    models.TextField(blank=True, verbose_name="Welcome Text"),
                ),
                ("info_url", models.URLField(blank=True, verbose_name="Info URL")),
                (
                    "contact_email",
                    models.EmailField(
                        blank=True, max_length=254, verbose_name="Contact Email"
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created At"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="Updated At"),
                ),
                (
                    "conference",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="call_for_papers",
                        to="conferences.conference",
                    ),
                ),
            ],
            options={
                "verbose_name": "Call for Papers",
                "verbose_name_plural": "Calls for Papers",
            },
        ),
        migrations.CreateModel(
            name="Room",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                (
                    "size",
                    models.PositiveIntegerField(
                        blank=True, null=True, verbose_name="Size"
                    ),
                ),
                (
                    "conference",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rooms",
                        to="conferences.conference",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Track",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                (
                    "color",
                    models.CharField(
                        default="#fefd7f", max_length=7, verbose_name="Color"
                    ),
                ),
                (
                    "conference",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tracks",
                        to="conferences.conference",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="ConferenceUser",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("orga", "Orga"),
                            ("coordinator", "Coordinator"),
                            ("reviewer", "Reviewer"),
                        ],
                        max_length=20,
                        verbose_name="Role",
                    ),
                ),
                (
                    "conference",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="conference_users",
                        to="conferences.conference",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="conference_users",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Conference User",
                "verbose_name_plural": "Conference Users",
                "unique_together": {("conference", "user")},
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "locale",
                    models.CharField(default="en", max_length=10, verbose_name="Locale"),
                ),
                (
                    "accept_subject",
                    models.CharField(max_length=255, verbose_name="Accept Subject"),
                ),
                ("accept_body", models.TextField(verbose_name="Accept Body")),
                (
                    "reject_subject",
                    models.CharField(max_length=255, verbose_name="Reject Subject"),
                ),
                ("reject_body", models.TextField(verbose_name="Reject Body")),
                (
                    "call_for_papers",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to="conferences.callforpapers",
                    ),
                ),
            ],
            options={
                "verbose_name": "Notification",
                "verbose_name_plural": "Notifications",
                "ordering": ["locale"],
                "unique_together": {("call_for_papers", "locale")},
            },
        ),
    ]
