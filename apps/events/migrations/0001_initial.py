import django.core.validators
import django.db.models.deletion
import django_fsm
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("conferences", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
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
                    "subtitle",
                    models.CharField(blank=True, max_length=255, verbose_name="Subtitle"),
                ),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("lecture", "Lecture"),
                            ("workshop", "Workshop"),
                            ("podium", "Podium"),
                            ("lightning_talk", "Lightning Talk"),
                            ("meeting", "Meeting"),
                            ("film", "Film"),
                            ("concert", "Concert"),
                            ("djset", "DJ Set"),
                            ("performance", "Performance"),
                            ("other", "Other"),
                        ],
                        default="lecture",
                        max_length=20,
                        verbose_name="Event Type",
                    ),
                ),
                (
                    "state",
                    django_fsm.FSMField(
                        choices=[
                            ("new", "New"),
                            ("review", "Review"),
                            ("withdrawn", "Withdrawn"),
                            ("unconfirmed", "Unconfirmed"),
                            ("confirmed", "Confirmed"),
                            ("scheduled", "Scheduled"),
                            ("canceled", "Canceled"),
                            ("rejected", "Rejected"),
                        ],
                        default="new",
                        max_length=50,
                        verbose_name="State",
                    ),
                ),
                (
                    "time_slots",
                    models.PositiveIntegerField(default=3, verbose_name="Time Slots"),
                ),
                (
                    "start_time",
                    models.DateTimeField(blank=True, null=True, verbose_name="Start Time"),
                ),
                ("public", models.BooleanField(default=True, verbose_name="Public")),
                (
                    "language",
                    models.CharField(default="en", max_length=10, verbose_name="Language"),
                ),
                ("abstract", models.TextField(blank=True, verbose_name="Abstract")),
                (
                    "description",
                    models.TextField(blank=True, verbose_name="Description"),
                ),
                (
                    "logo",
                    models.ImageField(
                        blank=True,
                        null=True,
                        upload_to="event_logos/",
                        verbose_name="Logo",
                    ),
                ),
                (
                    "note",
                    models.TextField(
                        blank=True, help_text="Internal note", verbose_name="Note"
                    ),
                ),
                (
                    "submission_note",
                    models.TextField(blank=True, verbose_name="Submission Note"),
                ),
                (
                    "do_not_record",
                    models.BooleanField(default=False, verbose_name="Do Not Record"),
                ),
                (
                    "recording_license",
                    models.CharField(
                        blank=True, max_length=255, verbose_name="Recording License"
                    ),
                ),
                (
                    "event_ratings_count",
                    models.PositiveIntegerField(
                        default=0, editable=False, verbose_name="Ratings Count"
                    ),
                ),
                (
                    "average_rating",
                    models.FloatField(
                        blank=True,
                        editable=False,
                        null=True,
                        verbose_name="Average Rating",
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
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to="conferences.conference",
                    ),
                ),
                (
                    "room",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="events",
                        to="conferences.room",
                    ),
                ),
                (
                    "track",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="events",
                        to="conferences.track",
                    ),
                ),
            ],
            options={
                "verbose_name": "Event",
                "verbose_name_plural": "Events",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["conference", "state"],
                        name="events_event_conf_state_idx",
                    ),
                    models.Index(
                        fields=["event_ratings_count"],
                        name="events_event_ratings_cnt_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EventAttachment",
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
                    "attachment",
                    models.FileField(
                        upload_to="event_attachments/", verbose_name="Attachment"
                    ),
                ),
                ("public", models.BooleanField(default=True, verbose_name="Public")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_attachments",
                        to="events.event",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="EventFeedback",
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
                    "rating",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ],
                        verbose_name="Rating",
                    ),
                ),
                ("comment", models.TextField(blank=True, verbose_name="Comment")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created At"),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_feedbacks",
                        to="events.event",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="EventPerson",
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
                    "event_role",
                    models.CharField(
                        choices=[
                            ("submitter", "Submitter"),
                            ("speaker", "Speaker"),
                            ("moderator", "Moderator"),
                            ("coordinator", "Coordinator"),
                        ],
                        default="speaker",
                        max_length=20,
                        verbose_name="Event Role",
                    ),
                ),
                (
                    "role_state",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("idea", "Idea"),
                            ("offer", "Offer"),
                            ("unclear", "Unclear"),
                            ("confirmed", "Confirmed"),
                            ("declined", "Declined"),
                            ("canceled", "Canceled"),
                            ("attending", "Attending"),
                        ],
                        max_length=20,
                        verbose_name="Role State",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_people",
                        to="events.event",
                    ),
                ),
                (
                    "person",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_people",
                        to="accounts.person",
                    ),
                ),
            ],
            options={
                "verbose_name": "Event Person",
                "verbose_name_plural": "Event People",
                "ordering": ["event_role", "id"],
            },
        ),
        migrations.CreateModel(
            name="EventRating",
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
                    "rating",
                    models.FloatField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(5),
                        ],
                        verbose_name="Rating",
                    ),
                ),
                ("comment", models.TextField(blank=True, verbose_name="Comment")),
                (
                    "created_at",
                    models.DateTimeField(auto_now_add=True, verbose_name="Created At"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="Updated At"),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_ratings",
                        to="events.event",
                    ),
                ),
                (
                    "person",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="event_ratings",
                        to="accounts.person",
                    ),
                ),
            ],
            options={
                "verbose_name": "Event Rating",
                "verbose_name_plural": "Event Ratings",
                "unique_together": {("event", "person")},
            },
        ),
        migrations.CreateModel(
            name="Link",
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
                ("url", models.URLField(verbose_name="URL")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="links",
                        to="events.event",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Ticket",
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
                    "remote_ticket_id",
                    models.CharField(max_length=255, verbose_name="Remote Ticket ID"),
                ),
                (
                    "event",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ticket",
                        to="events.event",
                    ),
                ),
            ],
        ),
    ]
