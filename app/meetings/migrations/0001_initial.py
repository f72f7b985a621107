"""
Initial schema for meetings.

Creates:
    - Meeting with community, optional channel, organizer and participants
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("communities", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Meeting",
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
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                ("title", models.CharField(help_text="Meeting title", max_length=200)),
                (
                    "description",
                    models.TextField(
                        blank=True, default="", help_text="Optional meeting description"
                    ),
                ),
                ("start_time", models.DateTimeField(help_text="When the meeting starts")),
                (
                    "end_time",
                    models.DateTimeField(
                        blank=True, help_text="When the meeting ends (optional)", null=True
                    ),
                ),
                (
                    "reminder",
                    models.CharField(
                        choices=[
                            ("none", "No reminder"),
                            ("5", "5 minutes"),
                            ("10", "10 minutes"),
                            ("15", "15 minutes"),
                        ],
                        default="none",
                        help_text="Reminder before start",
                        max_length=4,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("ongoing", "Ongoing"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="scheduled",
                        help_text="Meeting lifecycle status",
                        max_length=10,
                    ),
                ),
                (
                    "meeting_link",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Link used to join the meeting",
                        max_length=255,
                    ),
                ),
                (
                    "channel",
                    models.ForeignKey(
                        blank=True,
                        help_text="Channel the meeting was scheduled in",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="meetings",
                        to="communities.channel",
                    ),
                ),
                (
                    "community",
                    models.ForeignKey(
                        help_text="Community this meeting belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="meetings",
                        to="communities.community",
                    ),
                ),
                (
                    "organizer",
                    models.ForeignKey(
                        help_text="User who organizes the meeting",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="organized_meetings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "participants",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Users who joined the meeting",
                        related_name="joined_meetings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "meetings_meeting",
                "ordering": ["start_time", "id"],
                "indexes": [
                    models.Index(
                        fields=["community", "status", "start_time"],
                        name="meeting_comm_status_idx",
                    )
                ],
            },
        ),
    ]
