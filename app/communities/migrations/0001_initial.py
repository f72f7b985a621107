"""
Initial schema for the community directory.

Creates:
    - Community with owner and public flag
    - Membership (through model, unique per user and community)
    - Channel belonging to a community
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Community",
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
                (
                    "name",
                    models.CharField(
                        help_text="Community name (3-50 characters)", max_length=50
                    ),
                ),
                (
                    "description",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Optional community description",
                        max_length=500,
                    ),
                ),
                (
                    "icon",
                    models.CharField(
                        default="🌐",
                        help_text="Emoji or image path used as the community icon",
                        max_length=100,
                    ),
                ),
                (
                    "is_public",
                    models.BooleanField(
                        default=True,
                        help_text="Whether users can join without an invitation",
                    ),
                ),
                (
                    "owner",
                    models.ForeignKey(
                        help_text="User who owns this community",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="owned_communities",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "communities_community",
                "ordering": ["-created_at"],
                "verbose_name_plural": "communities",
            },
        ),
        migrations.CreateModel(
            name="Membership",
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
                (
                    "community",
                    models.ForeignKey(
                        help_text="Community the user belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="communities.community",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Member",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "communities_membership",
                "ordering": ["created_at"],
            },
        ),
        migrations.AddField(
            model_name="community",
            name="members",
            field=models.ManyToManyField(
                help_text="Users who belong to this community",
                related_name="communities",
                through="communities.Membership",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
        migrations.CreateModel(
            name="Channel",
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
                ("name", models.CharField(help_text="Channel name", max_length=50)),
                (
                    "description",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Optional channel description",
                        max_length=200,
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[("text", "Text"), ("voice", "Voice"), ("video", "Video")],
                        default="text",
                        help_text="Kind of channel (text, voice or video)",
                        max_length=10,
                    ),
                ),
                (
                    "community",
                    models.ForeignKey(
                        help_text="Community this channel belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="channels",
                        to="communities.community",
                    ),
                ),
            ],
            options={
                "db_table": "communities_channel",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.AddIndex(
            model_name="community",
            index=models.Index(
                fields=["owner", "-created_at"], name="comm_owner_created_idx"
            ),
        ),
        migrations.AddConstraint(
            model_name="membership",
            constraint=models.UniqueConstraint(
                fields=("user", "community"), name="unique_community_membership"
            ),
        ),
        migrations.AddIndex(
            model_name="channel",
            index=models.Index(
                fields=["community", "created_at"], name="chan_comm_created_idx"
            ),
        ),
    ]
