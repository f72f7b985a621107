"""
Initial schema for the message store.

Creates:
    - Message (author, channel, content, type, is_edited)
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
            name="Message",
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
                    "content",
                    models.TextField(
                        help_text="Message text (1-2000 characters)", max_length=2000
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[("text", "Text"), ("image", "Image"), ("file", "File")],
                        default="text",
                        help_text="Type of message (text, image or file)",
                        max_length=10,
                    ),
                ),
                (
                    "is_edited",
                    models.BooleanField(
                        default=False,
                        help_text="Whether the author has edited this message",
                    ),
                ),
                (
                    "author",
                    models.ForeignKey(
                        help_text="User who posted this message",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "channel",
                    models.ForeignKey(
                        help_text="Channel this message belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="communities.channel",
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["channel", "-created_at", "-id"],
                        name="chat_msg_channel_recent_idx",
                    ),
                    models.Index(
                        fields=["author", "-created_at"], name="chat_msg_author_idx"
                    ),
                ],
            },
        ),
    ]
