"""
Meeting models.

Models:
    Meeting: A meeting scheduled in a community, optionally tied to a channel

Design Decisions:
    - A meeting's channel must belong to the meeting's community;
      MeetingService checks it on creation and DirectoryAuditService
      detaches channels that drifted
    - Deleting the channel keeps the meeting (channel set to NULL)
    - Deleting the community deletes its meetings
"""

from django.conf import settings
from django.db import models

from core.models import BaseModel


class MeetingStatus(models.TextChoices):
    """
    Lifecycle of a meeting.

    Transitions:
        SCHEDULED -> ONGOING: first join or organizer action
        any -> CANCELLED / COMPLETED: organizer only
    """

    SCHEDULED = "scheduled", "Scheduled"
    ONGOING = "ongoing", "Ongoing"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class MeetingReminder(models.TextChoices):
    """Minutes before start at which participants are reminded."""

    NONE = "none", "No reminder"
    FIVE = "5", "5 minutes"
    TEN = "10", "10 minutes"
    FIFTEEN = "15", "15 minutes"


# Statuses shown in the community meeting list
ACTIVE_STATUSES = (MeetingStatus.SCHEDULED, MeetingStatus.ONGOING)


class Meeting(BaseModel):
    """
    A meeting scheduled in a community.

    Fields:
        title: Meeting title
        description: Optional description
        community: Community the meeting belongs to
        channel: Optional channel the meeting was scheduled from
        organizer: User who created the meeting
        start_time / end_time: Schedule (end optional)
        reminder: MeetingReminder value
        status: MeetingStatus value
        participants: Users who joined
        meeting_link: Join link, unique per meeting
    """

    title = models.CharField(
        max_length=200,
        help_text="Meeting title",
    )

    description = models.TextField(
        blank=True,
        default="",
        help_text="Optional meeting description",
    )

    community = models.ForeignKey(
        "communities.Community",
        on_delete=models.CASCADE,
        related_name="meetings",
        help_text="Community this meeting belongs to",
    )

    channel = models.ForeignKey(
        "communities.Channel",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="meetings",
        help_text="Channel the meeting was scheduled in",
    )

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="organized_meetings",
        help_text="User who organizes the meeting",
    )

    start_time = models.DateTimeField(
        help_text="When the meeting starts",
    )

    end_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the meeting ends (optional)",
    )

    reminder = models.CharField(
        max_length=4,
        choices=MeetingReminder.choices,
        default=MeetingReminder.NONE,
        help_text="Reminder before start",
    )

    status = models.CharField(
        max_length=10,
        choices=MeetingStatus.choices,
        default=MeetingStatus.SCHEDULED,
        db_index=True,
        help_text="Meeting lifecycle status",
    )

    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="joined_meetings",
        help_text="Users who joined the meeting",
    )

    meeting_link = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Link used to join the meeting",
    )

    class Meta:
        db_table = "meetings_meeting"
        ordering = ["start_time", "id"]
        indexes = [
            models.Index(
                fields=["community", "status", "start_time"],
                name="meeting_comm_status_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.status})"

    def is_organizer(self, user) -> bool:
        return user is not None and self.organizer_id == user.pk
