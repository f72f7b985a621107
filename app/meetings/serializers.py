"""
Serializers for the meetings API.

Serializer Hierarchy:
    MeetingSerializer: Meeting with organizer, channel and participants
    MeetingCreateSerializer: Schedule input
    MeetingStatusSerializer: Status change input
"""

from rest_framework import serializers

from authentication.serializers import PublicUserSerializer
from meetings.models import Meeting, MeetingReminder, MeetingStatus


class MeetingChannelSerializer(serializers.Serializer):
    _id = serializers.IntegerField(source="id")
    name = serializers.CharField()


class MeetingSerializer(serializers.ModelSerializer):
    """Meeting read shape."""

    _id = serializers.IntegerField(source="id", read_only=True)
    community = serializers.IntegerField(source="community_id", read_only=True)
    channel = MeetingChannelSerializer(read_only=True, allow_null=True)
    organizer = PublicUserSerializer(read_only=True)
    participants = PublicUserSerializer(many=True, read_only=True)
    startTime = serializers.DateTimeField(source="start_time", read_only=True)
    endTime = serializers.DateTimeField(source="end_time", read_only=True)
    meetingLink = serializers.CharField(source="meeting_link", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Meeting
        fields = [
            "_id",
            "title",
            "description",
            "community",
            "channel",
            "organizer",
            "startTime",
            "endTime",
            "reminder",
            "status",
            "participants",
            "meetingLink",
            "createdAt",
        ]
        read_only_fields = fields


class MeetingCreateSerializer(serializers.Serializer):
    """
    Input for scheduling a meeting.

    Validates:
        - title: required, up to 200 characters
        - reminder: none, 5, 10 or 15
    """

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    community = serializers.IntegerField()
    channel = serializers.IntegerField(required=False, allow_null=True, default=None)
    startTime = serializers.DateTimeField()
    endTime = serializers.DateTimeField(required=False, allow_null=True, default=None)
    reminder = serializers.ChoiceField(
        choices=MeetingReminder.choices, default=MeetingReminder.NONE
    )


class MeetingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=MeetingStatus.choices)
