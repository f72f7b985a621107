"""
ViewSet for the meetings API.

URL Structure:
    /api/v1/meetings/                          POST
    /api/v1/meetings/{id}/                     DELETE
    /api/v1/meetings/{id}/join/                POST
    /api/v1/meetings/{id}/status/              PATCH
    /api/v1/meetings/community/{community_id}/ GET

Meetings attached to a channel are announced in that channel's room
(meeting-created, meeting-updated, meeting-deleted).
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat.constants import REALTIME_EVENTS
from chat.realtime import RealtimeBroadcaster
from meetings.serializers import (
    MeetingCreateSerializer,
    MeetingSerializer,
    MeetingStatusSerializer,
)
from meetings.services import MeetingService


def _error(result) -> Response:
    return Response(result.to_response(), status=result.status_code)


@extend_schema_view(
    create=extend_schema(
        operation_id="create_meeting",
        summary="Schedule meeting",
        tags=["Meetings"],
        request=MeetingCreateSerializer,
        responses={
            201: MeetingSerializer,
            400: OpenApiResponse(description="Invalid channel or time range"),
            403: OpenApiResponse(description="Not a member"),
        },
    ),
    destroy=extend_schema(
        operation_id="delete_meeting",
        summary="Delete meeting (organizer only)",
        tags=["Meetings"],
    ),
)
class MeetingViewSet(viewsets.ViewSet):
    """
    ViewSet for meeting operations.

    create:
        Schedule a meeting in a community the user belongs to.

    destroy:
        Delete a meeting. Organizer only.

    join:
        Join a meeting; the meeting starts and the user shows as in a meeting.

    set_status:
        Change the meeting status. Organizer only.

    by_community:
        Scheduled and ongoing meetings of a community by start time.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def create(self, request):
        serializer = MeetingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = MeetingService.create_meeting(
            organizer=request.user,
            community_id=data["community"],
            title=data["title"],
            description=data["description"],
            channel_id=data["channel"],
            start_time=data["startTime"],
            end_time=data["endTime"],
            reminder=data["reminder"],
        )
        if not result:
            return _error(result)

        meeting = MeetingSerializer(result.data).data
        RealtimeBroadcaster.meeting_event(
            REALTIME_EVENTS.MEETING_CREATED,
            result.data.channel_id,
            {"meeting": dict(meeting)},
        )
        return Response(
            {"success": True, "meeting": meeting},
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, pk=None):
        result = MeetingService.delete_meeting(request.user, int(pk))
        if not result:
            return _error(result)

        RealtimeBroadcaster.meeting_event(
            REALTIME_EVENTS.MEETING_DELETED,
            result.data["channel_id"],
            {"meetingId": result.data["meeting_id"]},
        )
        return Response({"success": True, "message": "Meeting deleted"})

    @extend_schema(
        operation_id="join_meeting",
        summary="Join meeting",
        tags=["Meetings"],
        request=None,
        responses={200: MeetingSerializer},
    )
    @action(detail=True, methods=["post"])
    def join(self, request, pk=None):
        result = MeetingService.join_meeting(request.user, int(pk))
        if not result:
            return _error(result)
        return self._updated(result.data)

    @extend_schema(
        operation_id="update_meeting_status",
        summary="Update meeting status (organizer only)",
        tags=["Meetings"],
        request=MeetingStatusSerializer,
        responses={
            200: MeetingSerializer,
            403: OpenApiResponse(description="Not the organizer"),
        },
    )
    @action(detail=True, methods=["patch"], url_path="status", url_name="status")
    def set_status(self, request, pk=None):
        serializer = MeetingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MeetingService.update_status(
            request.user, int(pk), serializer.validated_data["status"]
        )
        if not result:
            return _error(result)
        return self._updated(result.data)

    @extend_schema(
        operation_id="list_community_meetings",
        summary="List active meetings of a community",
        tags=["Meetings"],
        responses={200: MeetingSerializer(many=True)},
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"community/(?P<community_id>\d+)",
        url_name="by-community",
    )
    def by_community(self, request, community_id=None):
        result = MeetingService.list_community_meetings(request.user, int(community_id))
        if not result:
            return _error(result)
        return Response(
            {"success": True, "meetings": MeetingSerializer(result.data, many=True).data}
        )

    def _updated(self, meeting) -> Response:
        payload = MeetingSerializer(meeting).data
        RealtimeBroadcaster.meeting_event(
            REALTIME_EVENTS.MEETING_UPDATED,
            meeting.channel_id,
            {"meeting": dict(payload)},
        )
        return Response({"success": True, "meeting": payload})
