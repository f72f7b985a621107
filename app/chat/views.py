"""
Views for the message store API.

This module provides REST API endpoints for messages and presence:
- MessageViewSet: Post, edit, delete and list channel messages
- UserPresenceView: Whether a user has a live realtime connection

URL Structure:
    /api/v1/messages/                       POST
    /api/v1/messages/{id}/                  PUT, DELETE
    /api/v1/messages/channel/{channel_id}/  GET (?limit=&skip=)
    /api/v1/chat/presence/{user_id}/        GET

Design Decisions:
    - All rules live in MessageService; views translate results
    - After a successful mutation the view relays the matching event to
      the channel room (message-created, message-updated,
      message-deleted). Relay failures never change the HTTP response.
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.realtime import RealtimeBroadcaster
from chat.serializers import (
    MessageCreateSerializer,
    MessageEditSerializer,
    MessageListQuerySerializer,
    MessageSerializer,
    PresenceSerializer,
)
from chat.services import MessageService, PresenceService


@extend_schema_view(
    create=extend_schema(
        operation_id="create_message",
        summary="Post message",
        tags=["Messages"],
        request=MessageCreateSerializer,
        responses={
            201: MessageSerializer,
            400: OpenApiResponse(description="Empty or too long content"),
            403: OpenApiResponse(description="Not a member of the channel's community"),
            404: OpenApiResponse(description="Channel not found"),
        },
    ),
    update=extend_schema(
        operation_id="edit_message",
        summary="Edit message (author only)",
        tags=["Messages"],
        request=MessageEditSerializer,
        responses={
            200: MessageSerializer,
            403: OpenApiResponse(description="Not the author"),
            404: OpenApiResponse(description="Message not found"),
        },
    ),
    destroy=extend_schema(
        operation_id="delete_message",
        summary="Delete message (author only)",
        tags=["Messages"],
        responses={
            200: OpenApiResponse(description="Deleted"),
            403: OpenApiResponse(description="Not the author"),
            404: OpenApiResponse(description="Message not found"),
        },
    ),
)
class MessageViewSet(viewsets.ViewSet):
    """
    ViewSet for message operations.

    create:
        Post a message to a channel of a community the user belongs to.

    update:
        Replace the content of own message; marks it edited.

    destroy:
        Permanently delete own message for every viewer.

    by_channel:
        Latest messages of a channel, oldest first.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def create(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = MessageService.create_message(
            author=request.user,
            channel_id=data["channelId"],
            content=data["content"],
            type=data["type"],
        )
        if not result:
            return Response(result.to_response(), status=result.status_code)

        payload = MessageSerializer(result.data).data
        RealtimeBroadcaster.message_created(result.data, payload=dict(payload))

        return Response(
            {"message": "Message sent successfully", "data": payload},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, pk=None):
        serializer = MessageEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.edit_message(
            request.user, int(pk), serializer.validated_data["content"]
        )
        if not result:
            return Response(result.to_response(), status=result.status_code)

        payload = MessageSerializer(result.data).data
        RealtimeBroadcaster.message_updated(result.data, payload=dict(payload))

        return Response({"message": "Message updated successfully", "data": payload})

    def destroy(self, request, pk=None):
        result = MessageService.delete_message(request.user, int(pk))
        if not result:
            return Response(result.to_response(), status=result.status_code)

        RealtimeBroadcaster.message_deleted(
            channel_id=result.data["channel_id"],
            message_id=result.data["message_id"],
        )
        return Response({"message": "Message deleted successfully"})

    @extend_schema(
        operation_id="list_channel_messages",
        summary="List channel messages",
        description=(
            "Latest messages of a channel in ascending chronological order. "
            "limit defaults to 50 and is capped at 100; skip counts back "
            "from the newest message."
        ),
        parameters=[
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
            ),
            OpenApiParameter(
                name="skip",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=False,
            ),
        ],
        responses={200: MessageSerializer(many=True)},
        tags=["Messages"],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"channel/(?P<channel_id>\d+)",
        url_name="by-channel",
    )
    def by_channel(self, request, channel_id=None):
        query = MessageListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = MessageService.list_messages(
            request.user,
            int(channel_id),
            limit=query.validated_data.get("limit"),
            skip=query.validated_data.get("skip"),
        )
        if not result:
            return Response(result.to_response(), status=result.status_code)

        return Response({"messages": MessageSerializer(result.data, many=True).data})


class UserPresenceView(APIView):
    """
    Get presence for a specific user.

    GET /api/v1/chat/presence/{user_id}/
        Whether the user has a live realtime connection.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_user_presence",
        summary="Get user presence",
        description=(
            "Whether the user currently has an identified realtime connection. "
            "Presence is advisory and rebuilt when clients reconnect."
        ),
        parameters=[
            OpenApiParameter(
                name="user_id",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.PATH,
                description="Id of the user to query",
            ),
        ],
        responses={200: PresenceSerializer},
        tags=["Chat - Presence"],
    )
    def get(self, request, user_id):
        result = PresenceService.get_presence(user_id)
        return Response(PresenceSerializer(result.data).data)
