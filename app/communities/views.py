"""
ViewSets for the community directory API.

URL Structure:
    /api/v1/communities/                         GET, POST
    /api/v1/communities/{id}/                    GET, DELETE
    /api/v1/communities/{id}/join/               POST
    /api/v1/communities/{id}/leave/              POST
    /api/v1/channels/                            POST
    /api/v1/channels/{id}/                       GET, DELETE
    /api/v1/channels/community/{community_id}/   GET

Design Decisions:
    - ViewSets are thin; every rule lives in the service layer
    - Failed results are rendered with the status of their error kind
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from communities.serializers import (
    ChannelCreateSerializer,
    ChannelSerializer,
    CommunityCreateSerializer,
    CommunityDetailSerializer,
    CommunityListSerializer,
)
from communities.services import ChannelService, CommunityService


def _error(result) -> Response:
    return Response(result.to_response(), status=result.status_code)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_communities",
        summary="List my communities",
        tags=["Communities"],
        responses={200: CommunityListSerializer(many=True)},
    ),
    create=extend_schema(
        operation_id="create_community",
        summary="Create community",
        tags=["Communities"],
        request=CommunityCreateSerializer,
        responses={201: CommunityDetailSerializer},
    ),
    retrieve=extend_schema(
        operation_id="get_community",
        summary="Get community",
        tags=["Communities"],
        responses={
            200: CommunityDetailSerializer,
            403: OpenApiResponse(description="Not a member"),
            404: OpenApiResponse(description="Community not found"),
        },
    ),
    destroy=extend_schema(
        operation_id="delete_community",
        summary="Delete community (owner only)",
        tags=["Communities"],
    ),
)
class CommunityViewSet(viewsets.ViewSet):
    """
    ViewSet for community operations.

    list:
        Communities the current user belongs to, newest first.

    create:
        Create a community; the creator becomes owner and first member and
        a "general" text channel is created with it.

    retrieve:
        Community with owner, members and channels. Members only.

    destroy:
        Delete the community with all of its channels. Owner only.

    join / leave:
        Membership changes for the current user.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def list(self, request):
        communities = CommunityService.list_user_communities(request.user)
        return Response(
            {"communities": CommunityListSerializer(communities, many=True).data}
        )

    def create(self, request):
        serializer = CommunityCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = CommunityService.create_community(
            owner=request.user,
            name=data["name"],
            description=data["description"],
            icon=data["icon"],
            is_public=data["isPublic"],
        )
        if not result:
            return _error(result)

        return Response(
            {
                "message": "Community created successfully",
                "community": CommunityDetailSerializer(result.data).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):
        result = CommunityService.get_community(request.user, int(pk))
        if not result:
            return _error(result)
        return Response({"community": CommunityDetailSerializer(result.data).data})

    def destroy(self, request, pk=None):
        result = CommunityService.delete_community(request.user, int(pk))
        if not result:
            return _error(result)
        return Response({"message": "Community deleted successfully"})

    @extend_schema(
        operation_id="join_community",
        summary="Join community",
        tags=["Communities"],
        request=None,
        responses={
            200: OpenApiResponse(description="Joined"),
            403: OpenApiResponse(description="Community is private"),
            409: OpenApiResponse(description="Already a member"),
        },
    )
    @action(detail=True, methods=["post"])
    def join(self, request, pk=None):
        result = CommunityService.join_community(request.user, int(pk))
        if not result:
            return _error(result)
        return Response({"message": "Successfully joined the community"})

    @extend_schema(
        operation_id="leave_community",
        summary="Leave community",
        tags=["Communities"],
        request=None,
        responses={
            200: OpenApiResponse(description="Left"),
            403: OpenApiResponse(description="The owner cannot leave"),
        },
    )
    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        result = CommunityService.leave_community(request.user, int(pk))
        if not result:
            return _error(result)
        return Response({"message": "Successfully left the community"})


@extend_schema_view(
    create=extend_schema(
        operation_id="create_channel",
        summary="Create channel",
        tags=["Channels"],
        request=ChannelCreateSerializer,
        responses={201: ChannelSerializer},
    ),
    retrieve=extend_schema(
        operation_id="get_channel",
        summary="Get channel",
        tags=["Channels"],
        responses={200: ChannelSerializer},
    ),
    destroy=extend_schema(
        operation_id="delete_channel",
        summary="Delete channel (community owner only)",
        tags=["Channels"],
    ),
)
class ChannelViewSet(viewsets.ViewSet):
    """
    ViewSet for channel operations.

    create:
        Create a channel in a community the user belongs to.

    retrieve:
        A channel of a community the user belongs to.

    destroy:
        Delete a channel and its messages. Community owner only.

    by_community:
        Channels of a community in creation order. Members only.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def create(self, request):
        serializer = ChannelCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = ChannelService.create_channel(
            request.user,
            community_id=data["communityId"],
            name=data["name"],
            description=data["description"],
            type=data["type"],
        )
        if not result:
            return _error(result)

        return Response(
            {
                "message": "Channel created successfully",
                "channel": ChannelSerializer(result.data).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):
        result = ChannelService.get_channel(request.user, int(pk))
        if not result:
            return _error(result)
        return Response({"channel": ChannelSerializer(result.data).data})

    def destroy(self, request, pk=None):
        result = ChannelService.delete_channel(request.user, int(pk))
        if not result:
            return _error(result)
        return Response({"message": "Channel deleted successfully"})

    @extend_schema(
        operation_id="list_community_channels",
        summary="List channels of a community",
        tags=["Channels"],
        responses={200: ChannelSerializer(many=True)},
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"community/(?P<community_id>\d+)",
        url_name="by-community",
    )
    def by_community(self, request, community_id=None):
        result = ChannelService.list_channels(request.user, int(community_id))
        if not result:
            return _error(result)
        return Response({"channels": ChannelSerializer(result.data, many=True).data})
