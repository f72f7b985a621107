"""
Serializers for the community directory API.

Serializer Hierarchy:
    ChannelSerializer: Channel read shape
    ChannelCreateSerializer: Channel creation input
    CommunityListSerializer: Community with owner and channel summaries
    CommunityDetailSerializer: Adds the member list
    CommunityCreateSerializer: Community creation input

Design Decisions:
    - Read and write serializers are separate
    - Identifiers are exposed as ``_id`` and fields in camelCase, matching
      the message and user shapes
"""

from rest_framework import serializers

from authentication.serializers import PublicUserSerializer
from communities.models import DEFAULT_COMMUNITY_ICON, Channel, ChannelType, Community


# =============================================================================
# Channel Serializers
# =============================================================================


class ChannelSerializer(serializers.ModelSerializer):
    """Channel with its owning community id."""

    _id = serializers.IntegerField(source="id", read_only=True)
    community = serializers.IntegerField(source="community_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Channel
        fields = ["_id", "name", "description", "type", "community", "createdAt"]
        read_only_fields = fields


class ChannelCreateSerializer(serializers.Serializer):
    """
    Input for creating a channel.

    Validates:
        - name: 1-50 characters after trimming
        - type: text, voice or video (default text)
    """

    name = serializers.CharField(min_length=1, max_length=50)
    description = serializers.CharField(
        max_length=200, required=False, allow_blank=True, default=""
    )
    type = serializers.ChoiceField(choices=ChannelType.choices, default=ChannelType.TEXT)
    communityId = serializers.IntegerField(help_text="Community to create the channel in")


# =============================================================================
# Community Serializers
# =============================================================================


class CommunityListSerializer(serializers.ModelSerializer):
    """Community summary for the sidebar list."""

    _id = serializers.IntegerField(source="id", read_only=True)
    owner = PublicUserSerializer(read_only=True)
    channels = ChannelSerializer(many=True, read_only=True)
    isPublic = serializers.BooleanField(source="is_public", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Community
        fields = [
            "_id",
            "name",
            "description",
            "icon",
            "owner",
            "channels",
            "isPublic",
            "createdAt",
        ]
        read_only_fields = fields


class CommunityDetailSerializer(CommunityListSerializer):
    """Community including its members."""

    members = PublicUserSerializer(many=True, read_only=True)

    class Meta(CommunityListSerializer.Meta):
        fields = CommunityListSerializer.Meta.fields + ["members"]
        read_only_fields = fields


class CommunityCreateSerializer(serializers.Serializer):
    """
    Input for creating a community.

    Validates:
        - name: 3-50 characters after trimming
        - description: up to 500 characters
    """

    name = serializers.CharField(min_length=3, max_length=50)
    description = serializers.CharField(
        max_length=500, required=False, allow_blank=True, default=""
    )
    icon = serializers.CharField(
        max_length=100, required=False, allow_blank=True, default=DEFAULT_COMMUNITY_ICON
    )
    isPublic = serializers.BooleanField(required=False, default=True)
