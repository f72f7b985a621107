"""
Communities application.

Key components:
    - Community / Membership / Channel models
    - CommunityService, ChannelService: directory operations
    - DirectoryAuditService: reconciliation of directory references

Usage:
    from communities.models import Channel, Community
    from communities.services import ChannelService, CommunityService
"""
