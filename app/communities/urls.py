"""
URL configuration for the community directory.

URL Structure:
    Communities:
        /communities/                         GET, POST
        /communities/{id}/                    GET, DELETE
        /communities/{id}/join/               POST
        /communities/{id}/leave/              POST

    Channels:
        /channels/                            POST
        /channels/{id}/                       GET, DELETE
        /channels/community/{community_id}/   GET

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from communities.views import ChannelViewSet, CommunityViewSet

router = DefaultRouter()
router.include_root_view = False
router.register(r"communities", CommunityViewSet, basename="community")
router.register(r"channels", ChannelViewSet, basename="channel")

app_name = "communities"

urlpatterns = [
    path("", include(router.urls)),
]
