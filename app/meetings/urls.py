"""
URL configuration for meetings.

All URLs are prefixed with /api/v1/meetings/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from meetings.views import MeetingViewSet

router = DefaultRouter()
router.include_root_view = False
router.register(r"", MeetingViewSet, basename="meeting")

app_name = "meetings"

urlpatterns = [
    path("", include(router.urls)),
]
