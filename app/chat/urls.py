"""
URL configuration for the message store API.

URL Structure:
    Messages:
        /messages/                        POST
        /messages/{id}/                   PUT, DELETE
        /messages/channel/{channel_id}/   GET

    Presence:
        /chat/presence/{user_id}/         GET

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import MessageViewSet, UserPresenceView

router = DefaultRouter()
router.include_root_view = False
router.register(r"messages", MessageViewSet, basename="message")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
    path(
        "chat/presence/<int:user_id>/",
        UserPresenceView.as_view(),
        name="user-presence",
    ),
]
