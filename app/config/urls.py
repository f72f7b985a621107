"""
URL configuration for ConverseX.

URL Structure:
    /                                  - ReDoc API documentation
    /admin/                            - Django admin interface
    /health/                           - Health check endpoint (load balancers, Docker)
    /schema/                           - OpenAPI schema (YAML)
    /api/v1/auth/                      - Registration, login, profile, preferences
    /api/v1/communities/               - Communities and membership
    /api/v1/channels/                  - Channels of a community
    /api/v1/messages/                  - Channel messages
    /api/v1/chat/presence/{user_id}/   - Realtime presence
    /api/v1/meetings/                  - Meetings
    ws/chat/                           - Realtime hub (see config/asgi.py)

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    # Communities and channels
    path("", include("communities.urls")),
    # Messages and presence
    path("", include("chat.urls")),
    path("meetings/", include("meetings.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "ConverseX Admin"
admin.site.site_title = "ConverseX Admin Portal"
admin.site.index_title = "Communities, channels and messages"
