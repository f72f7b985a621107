"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/register/                 - Create account (POST)
    /api/v1/auth/login/                    - Email/password login (POST)
    /api/v1/auth/token/refresh/            - New access token from refresh (POST)
    /api/v1/auth/me/                       - Current user (GET)
    /api/v1/auth/logout/                   - Logout (POST)
    /api/v1/auth/profile/                  - Profile update (PUT)
    /api/v1/auth/preferences/<section>/    - Replace one preference section (PUT)
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.views import (
    LoginView,
    LogoutView,
    MeView,
    PreferenceSectionView,
    ProfileView,
    RegisterView,
)

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("me/", MeView.as_view(), name="me"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("profile/", ProfileView.as_view(), name="profile"),
    path(
        "preferences/<str:section>/",
        PreferenceSectionView.as_view(),
        name="preferences",
    ),
]
