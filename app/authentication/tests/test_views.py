"""
Tests for authentication API views.

This module tests the HTTP surface of the authentication app:
- RegisterView / LoginView: JWT pair issuance and error kinds
- MeView: current user shape with community summaries
- LogoutView: status change and refresh blacklisting
- ProfileView / PreferenceSectionView: profile and preference updates

Testing Philosophy:
    Tests focus on observable HTTP behavior, not implementation details:
    - Response status codes
    - Response body structure and content
    - Database state changes
"""

from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User, UserStatus


# =============================================================================
# URL Constants
# =============================================================================


REGISTER_URL = "/api/v1/auth/register/"
LOGIN_URL = "/api/v1/auth/login/"
REFRESH_URL = "/api/v1/auth/token/refresh/"
ME_URL = "/api/v1/auth/me/"
LOGOUT_URL = "/api/v1/auth/logout/"
PROFILE_URL = "/api/v1/auth/profile/"


def preferences_url(section):
    return f"/api/v1/auth/preferences/{section}/"


class TestRegisterView:
    """
    Tests for RegisterView.

    POST /api/v1/auth/register/
    """

    def test_register_returns_token_pair_and_user(self, api_client, db):
        """
        Registration returns 201 with a token, refresh token and the user.

        Why it matters: Clients log in straight after registering using
        the returned token.
        """
        response = api_client.post(
            REGISTER_URL,
            {"username": "ada", "email": "ada@example.com", "password": "secret1"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["message"] == "User registered successfully"
        assert response.data["token"]
        assert response.data["refresh"]
        assert response.data["user"]["username"] == "ada"
        assert response.data["user"]["communities"] == []
        assert User.objects.filter(email="ada@example.com").exists()

    def test_register_duplicate_email_returns_409(self, api_client, user):
        response = api_client.post(
            REGISTER_URL,
            {"username": "another", "email": user.email, "password": "secret1"},
            format="json",
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "EMAIL_TAKEN"

    def test_register_short_password_returns_400(self, api_client, db):
        response = api_client.post(
            REGISTER_URL,
            {"username": "ada", "email": "ada@example.com", "password": "123"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "VALIDATION_ERROR"
        assert "password" in response.data["errors"]

    def test_register_short_username_returns_400(self, api_client, db):
        response = api_client.post(
            REGISTER_URL,
            {"username": "ab", "email": "ab@example.com", "password": "secret1"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestLoginView:
    """
    Tests for LoginView.

    POST /api/v1/auth/login/
    """

    def test_login_returns_tokens_and_sets_online(self, api_client, user):
        response = api_client.post(
            LOGIN_URL,
            {"email": "ada@example.com", "password": "TestPass123!"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["token"]
        assert response.data["user"]["status"] == UserStatus.ONLINE

    def test_login_bad_credentials_returns_401(self, api_client, user):
        """
        Bad credentials are reported as 401 with an error body.

        Why it matters: Clients re-prompt for credentials on 401 only.
        """
        response = api_client.post(
            LOGIN_URL,
            {"email": "ada@example.com", "password": "nope"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["error"] == "Invalid credentials"

    def test_refresh_returns_new_access_token(self, api_client, user):
        refresh = RefreshToken.for_user(user)

        response = api_client.post(REFRESH_URL, {"refresh": str(refresh)}, format="json")

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data


class TestMeView:
    """
    Tests for MeView.

    GET /api/v1/auth/me/
    """

    def test_me_requires_authentication(self, api_client, db):
        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["error_code"] == "UNAUTHENTICATED"

    def test_me_returns_current_user(self, authenticated_client, user):
        response = authenticated_client.get(ME_URL)

        assert response.status_code == status.HTTP_200_OK
        body = response.data["user"]
        assert body["_id"] == user.id
        assert body["email"] == "ada@example.com"
        assert set(body["preferences"]) == {
            "appearance",
            "general",
            "notifications",
            "privacy",
        }
        assert body["linkedAccounts"] == {
            "google": False,
            "microsoft": False,
            "github": False,
        }


class TestLogoutView:
    """
    Tests for LogoutView.

    POST /api/v1/auth/logout/
    """

    def test_logout_sets_offline_and_blacklists_refresh(self, authenticated_client, user):
        user.status = UserStatus.ONLINE
        user.save()
        refresh = RefreshToken.for_user(user)

        response = authenticated_client.post(
            LOGOUT_URL, {"refresh": str(refresh)}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.status == UserStatus.OFFLINE

        reuse = authenticated_client.post(REFRESH_URL, {"refresh": str(refresh)}, format="json")
        assert reuse.status_code == status.HTTP_401_UNAUTHORIZED


class TestProfileView:
    """
    Tests for ProfileView.

    PUT /api/v1/auth/profile/
    """

    def test_put_updates_status_and_avatar(self, authenticated_client, user):
        response = authenticated_client.put(
            PROFILE_URL, {"status": "away", "avatar": "/avatars/ada.png"}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["user"]["status"] == "away"
        user.refresh_from_db()
        assert user.avatar == "/avatars/ada.png"

    def test_put_unknown_status_returns_400(self, authenticated_client):
        response = authenticated_client.put(PROFILE_URL, {"status": "asleep"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_put_taken_username_returns_409(self, authenticated_client, other_user):
        response = authenticated_client.put(
            PROFILE_URL, {"username": other_user.username}, format="json"
        )

        assert response.status_code == status.HTTP_409_CONFLICT


class TestPreferenceSectionView:
    """
    Tests for PreferenceSectionView.

    PUT /api/v1/auth/preferences/<section>/
    """

    def test_put_replaces_section(self, authenticated_client, user):
        """
        The section in the body becomes the stored section.

        Why it matters: Settings screens save one section at a time and
        expect the response to reflect the stored values.
        """
        response = authenticated_client.put(
            preferences_url("general"),
            {"language": "Deutsch", "timezone": "GMT+01:00"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data["general"] == {
            "autoJoin": False,
            "language": "Deutsch",
            "timezone": "GMT+01:00",
        }
        assert response.data["user"]["preferences"]["general"]["language"] == "Deutsch"

    def test_put_invalid_section_returns_400(self, authenticated_client):
        response = authenticated_client.put(
            preferences_url("billing"), {"x": True}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error"] == "Invalid preference section"

    def test_put_non_object_body_returns_400(self, authenticated_client):
        response = authenticated_client.put(
            preferences_url("privacy"), [True, False], format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
