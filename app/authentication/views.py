"""
Authentication views.

This module provides API views for:
- Registration and login (JWT pair issued on success)
- Current user, logout and profile updates
- Whole-section preference replacement

Related files:
    - serializers.py: Request/response serialization
    - services.py: Business logic (AuthService, PreferenceService)
    - urls.py: URL routing

Note:
    Token refresh is served by simplejwt's TokenRefreshView:
    - Refresh: /api/v1/auth/token/refresh/
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.models import PreferenceSection
from authentication.serializers import (
    LoginSerializer,
    LogoutSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    TokenPairResponseSerializer,
    UserSerializer,
)
from authentication.services import AuthService, PreferenceService


class RegisterView(APIView):
    """
    API view for account registration.

    POST: Create an account and return a JWT pair

    URL: /api/v1/auth/register/

    Request body:
        {
            "username": "ada",
            "email": "ada@example.com",
            "password": "secret1"
        }

    Returns:
        201 {"message", "token", "refresh", "user"}
        409 when the email or username is already registered
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Register",
        tags=["Auth"],
        request=RegisterSerializer,
        responses={
            201: TokenPairResponseSerializer,
            400: OpenApiResponse(description="Invalid input"),
            409: OpenApiResponse(description="Email or username already exists"),
        },
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.register(**serializer.validated_data)
        if not result:
            return Response(result.to_response(), status=result.status_code)

        user = result.data
        return Response(
            {
                "message": "User registered successfully",
                **AuthService.issue_tokens(user),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """
    API view for email/password login.

    POST: Authenticate, mark the user online and return a JWT pair

    URL: /api/v1/auth/login/
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        summary="Log in",
        tags=["Auth"],
        request=LoginSerializer,
        responses={
            200: TokenPairResponseSerializer,
            401: OpenApiResponse(description="Invalid credentials"),
        },
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.login(**serializer.validated_data)
        if not result:
            return Response(result.to_response(), status=result.status_code)

        user = result.data
        return Response(
            {
                "message": "Login successful",
                **AuthService.issue_tokens(user),
                "user": UserSerializer(user).data,
            }
        )


class MeView(APIView):
    """
    API view for the authenticated user.

    GET: Current user including preferences and community summaries

    URL: /api/v1/auth/me/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Current user", tags=["Auth"], responses={200: UserSerializer})
    def get(self, request):
        return Response({"user": UserSerializer(request.user).data})


class LogoutView(APIView):
    """
    API view for logout.

    POST: Mark the user offline and blacklist the refresh token if supplied

    URL: /api/v1/auth/logout/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(summary="Log out", tags=["Auth"], request=LogoutSerializer)
    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.logout(
            request.user, refresh=serializer.validated_data.get("refresh")
        )
        if not result:
            return Response(result.to_response(), status=result.status_code)

        return Response({"message": "Logged out successfully"})


class ProfileView(APIView):
    """
    API view for profile updates.

    PUT: Update avatar, username and/or status

    URL: /api/v1/auth/profile/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Update profile",
        tags=["Auth - Profile"],
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer, 409: OpenApiResponse(description="Username taken")},
    )
    def put(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.update_profile(request.user, **serializer.validated_data)
        if not result:
            return Response(result.to_response(), status=result.status_code)

        return Response(
            {
                "message": "Profile updated successfully",
                "user": UserSerializer(result.data).data,
            }
        )


class PreferenceSectionView(APIView):
    """
    API view for replacing one preference section.

    PUT: Replace the named section with the request body

    URL: /api/v1/auth/preferences/<section>/

    Sections: appearance, general, notifications, privacy, accounts
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Replace a preference section",
        tags=["Auth - Profile"],
        parameters=[
            OpenApiParameter(
                name="section",
                location=OpenApiParameter.PATH,
                enum=PreferenceSection.values,
                description="Preference section to replace",
            )
        ],
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="Invalid section or values"),
        },
    )
    def put(self, request, section):
        result = PreferenceService.update_section(request.user, section, request.data)
        if not result:
            return Response(result.to_response(), status=result.status_code)

        return Response(
            {
                "message": f"{section.capitalize()} preferences updated",
                section: result.data,
                "user": UserSerializer(request.user).data,
            }
        )
