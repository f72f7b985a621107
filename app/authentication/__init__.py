"""
Authentication application.

This app provides the chat user model, JWT login/registration, profile
and preference management, and the identity verifier used by the
realtime hub.

Key components:
    - User model: Email-based login with public chat identity
    - AuthService / PreferenceService: Account and preference operations
    - IdentityService: Bearer token to user resolution

Usage:
    from authentication.models import User
    from authentication.services import AuthService, IdentityService
"""
