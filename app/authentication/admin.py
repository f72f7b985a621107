"""
Django admin configuration for authentication models.

Related files:
    - models.py: User model
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin configuration for User model.

    Customized for email-based authentication with a public username.
    """

    list_display = (
        "email",
        "username",
        "status",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = (
        "status",
        "is_active",
        "is_staff",
        "is_superuser",
        "date_joined",
    )
    search_fields = ("email", "username")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (
            "Public profile",
            {"fields": ("username", "avatar", "status")},
        ),
        (
            "Settings",
            {"fields": ("preferences", "linked_accounts")},
        ),
        (
            "Status",
            {"fields": ("is_active", "is_staff", "is_superuser")},
        ),
        (
            "Permissions",
            {"fields": ("groups", "user_permissions")},
        ),
        (
            "Important dates",
            {"fields": ("date_joined", "last_login")},
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "username", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")
