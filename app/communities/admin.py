"""
Django admin configuration for the community directory.
"""

from django.contrib import admin

from communities.models import Channel, Community, Membership


class MembershipInline(admin.TabularInline):
    model = Membership
    extra = 0
    raw_id_fields = ("user",)
    readonly_fields = ("created_at",)


class ChannelInline(admin.TabularInline):
    model = Channel
    extra = 0
    fields = ("name", "type", "description", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Community)
class CommunityAdmin(admin.ModelAdmin):
    """Admin configuration for Community model."""

    list_display = ("name", "owner", "is_public", "created_at")
    list_filter = ("is_public", "created_at")
    search_fields = ("name", "owner__email", "owner__username")
    ordering = ("-created_at",)
    raw_id_fields = ("owner",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [MembershipInline, ChannelInline]


@admin.register(Channel)
class ChannelAdmin(admin.ModelAdmin):
    """Admin configuration for Channel model."""

    list_display = ("name", "community", "type", "created_at")
    list_filter = ("type", "created_at")
    search_fields = ("name", "community__name")
    raw_id_fields = ("community",)
    readonly_fields = ("created_at", "updated_at")
