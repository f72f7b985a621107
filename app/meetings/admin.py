"""Django admin configuration for meetings."""

from django.contrib import admin

from meetings.models import Meeting


@admin.register(Meeting)
class MeetingAdmin(admin.ModelAdmin):
    """Admin for meetings."""

    list_display = ["title", "community", "organizer", "status", "start_time"]
    list_filter = ["status", "reminder", "start_time"]
    search_fields = ["title", "community__name", "organizer__username"]
    raw_id_fields = ["community", "channel", "organizer"]
    filter_horizontal = ["participants"]
    readonly_fields = ["meeting_link", "created_at", "updated_at"]
