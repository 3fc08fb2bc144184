from django.contrib import admin

from events.models import Event, Registration


class RegistrationInline(admin.TabularInline):
    model = Registration
    extra = 0
    readonly_fields = ["user", "registered_at"]
    can_delete = False

    def has_add_permission(self, request, obj=None) -> bool:
        # Registrations go through RegistrationService for capacity checks.
        return False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "venue", "date", "status", "max_participants", "created_at"]
    list_filter = ["status"]
    search_fields = ["title", "venue", "organizer"]
    inlines = [RegistrationInline]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["event", "user", "registered_at"]
    list_filter = ["event"]
    readonly_fields = ["event", "user", "registered_at"]

    def has_add_permission(self, request) -> bool:
        return False
