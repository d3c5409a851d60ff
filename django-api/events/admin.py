from django.apps import apps
from django.contrib import admin, messages

from events.domain import EventId, HostId
from events.models import Event, Host, Upload


def container():
    return apps.get_app_config("events").container


class EventInline(admin.TabularInline):
    model = Event
    extra = 0
    fields = ["name", "code", "expires_at"]
    readonly_fields = ["code", "expires_at"]
    show_change_link = True
    # Events are deleted from EventAdmin so their files go with them.
    can_delete = False


class UploadInline(admin.TabularInline):
    model = Upload
    extra = 0
    fields = ["original_filename", "guest_name", "content_type", "size", "created_at"]
    readonly_fields = fields
    can_delete = False


@admin.register(Host)
class HostAdmin(admin.ModelAdmin):
    list_display = ["username", "email", "max_events", "event_date", "expires_in_days"]
    search_fields = ["username", "email"]
    inlines = [EventInline]

    def delete_model(self, request, obj):
        container().hosts.delete_host(HostId(obj.id))

    def delete_queryset(self, request, queryset):
        for row in queryset:
            container().hosts.delete_host(HostId(row.id))


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "code", "host", "expires_at", "created_at"]
    list_filter = ["allow_view", "allow_download"]
    search_fields = ["name", "code", "host__username"]
    readonly_fields = ["code", "qr_code", "event_date", "expires_at"]
    inlines = [UploadInline]
    actions = ["purge_events"]

    def purge_rows(self, rows) -> int:
        """Run the purge cascade for each row; returns how many left files behind."""
        wired = container()
        failures = 0
        for row in rows:
            event = wired.store.get_event(EventId(row.id))
            if event is None:
                continue
            if not wired.purger.purge(event).clean:
                failures += 1
        return failures

    def delete_model(self, request, obj):
        self.purge_rows([obj])

    def delete_queryset(self, request, queryset):
        self.purge_rows(queryset)

    @admin.action(description="Purge selected events with their files")
    def purge_events(self, request, queryset):
        failures = self.purge_rows(queryset)
        if failures:
            self.message_user(
                request,
                f"{failures} event(s) purged with leftover files, see logs",
                messages.WARNING,
            )
        else:
            self.message_user(request, "Selected events purged")


@admin.register(Upload)
class UploadAdmin(admin.ModelAdmin):
    list_display = ["original_filename", "event", "guest_name", "size", "created_at"]
    list_filter = ["event"]

    def delete_model(self, request, obj):
        container().assets.remove_file(obj.path)
        super().delete_model(request, obj)

    def delete_queryset(self, request, queryset):
        assets = container().assets
        for row in queryset:
            assets.remove_file(row.path)
        super().delete_queryset(request, queryset)
