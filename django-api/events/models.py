"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Host(models.Model):
    """Persistence model for hosts and their event policy."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(unique=True)
    max_events = models.PositiveIntegerField(blank=True, null=True)
    event_date = models.DateField(blank=True, null=True)
    expires_in_days = models.PositiveIntegerField(default=14)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        return self.username


class Event(models.Model):
    """Persistence model for events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Hosts are removed through an explicit cascade, never implicitly.
    host = models.ForeignKey(Host, on_delete=models.PROTECT, related_name="events")
    code = models.CharField(max_length=16, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    allow_view = models.BooleanField(default=True)
    allow_download = models.BooleanField(default=False)
    cover_image = models.CharField(max_length=500, blank=True, null=True)
    qr_code = models.CharField(max_length=500, blank=True, null=True)
    event_date = models.DateField(blank=True, null=True)
    expires_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["expires_at"], name="events_event_expires_idx"),
            models.Index(fields=["host", "-created_at"], name="events_event_host_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class Upload(models.Model):
    """Persistence model for guest uploads."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="uploads")
    guest_name = models.CharField(max_length=255)
    stored_filename = models.CharField(max_length=255, unique=True)
    original_filename = models.CharField(max_length=255)
    path = models.CharField(max_length=500)
    content_type = models.CharField(max_length=100)
    size = models.PositiveBigIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "-created_at"], name="events_upload_evt_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.original_filename} by {self.guest_name}"
