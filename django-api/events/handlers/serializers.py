"""Serializers for transforming domain models to API responses, and for
validating request payloads before they reach a service."""

from django.conf import settings
from rest_framework import serializers


def asset_url(reference: str | None) -> str | None:
    if not reference:
        return None
    return settings.UPLOAD_URL + reference.lstrip("/")


class HostSerializer(serializers.Serializer):
    """Serializer for Host domain model."""

    id = serializers.UUIDField(source="id.value")
    username = serializers.CharField()
    email = serializers.EmailField()
    max_events = serializers.IntegerField(allow_null=True)
    event_date = serializers.DateField(allow_null=True)
    expires_in_days = serializers.IntegerField()
    created_at = serializers.DateTimeField()


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.UUIDField(source="id.value")
    host_id = serializers.UUIDField(source="host_id.value")
    code = serializers.CharField(source="code.value")
    name = serializers.CharField()
    description = serializers.CharField()
    allow_view = serializers.BooleanField()
    allow_download = serializers.BooleanField()
    cover_image = serializers.SerializerMethodField()
    qr_code = serializers.SerializerMethodField()
    event_date = serializers.DateField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()

    def get_cover_image(self, event) -> str | None:
        return asset_url(event.cover_image)

    def get_qr_code(self, event) -> str | None:
        return asset_url(event.qr_code)


class UploadSerializer(serializers.Serializer):
    """Serializer for Upload domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    guest_name = serializers.CharField()
    filename = serializers.CharField(source="original_filename")
    url = serializers.SerializerMethodField()
    content_type = serializers.CharField()
    size = serializers.IntegerField()
    created_at = serializers.DateTimeField()

    def get_url(self, upload) -> str | None:
        return asset_url(upload.path)


class HostPolicySerializer(serializers.Serializer):
    max_events = serializers.IntegerField(min_value=0, allow_null=True, required=False, default=None)
    event_date = serializers.DateField(allow_null=True, required=False, default=None)
    expires_in_days = serializers.IntegerField(min_value=1, required=False, default=14)


class HostCreateSerializer(HostPolicySerializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()


class EventCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    allow_view = serializers.BooleanField(required=False, default=True)
    allow_download = serializers.BooleanField(required=False, default=False)


class EventUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    allow_view = serializers.BooleanField(required=False)
    allow_download = serializers.BooleanField(required=False)


class UploadCreateSerializer(serializers.Serializer):
    guest_name = serializers.CharField(max_length=255)
    files = serializers.ListField(child=serializers.FileField(), allow_empty=False)


class CoverSerializer(serializers.Serializer):
    cover = serializers.FileField()
