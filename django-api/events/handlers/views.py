"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details

Authentication is handled in front of this API; host-scoped routes take the
host id from the URL.
"""

import logging
from contextlib import ExitStack, contextmanager
from pathlib import Path

from django.apps import apps
from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.domain import EventChanges, IncomingFile
from events.domain.errors import AssetIOError, DomainError, ErrorCode, QuotaExceededError
from events.handlers.serializers import (
    CoverSerializer,
    EventCreateSerializer,
    EventSerializer,
    EventUpdateSerializer,
    HostCreateSerializer,
    HostPolicySerializer,
    HostSerializer,
    UploadCreateSerializer,
    UploadSerializer,
)

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.HOST_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_HOST_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_EXPIRED: status.HTTP_403_FORBIDDEN,
    ErrorCode.QUOTA_EXCEEDED: status.HTTP_403_FORBIDDEN,
    ErrorCode.HOST_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.HOST_IN_USE: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_CODE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_FILENAME: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UPLOAD_REJECTED: status.HTTP_400_BAD_REQUEST,
}


def error_response(error: DomainError) -> Response:
    body = {"code": error.code.value, "message": error.message}
    if isinstance(error, QuotaExceededError):
        body["limit"] = error.limit
    return Response(
        {"error": body},
        status=STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
    )


def container():
    return apps.get_app_config("events").container


@contextmanager
def staged(uploaded_file):
    """Yield the staging-area path of an uploaded file.

    Files Django already spooled into the staging area are used in place;
    anything else is copied there first and cleaned up if left behind.
    """
    assets = container().assets
    if hasattr(uploaded_file, "temporary_file_path"):
        path = Path(uploaded_file.temporary_file_path())
        if path.parent.resolve() == assets.staging_dir.resolve():
            yield path
            return

    path = assets.stage(uploaded_file.chunks(), suffix=Path(uploaded_file.name).suffix)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


class EventAPIView(APIView):
    """Base view translating domain errors into API responses."""

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            if isinstance(exc, AssetIOError):
                logger.error("Asset storage failed during %s of %s", exc.operation, exc.path)
            return error_response(exc)
        if isinstance(exc, ValueError):
            return Response(
                {"error": {"code": "INVALID_REQUEST", "message": str(exc)}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return super().handle_exception(exc)


class HostListView(EventAPIView):
    """Handler for GET/POST /api/hosts"""

    def get(self, request: Request) -> Response:
        hosts = container().hosts.list_hosts()
        return Response(HostSerializer(hosts, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = HostCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        host = container().hosts.create_host(**serializer.validated_data)
        return Response(HostSerializer(host).data, status=status.HTTP_201_CREATED)


class HostDetailView(EventAPIView):
    """Handler for GET/PUT/DELETE /api/hosts/{host_id}"""

    def get(self, request: Request, host_id: str) -> Response:
        host = container().hosts.get_host(host_id)
        return Response(HostSerializer(host).data)

    def put(self, request: Request, host_id: str) -> Response:
        serializer = HostPolicySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        host = container().hosts.update_policy(host_id, **serializer.validated_data)
        return Response(HostSerializer(host).data)

    def delete(self, request: Request, host_id: str) -> Response:
        reports = container().hosts.delete_host(host_id)
        return Response({"events_deleted": len(reports)})


class HostEventListView(EventAPIView):
    """Handler for GET/POST /api/hosts/{host_id}/events"""

    def get(self, request: Request, host_id: str) -> Response:
        events = container().events.list_events_for_host(host_id)
        return Response(EventSerializer(events, many=True).data)

    def post(self, request: Request, host_id: str) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = container().events.create_event(
            host_id,
            public_base_url=settings.PUBLIC_BASE_URL or request.build_absolute_uri("/"),
            **serializer.validated_data,
        )
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventListView(EventAPIView):
    """Handler for GET /api/events"""

    def get(self, request: Request) -> Response:
        events = container().events.list_events()
        return Response(EventSerializer(events, many=True).data)


class EventDetailView(EventAPIView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = container().events.get_event(event_id)
        return Response(EventSerializer(event).data)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        event = container().events.update_event(event_id, EventChanges(**serializer.validated_data))
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        container().events.delete_event(event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventByCodeView(EventAPIView):
    """Handler for GET /api/events/code/{code}"""

    def get(self, request: Request, code: str) -> Response:
        event = container().events.get_event_by_code(code)
        return Response(EventSerializer(event).data)


class EventUploadListView(EventAPIView):
    """Handler for GET /api/events/{event_id}/uploads"""

    def get(self, request: Request, event_id: str) -> Response:
        uploads = container().events.list_uploads(event_id)
        return Response(UploadSerializer(uploads, many=True).data)


class GuestUploadView(EventAPIView):
    """Handler for POST /api/events/code/{code}/uploads"""

    def post(self, request: Request, code: str) -> Response:
        serializer = UploadCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        files = serializer.validated_data["files"]

        paths = []
        with ExitStack() as stack:
            for uploaded in files:
                paths.append(stack.enter_context(staged(uploaded)))
            incoming = [
                IncomingFile(
                    temp_path=path,
                    original_filename=uploaded.name,
                    content_type=uploaded.content_type or "application/octet-stream",
                    size=uploaded.size,
                )
                for uploaded, path in zip(files, paths)
            ]
            uploads = container().events.record_uploads(
                code,
                serializer.validated_data["guest_name"],
                incoming,
            )

        return Response(
            {
                "message": f"{len(uploads)} file(s) uploaded",
                "files": UploadSerializer(uploads, many=True).data,
            },
            status=status.HTTP_201_CREATED,
        )


class EventCoverView(EventAPIView):
    """Handler for POST /api/events/{event_id}/cover"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = CoverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        uploaded = serializer.validated_data["cover"]

        with staged(uploaded) as path:
            event = container().events.replace_cover(event_id, path, uploaded.name)
        return Response(EventSerializer(event).data)
