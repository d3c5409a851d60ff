from events.domain.models import (
    Event,
    EventChanges,
    EventDraft,
    Host,
    HostDraft,
    IncomingFile,
    Upload,
    UploadDraft,
)
from events.domain.value_objects import EventCode, EventId, ExpiryDays, HostId, UploadId

__all__ = [
    "Host",
    "Event",
    "Upload",
    "HostDraft",
    "EventDraft",
    "EventChanges",
    "UploadDraft",
    "IncomingFile",
    "HostId",
    "EventId",
    "UploadId",
    "EventCode",
    "ExpiryDays",
]
