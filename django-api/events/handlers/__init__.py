from events.handlers.views import (
    EventByCodeView,
    EventCoverView,
    EventDetailView,
    EventListView,
    EventUploadListView,
    GuestUploadView,
    HostDetailView,
    HostEventListView,
    HostListView,
)

__all__ = [
    "HostListView",
    "HostDetailView",
    "HostEventListView",
    "EventListView",
    "EventDetailView",
    "EventByCodeView",
    "EventUploadListView",
    "GuestUploadView",
    "EventCoverView",
]
