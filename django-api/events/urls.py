from django.urls import path

from events.handlers import (
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

urlpatterns = [
    path("hosts", HostListView.as_view(), name="host-list"),
    path("hosts/<str:host_id>", HostDetailView.as_view(), name="host-detail"),
    path("hosts/<str:host_id>/events", HostEventListView.as_view(), name="host-event-list"),
    path("events", EventListView.as_view(), name="event-list"),
    path("events/code/<str:code>", EventByCodeView.as_view(), name="event-by-code"),
    path(
        "events/code/<str:code>/uploads",
        GuestUploadView.as_view(),
        name="guest-upload",
    ),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/uploads",
        EventUploadListView.as_view(),
        name="event-upload-list",
    ),
    path("events/<str:event_id>/cover", EventCoverView.as_view(), name="event-cover"),
]
