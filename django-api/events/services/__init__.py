from events.services.cleanup import CleanupScheduler, SweepReport
from events.services.event_service import EventService
from events.services.host_service import HostService
from events.services.mirror import MirrorConfig, MirrorState, RemoteMirror
from events.services.purge import EventPurger, PurgeReport

__all__ = [
    "EventService",
    "HostService",
    "EventPurger",
    "PurgeReport",
    "CleanupScheduler",
    "SweepReport",
    "RemoteMirror",
    "MirrorConfig",
    "MirrorState",
]
