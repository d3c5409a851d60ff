"""Host administration: identity and event policy."""

import logging
from datetime import date

from events.domain import ExpiryDays, Host, HostDraft, HostId
from events.domain.errors import HostInUseError, HostNotFoundError
from events.domain.expiry import DEFAULT_EXPIRY_DAYS
from events.services.event_service import parse_host_id
from events.services.purge import EventPurger, PurgeReport
from events.stores.interfaces import EventStore

logger = logging.getLogger(__name__)

DELETE_PASSES = 3


def _check_policy(max_events: int | None, expires_in_days: int) -> None:
    ExpiryDays(expires_in_days)
    if max_events is not None and max_events < 0:
        raise ValueError("Maximum events cannot be negative")


class HostService:
    """Service for host accounts and their event policy."""

    def __init__(
        self,
        store: EventStore,
        purger: EventPurger,
        *,
        default_expiry_days: int = DEFAULT_EXPIRY_DAYS,
    ) -> None:
        self._store = store
        self._purger = purger
        self._default_expiry_days = default_expiry_days

    def create_host(
        self,
        username: str,
        email: str,
        max_events: int | None = None,
        event_date: date | None = None,
        expires_in_days: int | None = None,
    ) -> Host:
        """Create a host.

        Raises:
            HostConflictError: If the username or email is taken.
            ValueError: If the policy values are invalid.
        """
        if expires_in_days is None:
            expires_in_days = self._default_expiry_days
        _check_policy(max_events, expires_in_days)

        host = self._store.create_host(
            HostDraft(
                username=username.strip(),
                email=email.strip(),
                max_events=max_events,
                event_date=event_date,
                expires_in_days=expires_in_days,
            )
        )
        logger.info("Created host %s (%s)", host.username, host.id)
        return host

    def get_host(self, host_id: str | HostId) -> Host:
        host_id = parse_host_id(host_id)
        host = self._store.get_host(host_id)
        if host is None:
            raise HostNotFoundError(str(host_id))
        return host

    def list_hosts(self) -> list[Host]:
        return self._store.list_hosts()

    def update_policy(
        self,
        host_id: str | HostId,
        max_events: int | None,
        event_date: date | None,
        expires_in_days: int,
    ) -> Host:
        """Replace a host's policy. Existing events keep their expiry."""
        _check_policy(max_events, expires_in_days)
        host_id = parse_host_id(host_id)
        host = self._store.update_host_policy(host_id, max_events, event_date, expires_in_days)
        if host is None:
            raise HostNotFoundError(str(host_id))
        return host

    def delete_host(self, host_id: str | HostId) -> list[PurgeReport]:
        """Purge every event of a host, then remove the host itself.

        Events created while the purge runs are picked up by another pass.

        Raises:
            HostNotFoundError: If the host does not exist.
            HostInUseError: If new events keep appearing after the last pass.
        """
        host = self.get_host(host_id)
        reports = []
        for attempt in range(1, DELETE_PASSES + 1):
            reports.extend(self._purger.purge(event) for event in self._store.list_events_for_host(host.id))
            try:
                self._store.delete_host(host.id)
            except HostInUseError:
                if attempt == DELETE_PASSES:
                    raise
                logger.info("Host %s gained events during deletion, purging again", host.username)
            else:
                break
        logger.info("Deleted host %s with %d event(s)", host.username, len(reports))
        return reports
