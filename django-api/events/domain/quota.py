"""Event quota policy."""

from dataclasses import dataclass


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of a quota check. ``limit`` is set whenever a cap applies."""

    allowed: bool
    limit: int | None = None
    reason: str | None = None


def may_create(max_events: int | None, current_count: int) -> QuotaDecision:
    """Decide whether a host owning ``current_count`` events may add one more."""
    if max_events is None:
        return QuotaDecision(allowed=True)
    if current_count < max_events:
        return QuotaDecision(allowed=True, limit=max_events)
    return QuotaDecision(
        allowed=False,
        limit=max_events,
        reason=f"Maximum of {max_events} events reached",
    )
