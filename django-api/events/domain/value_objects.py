"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from typing import Self
from uuid import UUID, uuid4

_CODE_PATTERN = re.compile(r"^[A-Z0-9]{4,16}$")


@dataclass(frozen=True)
class HostId:
    """Unique identifier for a Host."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UploadId:
    """Unique identifier for an Upload."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EventCode:
    """Public short code guests use to reach an event."""

    value: str

    def __post_init__(self) -> None:
        if not _CODE_PATTERN.match(self.value):
            raise ValueError("Event code must be 4-16 uppercase letters or digits")

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4().hex[:8].upper())

    @classmethod
    def normalize(cls, value: str) -> Self:
        return cls(value=value.strip().upper())

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExpiryDays:
    """Positive number of calendar days an event stays open."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError("Expiry days must be an integer")
        if self.value <= 0:
            raise ValueError("Expiry days must be positive")
