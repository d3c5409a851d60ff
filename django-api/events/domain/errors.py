"""Domain error codes for the events module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    HOST_NOT_FOUND = "HOST_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    INVALID_HOST_ID = "INVALID_HOST_ID"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    EVENT_EXPIRED = "EVENT_EXPIRED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    HOST_CONFLICT = "HOST_CONFLICT"
    HOST_IN_USE = "HOST_IN_USE"
    EVENT_CODE_CONFLICT = "EVENT_CODE_CONFLICT"
    INVALID_FILENAME = "INVALID_FILENAME"
    UPLOAD_REJECTED = "UPLOAD_REJECTED"
    ASSET_IO_FAILED = "ASSET_IO_FAILED"
    MIRROR_FAILED = "MIRROR_FAILED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class HostNotFoundError(DomainError):
    """Raised when a host is not found."""

    def __init__(self, host_id: str) -> None:
        super().__init__(
            code=ErrorCode.HOST_NOT_FOUND,
            message="Host not found",
        )
        self.host_id = host_id


class EventNotFoundError(DomainError):
    """Raised when an event is not found by id or code."""

    def __init__(self, lookup: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.lookup = lookup


class InvalidHostIdError(DomainError):
    """Raised when a host ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_HOST_ID,
            message="Invalid host ID format",
        )


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class EventExpiredError(DomainError):
    """Raised when a guest reaches an event past its expiry."""

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_EXPIRED,
            message="This event has expired",
        )
        self.event_code = code


class QuotaExceededError(DomainError):
    """Raised when a host already owns its maximum number of events."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            code=ErrorCode.QUOTA_EXCEEDED,
            message=f"Event limit of {limit} reached",
        )
        self.limit = limit


class HostConflictError(DomainError):
    """Raised when a username or email is already taken."""

    def __init__(self, username: str) -> None:
        super().__init__(
            code=ErrorCode.HOST_CONFLICT,
            message="Username or email already in use",
        )
        self.username = username


class HostInUseError(DomainError):
    """Raised when a host still owns events at the moment it is deleted."""

    def __init__(self, host_id: str) -> None:
        super().__init__(
            code=ErrorCode.HOST_IN_USE,
            message="Host still has events",
        )
        self.host_id = host_id


class EventCodeConflictError(DomainError):
    """Raised when a generated event code collides with an existing one."""

    def __init__(self, code: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_CODE_CONFLICT,
            message="Event code already in use",
        )
        self.event_code = code


class InvalidFilenameError(DomainError):
    """Raised for filenames that could escape the upload root."""

    def __init__(self, filename: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_FILENAME,
            message="Invalid file name",
        )
        self.filename = filename


class UploadRejectedError(DomainError):
    """Raised when a file's type or size is not accepted."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_REJECTED,
            message=reason,
        )


class AssetIOError(DomainError):
    """Raised when a filesystem operation on stored assets fails."""

    def __init__(self, operation: str, path: str) -> None:
        super().__init__(
            code=ErrorCode.ASSET_IO_FAILED,
            message="File storage failed",
        )
        self.operation = operation
        self.path = path


class MirrorError(DomainError):
    """Raised inside the remote mirror; never escapes to upload callers."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            code=ErrorCode.MIRROR_FAILED,
            message="Remote mirror unavailable",
        )
        self.detail = detail
