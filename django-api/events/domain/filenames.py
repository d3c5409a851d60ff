"""Filename guards applied before any path is built from user input."""

import re

from events.domain.errors import InvalidFilenameError

_TRAVERSAL = re.compile(r"(^|[\\/])\.\.([\\/]|$)")
_DRIVE = re.compile(r"^[A-Za-z]:")


def check_filename(name: str) -> None:
    """Accept only a bare file name: no separators, no dot entries."""
    if not name or name in (".", "..") or "\x00" in name:
        raise InvalidFilenameError(name)
    if "/" in name or "\\" in name:
        raise InvalidFilenameError(name)


def check_display_name(name: str) -> None:
    """Reject display names carrying traversal sequences or absolute paths."""
    if not name or "\x00" in name or _TRAVERSAL.search(name):
        raise InvalidFilenameError(name)
    if name.startswith(("/", "\\")) or _DRIVE.match(name):
        raise InvalidFilenameError(name)
