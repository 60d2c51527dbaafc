"""Error taxonomy for TuneDeck."""

from __future__ import annotations

from typing import Optional


class TuneDeckError(Exception):
    """Base class for all TuneDeck errors."""


class InvocationError(TuneDeckError):
    """The automation boundary itself failed to run the script."""


class ServiceError(TuneDeckError):
    """The player answered with a sentinel-prefixed failure message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DecodeError(TuneDeckError):
    """A response could not be decoded."""

    def __init__(self, message: str, *, kind: str = "malformed-record") -> None:
        super().__init__(message)
        self.kind = kind


class ValidationError(TuneDeckError):
    """A request was rejected before any remote call was made."""


class BuildError(TuneDeckError):
    """Rebuilding the managed queue failed."""

    SOURCE_NOT_FOUND = "source-not-found"
    INVALID_POSITION = "invalid-position"
    SERVICE_ERROR = "service-error"

    def __init__(self, kind: str, message: Optional[str] = None) -> None:
        super().__init__(f"{kind}: {message}" if message else kind)
        self.kind = kind
        self.message = message
