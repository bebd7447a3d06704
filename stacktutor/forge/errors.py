"""Errors raised (or recorded) while turning a generation stream into files."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import GenerationResult


class ForgeError(Exception):
    """Base class for API forge failures."""

    pass


class MalformedMarkerError(ForgeError):
    """A marker that is structurally broken.

    The parser records these on `SectionParser.errors` and treats the marker
    as plain text; it never raises them.
    """

    def __init__(self, marker: str, reason: str) -> None:
        self.marker = marker
        self.reason = reason
        super().__init__(f"malformed marker {marker!r}: {reason}")


class EmptyResultError(ForgeError):
    """The finished stream produced no code files."""

    def __init__(self, result: GenerationResult) -> None:
        self.result = result
        super().__init__("the generator did not return any code files")


class UpstreamStreamError(ForgeError):
    """The model call failed mid-stream.

    `partial` holds everything parsed before the failure, force-flushed.
    """

    def __init__(self, partial: GenerationResult, message: str = "generation stream failed") -> None:
        self.partial = partial
        super().__init__(message)
