"""Exception hierarchy for surqlbind generation runs.

Every error is fatal to the run that raised it. Errors tied to a source file
carry its ``origin`` and, where known, the ``position`` of the offending text.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .models import Position


class SurqlBindError(RuntimeError):
    """Base class for all generation failures."""

    def __init__(
        self,
        message: str,
        *,
        origin: Optional[str] = None,
        position: Optional[Position] = None,
    ) -> None:
        self.message = message
        self.origin = origin
        self.position = position
        super().__init__(self._format())

    def _format(self) -> str:
        if self.origin and self.position:
            return f"{self.origin}:{self.position}: {self.message}"
        if self.origin:
            return f"{self.origin}: {self.message}"
        return self.message


class LexError(SurqlBindError):
    """Raised when a string, quoted identifier or comment is never closed."""


class MalformedHeaderError(SurqlBindError):
    """Raised when a ``DEFINE FUNCTION`` header cannot be parsed."""


class UnterminatedBodyError(SurqlBindError):
    """Raised when input ends before a function body's braces balance."""


class DuplicateFunctionError(SurqlBindError):
    """Raised when two definitions share a qualified name."""

    def __init__(self, qualified_name: str, origins: Sequence[str]) -> None:
        self.qualified_name = qualified_name
        self.origins = tuple(origins)
        super().__init__(
            f"function {qualified_name} is defined more than once "
            f"(first in {self.origins[0]}, again in {self.origins[1]})",
            origin=self.origins[1],
        )


class AmbiguousPathError(SurqlBindError):
    """Raised when a name is both a function and a module at one tree level."""

    def __init__(self, qualified_name: str, segment: str, origin: Optional[str] = None) -> None:
        self.qualified_name = qualified_name
        self.segment = segment
        super().__init__(
            f"{qualified_name}: '{segment}' is used both as a function and as a module",
            origin=origin,
        )


class InvalidNamingTemplateError(SurqlBindError):
    """Raised when a naming template is not ``prefix_$`` or ``$_suffix`` shaped."""


class NamingConflictError(SurqlBindError):
    """Raised when driver and datastore bindings would share symbol names."""


class NoTargetError(SurqlBindError):
    """Raised when neither a driver nor a datastore scheme is requested."""


class NoPathError(SurqlBindError):
    """Raised when no source path is supplied."""


class SourceNotFoundError(SurqlBindError):
    """Raised when a source path does not exist."""


class PathResolutionError(SurqlBindError):
    """Raised when an environment reference in a path cannot be expanded."""


class ConfigError(SurqlBindError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "AmbiguousPathError",
    "ConfigError",
    "DuplicateFunctionError",
    "InvalidNamingTemplateError",
    "LexError",
    "MalformedHeaderError",
    "NamingConflictError",
    "NoPathError",
    "NoTargetError",
    "PathResolutionError",
    "SourceNotFoundError",
    "SurqlBindError",
    "UnterminatedBodyError",
]
