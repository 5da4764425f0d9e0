"""
Error types for Interloc.

These are usage errors: the question asked was invalid (a locator that
doesn't fit the interface, a malformed input file). Compatibility findings
are never raised; they are yielded by the containment stream.
"""

from typing import List, Optional


class InterlocError(Exception):
    """Base class for Interloc usage errors."""


class ProjectionDivergence(InterlocError):
    """Raised when a locator references a path the interface doesn't have."""
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"The locator diverges from the interface at path {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class LoadError(InterlocError):
    """Raised when an input file can't be turned into an interface or locator."""
    def __init__(self, message: str, source: Optional[str] = None, details: Optional[List[str]] = None):
        self.message = message
        self.source = source
        self.details = details or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.source:
            msg = f"{self.source}: {msg}"
        if self.details:
            msg += "\n  - " + "\n  - ".join(self.details)
        return msg


class InterfaceLoadError(LoadError):
    """Raised when an interface file is malformed."""


class LocatorLoadError(LoadError):
    """Raised when a locator file is malformed."""
