"""
Diagnostics module for Interloc.

Turns incompatibilities into human-readable lines and summaries.

Usage:
    from interloc.diagnostics import CheckResult, format_report

    result = CheckResult(incompatibilities=list(try_fit_within(old, new)))
    print(format_report(result))
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, TYPE_CHECKING
import sys

if TYPE_CHECKING:
    from interloc.containment import Incompatibility


# =============================================================================
# Labels
# =============================================================================

# Keyed by IncompatibilityKind.value
LABELS = {
    "mismatched_name": "Type mismatch at path {path}",
    "mismatched_container": "The interfaces have different structures at path {path}",
    "missing_counterpart": "The new interface diverges from the old one at path {path}",
    "no_matching_variant": "No variant of the new interface accepts the old one at path {path}",
    "uninhabited": "The new interface admits no values at path {path}",
}

ICONS = {
    "success": "✓",
    "error": "✗",
}

# ANSI color codes (optional, can be disabled)
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "red": "\033[31m",
    "green": "\033[32m",
}


def _color(text: str, color: str, enabled: bool) -> str:
    """Apply color if enabled."""
    if enabled and color in COLORS:
        return f"{COLORS[color]}{text}{COLORS['reset']}"
    return text


def render_incompatibility(inc: "Incompatibility") -> str:
    """Render one incompatibility. The root path renders as ''."""
    return LABELS[inc.kind.value].format(path=inc.path)


# =============================================================================
# Reports
# =============================================================================

@dataclass
class CheckResult:
    """Outcome of checking one interface against another."""
    incompatibilities: List["Incompatibility"] = field(default_factory=list)
    locators: int = 0  # How many locators narrowed the old interface

    @property
    def compatible(self) -> bool:
        return not self.incompatibilities

    @property
    def exit_code(self) -> int:
        return 0 if self.compatible else 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compatible": self.compatible,
            "locators": self.locators,
            "incompatibilities": [
                {**inc.to_dict(), "message": render_incompatibility(inc)}
                for inc in self.incompatibilities
            ],
        }


def format_report(result: CheckResult, color: bool = False) -> str:
    """Format a check result for the terminal.

    Args:
        result: Result of the check
        color: Whether to use ANSI colors

    Returns:
        Multi-line report
    """
    lines = []
    for inc in result.incompatibilities:
        prefix = _color("error:", "red", color)
        lines.append(f"{prefix} {render_incompatibility(inc)}")

    if result.compatible:
        icon = _color(ICONS["success"], "green", color)
        lines.append(f"{icon} The interfaces are compatible")
    else:
        icon = _color(ICONS["error"], "red", color)
        count = len(result.incompatibilities)
        noun = "problem" if count == 1 else "problems"
        lines.append("")
        lines.append(f"{icon} The interfaces aren't compatible ({count} {noun})")
        lines.append("See above for specific problems")

    return "\n".join(lines)


def supports_color(stream=None) -> bool:
    """Check whether a stream is a terminal."""
    stream = stream or sys.stdout
    return hasattr(stream, "isatty") and stream.isatty()
