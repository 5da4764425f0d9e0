"""
Tests for diagnostics rendering.
"""

from interloc.containment import Incompatibility, IncompatibilityKind
from interloc.diagnostics import CheckResult, LABELS, format_report, render_incompatibility


class TestRender:
    """Tests for single-line rendering."""

    def test_every_kind_has_a_label(self):
        for kind in IncompatibilityKind:
            assert kind.value in LABELS

    def test_labels(self):
        assert render_incompatibility(
            Incompatibility(IncompatibilityKind.MISMATCHED_NAME, ".a")
        ) == "Type mismatch at path .a"
        assert render_incompatibility(
            Incompatibility(IncompatibilityKind.MISMATCHED_CONTAINER, ".a.b")
        ) == "The interfaces have different structures at path .a.b"
        assert render_incompatibility(
            Incompatibility(IncompatibilityKind.MISSING_COUNTERPART, ".age")
        ) == "The new interface diverges from the old one at path .age"

    def test_root_path_is_empty(self):
        inc = Incompatibility(IncompatibilityKind.MISMATCHED_NAME, "")
        assert render_incompatibility(inc) == "Type mismatch at path "
        assert str(inc) == "Type mismatch at path "


class TestReport:
    """Tests for full reports."""

    def test_compatible(self):
        report = format_report(CheckResult())
        assert report == "✓ The interfaces are compatible"

    def test_incompatible(self):
        result = CheckResult(incompatibilities=[
            Incompatibility(IncompatibilityKind.MISSING_COUNTERPART, ".age"),
            Incompatibility(IncompatibilityKind.MISMATCHED_NAME, ".name"),
        ])
        lines = format_report(result).split("\n")
        assert lines[0] == "error: The new interface diverges from the old one at path .age"
        assert lines[1] == "error: Type mismatch at path .name"
        assert "aren't compatible (2 problems)" in lines[3]

    def test_color(self):
        result = CheckResult(incompatibilities=[
            Incompatibility(IncompatibilityKind.MISMATCHED_NAME, ""),
        ])
        assert "\033[31m" in format_report(result, color=True)
        assert "\033[" not in format_report(result, color=False)

    def test_result_properties(self):
        assert CheckResult().compatible
        assert CheckResult().exit_code == 0
        result = CheckResult(incompatibilities=[
            Incompatibility(IncompatibilityKind.UNINHABITED, ".x"),
        ])
        assert result.exit_code == 1

    def test_to_dict(self):
        result = CheckResult(
            incompatibilities=[Incompatibility(IncompatibilityKind.MISMATCHED_NAME, ".a")],
            locators=2,
        )
        assert result.to_dict() == {
            "compatible": False,
            "locators": 2,
            "incompatibilities": [
                {"kind": "mismatched_name", "path": ".a", "message": "Type mismatch at path .a"},
            ],
        }
