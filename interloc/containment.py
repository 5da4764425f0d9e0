"""
Structural containment between interfaces.

old ⊑ new ("old fits within new") holds when every value described by the
old interface is also described by the new one, so consumers of the old
interface keep working against the new one.

Variance:
- new may add product fields and sum variants
- new may not drop a field the old interface exposed
- nominal identity is exact

Usage:
    from interloc.containment import try_fit_within, contained_by, compare

    for problem in try_fit_within(old, new):
        print(problem)

    if contained_by(old, new):
        ...
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterator, List, Optional, Tuple

from interloc.config import DEFAULT_CONFIG, CheckConfig
from interloc.inter import Bottom, Inter, Nominal, Product, Sum


class IncompatibilityKind(Enum):
    """Why containment fails at a path."""
    MISMATCHED_NAME = "mismatched_name"          # Nominal names differ
    MISMATCHED_CONTAINER = "mismatched_container"  # Node kinds differ
    MISSING_COUNTERPART = "missing_counterpart"  # Old path gone from new
    NO_MATCHING_VARIANT = "no_matching_variant"  # No sum variant accepts old
    UNINHABITED = "uninhabited"                  # New side is Bottom


@dataclass(frozen=True)
class Incompatibility:
    """One path-tagged reason containment fails.

    path is "" at the root and ".a.b" below it.
    """
    kind: IncompatibilityKind
    path: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "path": self.path}

    def __str__(self) -> str:
        from interloc.diagnostics import render_incompatibility
        return render_incompatibility(self)


# (path, old node, new node or None when the old path has no counterpart)
WorkItem = Tuple[str, Inter, Optional[Inter]]


class IncompatibilityStream:
    """Lazy breadth-first walk yielding incompatibilities.

    Each stream owns its queue, so iteration can stop at any point and
    independent streams can run concurrently over the same trees.
    """

    def __init__(self, old: Inter, new: Inter, config: Optional[CheckConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._queue: Deque[WorkItem] = deque([("", old, new)])

    def __iter__(self) -> "IncompatibilityStream":
        return self

    def __next__(self) -> Incompatibility:
        while self._queue:
            found = self._step(*self._queue.popleft())
            if found is not None:
                return found
        raise StopIteration

    def _step(self, path: str, old: Inter, new: Optional[Inter]) -> Optional[Incompatibility]:
        """Process one queue entry.

        Children are enqueued before this node's own incompatibility is
        returned, so a shallow mismatch never hides deeper ones.
        """
        if new is None:
            return Incompatibility(IncompatibilityKind.MISSING_COUNTERPART, path)

        if isinstance(old, Bottom):
            return None

        if isinstance(new, Bottom):
            if self.config.is_strict():
                return Incompatibility(IncompatibilityKind.UNINHABITED, path)
            return None

        if isinstance(new, Nominal):
            if not isinstance(old, Nominal):
                return Incompatibility(IncompatibilityKind.MISMATCHED_CONTAINER, path)
            if old.name != new.name:
                return Incompatibility(IncompatibilityKind.MISMATCHED_NAME, path)
            return None

        if isinstance(new, Product):
            if not isinstance(old, Product):
                return Incompatibility(IncompatibilityKind.MISMATCHED_CONTAINER, path)
            for key, old_child in old.fields.items():
                self._queue.append((f"{path}.{key}", old_child, new.fields.get(key)))
            return None

        if isinstance(new, Sum):
            if isinstance(old, Sum):
                # Each old variant must fit the whole new sum on its own
                for variant in old.variants:
                    self._queue.append((path, variant, new))
                return None
            for variant in new.variants:
                if contained_by(old, variant, self.config):
                    return None
            return Incompatibility(IncompatibilityKind.NO_MATCHING_VARIANT, path)

        raise TypeError(f"Unknown interface node: {type(new).__name__}")


def try_fit_within(old: Inter, new: Inter, config: Optional[CheckConfig] = None) -> IncompatibilityStream:
    """Stream every reason `old` can't be used where `new` is expected.

    Args:
        old: Interface consumers currently rely on
        new: Interface replacing it
        config: Check settings (bottom policy)

    Returns:
        Lazy iterator of Incompatibility; empty iff old ⊑ new
    """
    return IncompatibilityStream(old, new, config)


def contained_by(old: Inter, new: Inter, config: Optional[CheckConfig] = None) -> bool:
    """Check old ⊑ new, stopping at the first incompatibility."""
    return next(try_fit_within(old, new, config), None) is None


def find_incompatibilities(old: Inter, new: Inter, config: Optional[CheckConfig] = None) -> List[Incompatibility]:
    """Collect every incompatibility between two interfaces."""
    return list(try_fit_within(old, new, config))


class Ordering(Enum):
    """Result of comparing two interfaces in the containment partial order."""
    EQUAL = "equal"
    GREATER = "greater"
    LESS = "less"
    INCOMPARABLE = "incomparable"

    @classmethod
    def from_containment(cls, a_contains_b: bool, b_contains_a: bool) -> "Ordering":
        if a_contains_b and b_contains_a:
            return cls.EQUAL
        if a_contains_b:
            return cls.GREATER
        if b_contains_a:
            return cls.LESS
        return cls.INCOMPARABLE


def compare(a: Inter, b: Inter, config: Optional[CheckConfig] = None) -> Ordering:
    """Compare two interfaces.

    GREATER means `a` contains `b` (b fits within a) but not conversely.
    """
    a_contains_b = contained_by(b, a, config)
    b_contains_a = contained_by(a, b, config)
    return Ordering.from_containment(a_contains_b, b_contains_a)
