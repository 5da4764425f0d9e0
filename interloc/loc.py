"""
Locators: which parts of an interface a consumer actually uses.

A locator is a sieve over the interface tree. Each node is one of:
- Tip: uses everything from here down
- Structure: uses only the named children
- Empty: uses nothing

Ordered by how much they traverse: Empty ⊑ Structure ⊑ Tip.
Locators from independent call sites are combined with merge(), and
project() cuts an interface down to the part a locator selects.

Usage:
    from interloc.loc import Empty, Structure, Tip, merge_all, project

    loc = merge_all([Structure({"name": Tip()}), Structure({"age": Tip()})])
    used = project(loc, interface)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from interloc.errors import ProjectionDivergence
from interloc.inter import Bottom, Inter, Nominal, Product, Sum, string_keys

logger = logging.getLogger(__name__)

TIP_TAG = "tip"
EMPTY_TAG = "empty"

MAX_LOCATOR_NODES = 100_000


class Loc:
    """Base class for locator nodes."""

    def to_dict(self) -> Any:
        raise NotImplementedError

    def copy(self) -> "Loc":
        return self

    @classmethod
    def from_dict(cls, d: Any) -> "Loc":
        """Build a locator from its dict form.

        "tip" and "empty" are scalars; a mapping is a Structure whose
        values are locators themselves. Aliased subtrees are expanded
        into separate nodes, since merge() updates them in place.

        Raises:
            ValueError: If the data is not a valid locator, or expands
                to more than MAX_LOCATOR_NODES nodes
        """
        budget = [MAX_LOCATOR_NODES]
        return cls._from_data(d, budget)

    @classmethod
    def _from_data(cls, d: Any, budget: List[int]) -> "Loc":
        budget[0] -= 1
        if budget[0] < 0:
            raise ValueError(f"locator expands to more than {MAX_LOCATOR_NODES} nodes")
        if d == TIP_TAG:
            return Tip()
        if d == EMPTY_TAG:
            return Empty()
        if isinstance(d, dict):
            return Structure({k: cls._from_data(v, budget) for k, v in string_keys(d).items()})
        raise ValueError(f"expected '{TIP_TAG}', '{EMPTY_TAG}' or a mapping, got {d!r}")


@dataclass
class Tip(Loc):
    """Selects the whole subtree."""

    def to_dict(self) -> str:
        return TIP_TAG


@dataclass
class Empty(Loc):
    """Selects nothing."""

    def to_dict(self) -> str:
        return EMPTY_TAG


@dataclass
class Structure(Loc):
    """Selects only the named children.

    Structure({}) selects nothing, like Empty, but never comes out of
    merging non-empty locators.
    """
    children: Dict[str, Loc] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {k: v.to_dict() for k, v in self.children.items()}

    def copy(self) -> "Structure":
        return Structure({k: v.copy() for k, v in self.children.items()})


def merge(a: Loc, b: Loc) -> Loc:
    """Least upper bound of two locators.

    Structure/Structure merges into `a` in place and returns it; every
    other case returns whichever side wins. Subtrees taken from `b` are
    copied so later merges into the result never reach `b`.
    """
    if isinstance(a, Tip):
        return a
    if isinstance(a, Empty):
        return b.copy()
    if isinstance(a, Structure):
        if isinstance(b, Tip):
            return b
        if isinstance(b, Empty):
            return a
        if isinstance(b, Structure):
            for key, b_child in b.children.items():
                if key in a.children:
                    a.children[key] = merge(a.children[key], b_child)
                else:
                    a.children[key] = b_child.copy()
            return a
    raise TypeError(f"Unknown locator node: {type(a).__name__}, {type(b).__name__}")


def merge_all(locs: Iterable[Loc]) -> Loc:
    """Fold locators together starting from Empty."""
    combined: Loc = Empty()
    count = 0
    for loc in locs:
        combined = merge(combined, loc)
        count += 1
    logger.debug("Merged %d locator(s) into %s", count, type(combined).__name__)
    return combined


def project(loc: Loc, iface: Inter, path: str = "") -> Inter:
    """Cut `iface` down to the part `loc` selects.

    - Tip returns the interface unchanged
    - Empty returns Bottom; inside a Structure the key is dropped instead
    - Structure needs a Product (every key must exist) or a Sum (at least
      one variant must accept the locator)

    Raises:
        ProjectionDivergence: If the locator references a path the
            interface doesn't have
    """
    if isinstance(loc, Tip):
        return iface
    if isinstance(loc, Empty):
        return Bottom()
    if not isinstance(loc, Structure):
        raise TypeError(f"Unknown locator node: {type(loc).__name__}")

    if isinstance(iface, Product):
        selected: Dict[str, Inter] = {}
        for key, child in loc.children.items():
            child_path = f"{path}.{key}"
            if key not in iface.fields:
                raise ProjectionDivergence(child_path, f"no field '{key}'")
            if isinstance(child, Empty):
                continue
            selected[key] = project(child, iface.fields[key], child_path)
        return Product(selected)

    if isinstance(iface, Sum):
        kept: List[Inter] = []
        for variant in iface.variants:
            try:
                kept.append(project(loc, variant, path))
            except ProjectionDivergence as e:
                logger.debug("Dropping sum variant at %r: %s", path, e)
        if not kept:
            raise ProjectionDivergence(path, "no sum variant has the selected fields")
        return Sum(kept)

    if isinstance(iface, Nominal):
        raise ProjectionDivergence(path, f"'{iface.name}' has no fields")
    raise ProjectionDivergence(path, f"{iface.kind} has no fields")
