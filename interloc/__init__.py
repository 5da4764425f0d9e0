"""
Interloc - verify that changes to an interface are backward compatible
with all usages of that interface.

A lean library and CLI for:
- Describing interfaces as nominal / product / sum / bottom trees
- Checking that an old interface fits within a new one
- Narrowing the check to the paths consumers actually use (locators)
- Merging usage from many consumers into one locator

No code inference, no versioning. Interfaces and locators come from files.
"""

__version__ = "0.1.0"

from interloc.inter import Inter, Nominal, Product, Sum, Bottom
from interloc.containment import (
    Incompatibility,
    IncompatibilityKind,
    Ordering,
    compare,
    contained_by,
    try_fit_within,
)
from interloc.loc import Loc, Tip, Structure, Empty, merge, merge_all, project
from interloc.errors import InterlocError, ProjectionDivergence

__all__ = [
    "Inter",
    "Nominal",
    "Product",
    "Sum",
    "Bottom",
    "Incompatibility",
    "IncompatibilityKind",
    "Ordering",
    "compare",
    "contained_by",
    "try_fit_within",
    "Loc",
    "Tip",
    "Structure",
    "Empty",
    "merge",
    "merge_all",
    "project",
    "InterlocError",
    "ProjectionDivergence",
]
