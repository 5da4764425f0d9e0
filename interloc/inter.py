"""
Interface algebra for Interloc.

An interface is a recursive, immutable tree built from four node types:
- Nominal: a named opaque leaf ("string", "int", "UserId")
- Product: named fields, each with its own interface
- Sum: a set of variants, any one of which a value may match
- Bottom: the type with no values

Usage:
    from interloc.inter import Nominal, Product, Sum

    user = Product({"name": Nominal("string"), "age": Nominal("int")})
    data = user.to_dict()
    assert Inter.from_dict(data) == user
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Tuple


class Inter:
    """Base class for interface nodes."""

    kind: str = ""

    def to_dict(self) -> Any:
        raise NotImplementedError

    @classmethod
    def from_dict(cls, d: Any) -> "Inter":
        """Build an interface from its dict form.

        Containers shared through YAML aliases are built once and reused.

        Raises:
            ValueError: If the data is not a valid interface
        """
        return cls._from_data(d, {})

    @classmethod
    def _from_data(cls, d: Any, memo: Dict[int, "Inter"]) -> "Inter":
        if d == BOTTOM_TAG:
            return Bottom()
        if not isinstance(d, dict):
            raise ValueError(f"expected a mapping or '{BOTTOM_TAG}', got {type(d).__name__}")
        if id(d) in memo:
            return memo[id(d)]
        if len(d) != 1:
            raise ValueError(f"expected exactly one tag, got {sorted(map(str, d))}")

        tag, value = next(iter(d.items()))
        if tag == "nominal":
            if not isinstance(value, str):
                raise ValueError(f"nominal name must be a string, got {type(value).__name__}")
            node: Inter = Nominal(value)
        elif tag == "product":
            if value is None:
                value = {}
            if not isinstance(value, dict):
                raise ValueError("product fields must be a mapping")
            node = Product({k: cls._from_data(v, memo) for k, v in string_keys(value).items()})
        elif tag == "sum":
            if value is None:
                value = []
            if not isinstance(value, list):
                raise ValueError("sum variants must be a list")
            node = Sum([cls._from_data(v, memo) for v in value])
        else:
            raise ValueError(f"unknown interface tag '{tag}'")

        memo[id(d)] = node
        return node


BOTTOM_TAG = "bottom"


def string_keys(mapping: Dict[Any, Any]) -> Dict[str, Any]:
    """Turn mapping keys into field names.

    YAML reads `1:` and `yes:` as non-string keys, so two keys can meet
    as the same name only after conversion.

    Raises:
        ValueError: If two keys share a name once converted
    """
    result: Dict[str, Any] = {}
    for key, value in mapping.items():
        name = str(key)
        if name in result:
            raise ValueError(f"duplicate field name '{name}'")
        result[name] = value
    return result


@dataclass(frozen=True)
class Nominal(Inter):
    """A named leaf type. Two nominals are the same type iff names match."""
    name: str

    kind = "nominal"

    def to_dict(self) -> Dict[str, str]:
        return {"nominal": self.name}


@dataclass(frozen=True)
class Product(Inter):
    """Named fields. Field order carries no meaning."""
    fields: Mapping[str, Inter] = field(default_factory=dict)

    kind = "product"

    def __post_init__(self):
        # Copy so later changes to the caller's dict can't reach the tree
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __eq__(self, other):
        if not isinstance(other, Product):
            return NotImplemented
        return dict(self.fields) == dict(other.fields)

    def __hash__(self):
        return hash(("product", frozenset(self.fields.items())))

    def __repr__(self):
        return f"Product({dict(self.fields)!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {"product": {k: v.to_dict() for k, v in self.fields.items()}}


@dataclass(frozen=True)
class Sum(Inter):
    """Variants, any one of which a value may match.

    Stored as a tuple, so raw equality is order-sensitive. Use
    containment.compare() for order-insensitive comparison.
    """
    variants: Tuple[Inter, ...] = ()

    kind = "sum"

    def __post_init__(self):
        object.__setattr__(self, "variants", tuple(self.variants))

    def to_dict(self) -> Dict[str, Any]:
        return {"sum": [v.to_dict() for v in self.variants]}


@dataclass(frozen=True)
class Bottom(Inter):
    """The type with no values."""

    kind = "bottom"

    def to_dict(self) -> str:
        return BOTTOM_TAG
