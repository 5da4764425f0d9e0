"""
Load and dump interfaces and locators as YAML.

Interface files:
    product:
      name: {nominal: string}
      pet:
        sum:
          - {nominal: cat}
          - {nominal: dog}

Locator files:
    name: tip
    pet: empty

Duplicate mapping keys and self-referencing aliases are rejected, so
every tree handed to the core is finite and well-formed.
"""

import logging
from collections.abc import Hashable
from pathlib import Path
from typing import Any, Set, Type

import yaml
from yaml.constructor import ConstructorError

from interloc.errors import InterfaceLoadError, LoadError, LocatorLoadError
from interloc.inter import Inter
from interloc.loc import Loc

logger = logging.getLogger(__name__)


class StrictLoader(yaml.SafeLoader):
    """SafeLoader that refuses duplicate keys in a mapping."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                key = self.construct_object(key_node, deep=deep)
                if not isinstance(key, Hashable):
                    continue
                if key in seen:
                    raise ConstructorError(
                        "while constructing a mapping", node.start_mark,
                        f"found duplicate key {key!r}", key_node.start_mark,
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _find_cycle(data: Any, stack: Set[int], done: Set[int]) -> bool:
    """Check whether loaded data refers back to one of its own containers.

    Containers already proven acyclic are recorded in `done`, so subtrees
    shared through aliases are walked once.
    """
    if not isinstance(data, (dict, list)):
        return False
    if id(data) in done:
        return False
    if id(data) in stack:
        return True
    stack.add(id(data))
    children = data.values() if isinstance(data, dict) else data
    try:
        if any(_find_cycle(child, stack, done) for child in children):
            return True
    finally:
        stack.discard(id(data))
    done.add(id(data))
    return False


def _parse(text: str, source: str, error_cls: Type[LoadError]) -> Any:
    try:
        data = yaml.load(text, Loader=StrictLoader)
    except yaml.YAMLError as e:
        raise error_cls("invalid YAML", source=source, details=[str(e)]) from e

    if data is None:
        raise error_cls("document is empty", source=source)
    if _find_cycle(data, set(), set()):
        raise error_cls("document refers to itself (recursive alias)", source=source)
    return data


def parse_interface(text: str, source: str = "<string>") -> Inter:
    """Parse an interface from YAML text.

    Raises:
        InterfaceLoadError: If the text is not a valid interface
    """
    data = _parse(text, source, InterfaceLoadError)
    try:
        return Inter.from_dict(data)
    except ValueError as e:
        raise InterfaceLoadError("not a valid interface", source=source, details=[str(e)]) from e


def parse_locator(text: str, source: str = "<string>") -> Loc:
    """Parse a locator from YAML text.

    Raises:
        LocatorLoadError: If the text is not a valid locator
    """
    data = _parse(text, source, LocatorLoadError)
    try:
        return Loc.from_dict(data)
    except ValueError as e:
        raise LocatorLoadError("not a valid locator", source=source, details=[str(e)]) from e


def _read(path: str, error_cls: Type[LoadError]) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise error_cls(f"can't read file: {e.strerror or e}", source=path) from e
    except UnicodeDecodeError as e:
        raise error_cls("file is not valid UTF-8", source=path, details=[str(e)]) from e


def load_interface(path: str) -> Inter:
    """Load an interface from a YAML file."""
    logger.debug("Loading interface from %s", path)
    return parse_interface(_read(path, InterfaceLoadError), source=path)


def load_locator(path: str) -> Loc:
    """Load a locator from a YAML file."""
    logger.debug("Loading locator from %s", path)
    return parse_locator(_read(path, LocatorLoadError), source=path)


def dump_interface(iface: Inter) -> str:
    """Dump an interface as YAML."""
    return yaml.safe_dump(iface.to_dict(), default_flow_style=False, sort_keys=False)


def dump_locator(loc: Loc) -> str:
    """Dump a locator as YAML."""
    return yaml.safe_dump(loc.to_dict(), default_flow_style=False, sort_keys=False)
