"""Configuration tree nodes and dotted-key resolution."""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Union

from confstore.errors import ConfigParseError

__all__ = [
    "NullValue",
    "StringValue",
    "BoolValue",
    "NumberValue",
    "SequenceValue",
    "ConfigTree",
    "ConfigNode",
    "LeafNode",
    "build_tree",
    "resolve",
    "format_natural",
]


@dataclass(frozen=True)
class NullValue:
    """An explicit null. Present in the tree, but never a resolution result."""

    kind = "null"

    def to_python(self) -> None:
        return None


@dataclass(frozen=True)
class StringValue:
    """A string leaf."""

    value: str

    kind = "string"

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class BoolValue:
    """A boolean leaf."""

    value: bool

    kind = "boolean"

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class NumberValue:
    """A numeric leaf. Documents carry no int/float distinction that accessors rely on."""

    value: int | float

    kind = "number"

    def to_python(self) -> int | float:
        return self.value


@dataclass(frozen=True)
class SequenceValue:
    """A list leaf. Sequences resolve like scalars; their items are not addressable by key."""

    items: tuple[ConfigNode, ...]

    kind = "sequence"

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class ConfigTree:
    """A read-only nested mapping of string keys to nodes."""

    entries: Mapping[str, ConfigNode]

    kind = "mapping"

    def __post_init__(self) -> None:
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def to_python(self) -> dict[str, Any]:
        return {k: v.to_python() for k, v in self.entries.items()}

    def __len__(self) -> int:
        return len(self.entries)


LeafNode = Union[StringValue, BoolValue, NumberValue, SequenceValue]
ConfigNode = Union[LeafNode, ConfigTree, NullValue]


def _build_node(value: Any) -> ConfigNode:
    if value is None:
        return NullValue()
    # bool before number: bool is an int subclass
    if isinstance(value, bool):
        return BoolValue(value)
    if isinstance(value, (int, float)):
        return NumberValue(value)
    if isinstance(value, str):
        return StringValue(value)
    if isinstance(value, Mapping):
        return build_tree(value)
    if isinstance(value, (list, tuple)):
        return SequenceValue(tuple(_build_node(item) for item in value))
    raise ConfigParseError(f"unsupported config value type: {type(value).__name__}")


def build_tree(data: Mapping[str, Any]) -> ConfigTree:
    """Convert a parsed document into a ConfigTree.

    Keys are stringified. Null values are kept as NullValue so that a key
    present with a null value still shadows the nested path of the same name.
    """
    return ConfigTree({str(key): _build_node(value) for key, value in data.items()})


def resolve(key: str, tree: ConfigTree) -> LeafNode | None:
    """Resolve a dotted key against a tree.

    A key stored verbatim wins: if ``tree`` has an entry named ``key`` its value
    is the answer, and a mapping or null there means absent without trying the
    nested form. Otherwise the key is split at the first dot and the remainder is
    resolved inside the prefix entry when that entry is a mapping. Only leaves
    are ever returned.
    """
    if key in tree.entries:
        node = tree.entries[key]
        if isinstance(node, (ConfigTree, NullValue)):
            return None
        return node

    prefix, dot, suffix = key.partition(".")
    if not dot:
        return None
    child = tree.entries.get(prefix)
    if isinstance(child, ConfigTree):
        return resolve(suffix, child)
    return None


def _format_float(value: float) -> str:
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(value)


def _format_item(node: ConfigNode) -> str:
    if isinstance(node, NullValue):
        return "<nil>"
    if isinstance(node, ConfigTree):
        return json.dumps(node.to_python(), separators=(",", ":"))
    return format_natural(node)


def format_natural(node: LeafNode) -> str:
    """Render a leaf the way a person would write it in a config file."""
    if isinstance(node, BoolValue):
        return "true" if node.value else "false"
    if isinstance(node, NumberValue):
        if isinstance(node.value, float):
            return _format_float(node.value)
        return str(node.value)
    if isinstance(node, SequenceValue):
        return "[" + " ".join(_format_item(item) for item in node.items) + "]"
    return node.value
