"""ConfigStore: typed, environment-aware access to a configuration tree."""

from __future__ import annotations

import base64
import binascii
import logging
import math
import os
import re
import struct
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from confstore.errors import (
    InvalidNumericFormatError,
    InvalidSecretEncodingError,
    MissingRequiredPropertyError,
    TypeMismatchError,
)
from confstore.loader import ConfigFormat, load_tree, parse_document
from confstore.tree import (
    BoolValue,
    ConfigTree,
    LeafNode,
    NumberValue,
    StringValue,
    build_tree,
    format_natural,
    resolve,
)

__all__ = ["ConfigStore", "EnvLookup", "env_var_name"]

logger = logging.getLogger(__name__)

EnvLookup = Callable[[str], str | None]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity)|nan",
    re.IGNORECASE,
)


def env_var_name(key: str) -> str:
    """Environment variable consulted for ``key``: 'my.test.key' -> 'MY_TEST_KEY'."""
    return key.upper().replace(".", "_")


def _to_float32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class ConfigStore:
    """Read-only configuration with dotted-key lookup and environment fallback.

    Keys are resolved against the tree first; a key stored verbatim (``"a.b"``
    at the top level) takes precedence over the nested path ``a -> b``. When
    the tree has no value, the environment variable named by
    :func:`env_var_name` is consulted. Unset and empty variables count as
    absent.

    Optional accessors (``get_*``) return the supplied default, or the type's
    zero value, when nothing resolves. Required accessors (``require_*``)
    raise :class:`MissingRequiredPropertyError` instead. Values of the wrong
    kind raise regardless of the accessor family.

    Args:
        data: Parsed document (a mapping) or an already built ConfigTree.
        env_lookup: Callable returning the value of an environment variable or
            None. Defaults to reading ``os.environ`` on every call.
    """

    def __init__(
        self,
        data: Mapping[str, Any] | ConfigTree | None = None,
        *,
        env_lookup: EnvLookup | None = None,
    ) -> None:
        if isinstance(data, ConfigTree):
            self._tree = data
        else:
            self._tree = build_tree(data or {})
        self._env_lookup: EnvLookup = env_lookup or os.environ.get

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        fmt: ConfigFormat | str = ConfigFormat.YAML,
        *,
        env_lookup: EnvLookup | None = None,
    ) -> ConfigStore:
        """Load a YAML or JSON file."""
        return cls(load_tree(path, fmt), env_lookup=env_lookup)

    @classmethod
    def from_bytes(
        cls,
        content: bytes | str,
        fmt: ConfigFormat | str = ConfigFormat.YAML,
        *,
        env_lookup: EnvLookup | None = None,
    ) -> ConfigStore:
        """Parse an in-memory YAML or JSON document."""
        return cls(parse_document(content, fmt), env_lookup=env_lookup)

    @property
    def tree(self) -> ConfigTree:
        """The underlying read-only tree."""
        return self._tree

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and resolve(key, self._tree) is not None

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get_prop(self, key: str) -> Any:
        """Return the raw tree value for ``key``, or None.

        The environment is not consulted and no coercion is applied.
        """
        node = resolve(key, self._tree)
        return None if node is None else node.to_python()

    def _read_env(self, key: str) -> str:
        name = env_var_name(key)
        value = self._env_lookup(name) or ""
        if value:
            logger.debug(f"Property {key} resolved from environment variable {name}")
        return value

    # ------------------------------------------------------------------
    # Strings and secrets
    # ------------------------------------------------------------------

    def _resolve_string(self, key: str) -> str:
        node = resolve(key, self._tree)
        if node is None:
            return self._read_env(key)
        return format_natural(node)

    def get_string(self, key: str, default: str | None = None) -> str:
        """String value of ``key``; any leaf kind is rendered naturally."""
        node = resolve(key, self._tree)
        if node is not None:
            return format_natural(node)
        value = self._read_env(key)
        if value == "":
            return default if default is not None else ""
        return value

    def require_string(self, key: str) -> str:
        value = self._resolve_string(key)
        if value == "":
            raise MissingRequiredPropertyError(key)
        return value

    def get_secret(self, key: str) -> str:
        """Base64-decoded string value of ``key``, or "" when nothing resolves."""
        node = resolve(key, self._tree)
        if node is None:
            encoded = self._read_env(key)
        elif isinstance(node, StringValue):
            encoded = node.value
        else:
            raise TypeMismatchError(key, expected="string", actual=node.kind)
        if encoded == "":
            return ""
        return self._decode_secret(key, encoded)

    def require_secret(self, key: str) -> str:
        value = self.get_secret(key)
        if value == "":
            raise MissingRequiredPropertyError(key)
        return value

    @staticmethod
    def _decode_secret(key: str, encoded: str) -> str:
        # Line breaks are ignored, as in wrapped base64 output.
        cleaned = encoded.replace("\r", "").replace("\n", "")
        try:
            raw = base64.b64decode(cleaned, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidSecretEncodingError(key, cause=exc) from exc
        # Binary secrets survive: undecodable bytes map to surrogates and
        # round-trip through encode("utf-8", "surrogateescape").
        return raw.decode("utf-8", errors="surrogateescape")

    # ------------------------------------------------------------------
    # Booleans
    # ------------------------------------------------------------------

    def _resolve_bool(self, key: str) -> bool | None:
        node = resolve(key, self._tree)
        if node is None:
            value = self._read_env(key)
            if value == "":
                return None
            return value.lower() == "true"
        if isinstance(node, BoolValue):
            return node.value
        raise TypeMismatchError(key, expected="boolean", actual=node.kind)

    def get_bool(self, key: str, default: bool | None = None) -> bool:
        """Boolean value of ``key``.

        Tree values must be native booleans. Environment values are true only
        when they equal "true" ignoring case.
        """
        value = self._resolve_bool(key)
        if value is None:
            return bool(default)
        return value

    def require_bool(self, key: str) -> bool:
        value = self._resolve_bool(key)
        if value is None:
            raise MissingRequiredPropertyError(key)
        return value

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def _number_node(self, key: str, node: LeafNode, target_type: str) -> int | float:
        if isinstance(node, NumberValue):
            return node.value
        raise TypeMismatchError(key, expected=target_type, actual=node.kind)

    def _resolve_int(self, key: str) -> int | None:
        node = resolve(key, self._tree)
        if node is None:
            value = self._read_env(key)
            if value == "":
                return None
            if not _INT_PATTERN.fullmatch(value):
                raise InvalidNumericFormatError(key, value, "int")
            return int(value)
        number = self._number_node(key, node, "int")
        if isinstance(number, float) and not math.isfinite(number):
            raise TypeMismatchError(key, expected="int", actual="non-finite number")
        return int(number)

    def _resolve_float(self, key: str, target_type: str) -> float | None:
        node = resolve(key, self._tree)
        if node is None:
            value = self._read_env(key)
            if value == "":
                return None
            return self._parse_env_float(key, value, target_type)
        number = float(self._number_node(key, node, target_type))
        if target_type == "float32":
            return _to_float32(number)
        return number

    @staticmethod
    def _parse_env_float(key: str, value: str, target_type: str) -> float:
        if not _FLOAT_PATTERN.fullmatch(value):
            raise InvalidNumericFormatError(key, value, target_type)
        number = float(value)
        if target_type == "float32" and math.isfinite(number):
            try:
                return struct.unpack("f", struct.pack("f", number))[0]
            except OverflowError as exc:
                raise InvalidNumericFormatError(key, value, target_type, cause=exc) from exc
        if math.isinf(number) and "inf" not in value.lower():
            raise InvalidNumericFormatError(key, value, target_type)
        return number

    def get_int(self, key: str, default: int | None = None) -> int:
        """Integer value of ``key``; tree numbers are truncated toward zero."""
        value = self._resolve_int(key)
        if value is None:
            return default if default is not None else 0
        return value

    def require_int(self, key: str) -> int:
        value = self._resolve_int(key)
        if value is None:
            raise MissingRequiredPropertyError(key)
        return value

    def get_float64(self, key: str, default: float | None = None) -> float:
        value = self._resolve_float(key, "float64")
        if value is None:
            return float(default) if default is not None else 0.0
        return value

    def require_float64(self, key: str) -> float:
        value = self._resolve_float(key, "float64")
        if value is None:
            raise MissingRequiredPropertyError(key)
        return value

    def get_float32(self, key: str, default: float | None = None) -> float:
        """Float value of ``key`` rounded to single precision.

        A supplied default is returned as given.
        """
        value = self._resolve_float(key, "float32")
        if value is None:
            return float(default) if default is not None else 0.0
        return value

    def require_float32(self, key: str) -> float:
        value = self._resolve_float(key, "float32")
        if value is None:
            raise MissingRequiredPropertyError(key)
        return value
