"""Reading and parsing configuration documents."""

from __future__ import annotations

import datetime
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from confstore.errors import ConfigParseError, FileReadError, FormatConversionError, UnknownFormatError
from confstore.tree import ConfigTree, build_tree

__all__ = ["ConfigFormat", "parse_document", "read_document", "load_tree"]

logger = logging.getLogger(__name__)

# A null root (empty document) is accepted and yields an empty tree.
_ROOT_ADAPTER: TypeAdapter[dict[str, Any] | None] = TypeAdapter(dict[str, Any] | None)


class ConfigFormat(str, Enum):
    """Supported configuration document formats."""

    YAML = "yaml"
    JSON = "json"

    @classmethod
    def coerce(cls, fmt: ConfigFormat | str) -> ConfigFormat:
        """Accept the enum or its string value, case-insensitively."""
        if isinstance(fmt, cls):
            return fmt
        if isinstance(fmt, str):
            try:
                return cls(fmt.lower())
            except ValueError:
                pass
        raise UnknownFormatError(fmt)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _yaml_to_json(content: bytes | str) -> str:
    try:
        data = yaml.safe_load(content)
        return json.dumps(data, default=_json_default)
    except (yaml.YAMLError, TypeError, ValueError) as exc:
        raise FormatConversionError(str(exc), cause=exc) from exc


def parse_document(content: bytes | str, fmt: ConfigFormat | str = ConfigFormat.YAML) -> ConfigTree:
    """Parse a YAML or JSON document into a ConfigTree.

    YAML is first converted to its JSON equivalent (mapping keys become
    strings, dates become ISO-8601 strings), so both formats go through the
    same JSON parsing step. The root must be an object.
    """
    fmt = ConfigFormat.coerce(fmt)
    if fmt is ConfigFormat.YAML:
        content = _yaml_to_json(content)

    try:
        data = _ROOT_ADAPTER.validate_json(content)
    except ValidationError as exc:
        raise ConfigParseError(str(exc), cause=exc) from exc

    return build_tree(data or {})


def read_document(path: str | Path) -> bytes:
    """Read the raw bytes of a configuration file."""
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise FileReadError(str(path), str(exc), cause=exc) from exc


def load_tree(path: str | Path, fmt: ConfigFormat | str = ConfigFormat.YAML) -> ConfigTree:
    """Read and parse a configuration file."""
    fmt = ConfigFormat.coerce(fmt)
    tree = parse_document(read_document(path), fmt)
    logger.info(f"Loaded {fmt.value} config from {path} ({len(tree)} top-level keys)")
    return tree
