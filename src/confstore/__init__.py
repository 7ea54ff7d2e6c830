"""confstore - dotted-key configuration access with environment fallback."""

from __future__ import annotations

# Store
from confstore.config import ConfigStore, EnvLookup, env_var_name

# Loading
from confstore.loader import ConfigFormat, load_tree, parse_document

# Tree
from confstore.tree import (
    BoolValue,
    ConfigNode,
    ConfigTree,
    NullValue,
    NumberValue,
    SequenceValue,
    StringValue,
    build_tree,
    resolve,
)

# Errors
from confstore.errors import (
    ConfigError,
    ConfigParseError,
    ErrorCodes,
    FileReadError,
    FormatConversionError,
    InvalidNumericFormatError,
    InvalidSecretEncodingError,
    MissingRequiredPropertyError,
    TypeMismatchError,
    UnknownFormatError,
)

__version__ = "0.1.0"

__all__ = [
    # Store
    "ConfigStore",
    "EnvLookup",
    "env_var_name",
    # Loading
    "ConfigFormat",
    "load_tree",
    "parse_document",
    # Tree
    "ConfigTree",
    "ConfigNode",
    "NullValue",
    "StringValue",
    "BoolValue",
    "NumberValue",
    "SequenceValue",
    "build_tree",
    "resolve",
    # Errors
    "ConfigError",
    "FileReadError",
    "FormatConversionError",
    "UnknownFormatError",
    "ConfigParseError",
    "MissingRequiredPropertyError",
    "TypeMismatchError",
    "InvalidNumericFormatError",
    "InvalidSecretEncodingError",
    "ErrorCodes",
]
