"""Error hierarchy for confstore."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
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


class ConfigError(Exception):
    """Base error for all confstore errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class FileReadError(ConfigError):
    """Raised when a configuration file cannot be read."""

    def __init__(self, path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_FILE_READ_ERROR",
            message=f"Failed to read config file '{path}': {reason}",
            details={"path": path, "reason": reason},
            **kwargs,
        )

    @property
    def path(self) -> str:
        """The path that could not be read."""
        return self.details["path"]


class FormatConversionError(ConfigError):
    """Raised when a YAML document cannot be converted to JSON."""

    def __init__(self, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_FORMAT_CONVERSION_ERROR",
            message=f"Failed to convert yaml config to json: {reason}",
            details={"reason": reason},
            **kwargs,
        )


class UnknownFormatError(ConfigError):
    """Raised for a format selector other than YAML or JSON."""

    def __init__(self, fmt: Any, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_UNKNOWN_FORMAT",
            message=f"Unknown config format: {fmt!r} (allowed values: yaml, json)",
            details={"format": repr(fmt)},
            **kwargs,
        )


class ConfigParseError(ConfigError):
    """Raised when the JSON document cannot be parsed into a mapping."""

    def __init__(self, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_PARSE_ERROR",
            message=f"Failed to parse json config: {reason}",
            details={"reason": reason},
            **kwargs,
        )


class MissingRequiredPropertyError(ConfigError):
    """Raised when a required property resolves neither from the tree nor the environment."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_MISSING_REQUIRED_PROPERTY",
            message=f"Couldn't resolve required property {key}",
            details={"key": key},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The property key that could not be resolved."""
        return self.details["key"]


class TypeMismatchError(ConfigError):
    """Raised when a tree value is not of the kind the accessor requires."""

    def __init__(self, key: str, expected: str, actual: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_TYPE_MISMATCH",
            message=f"Property {key} is a {actual}, expected {expected}",
            details={"key": key, "expected": expected, "actual": actual},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The property key with the mismatching value."""
        return self.details["key"]


class InvalidNumericFormatError(ConfigError):
    """Raised when an environment value cannot be parsed as the requested number type."""

    def __init__(self, key: str, value: str, target_type: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_INVALID_NUMERIC_FORMAT",
            message=f"Failed to convert env value for key {key} to {target_type}: {value!r}",
            details={"key": key, "value": value, "target_type": target_type},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The property key whose environment value was malformed."""
        return self.details["key"]


class InvalidSecretEncodingError(ConfigError):
    """Raised when a secret is not valid standard base64."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        # Never include the encoded value.
        super().__init__(
            code="CONFIG_INVALID_SECRET_ENCODING",
            message=f"Failed to decode secret property {key}",
            details={"key": key},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The secret property key that failed to decode."""
        return self.details["key"]


class ErrorCodes:
    """All confstore error codes as constants.

    Use these instead of hardcoding error code strings.

    Example:
        if error.code == ErrorCodes.MISSING_REQUIRED_PROPERTY:
            sys.exit(1)
    """

    FILE_READ_ERROR = "CONFIG_FILE_READ_ERROR"
    FORMAT_CONVERSION_ERROR = "CONFIG_FORMAT_CONVERSION_ERROR"
    UNKNOWN_FORMAT = "CONFIG_UNKNOWN_FORMAT"
    PARSE_ERROR = "CONFIG_PARSE_ERROR"
    MISSING_REQUIRED_PROPERTY = "CONFIG_MISSING_REQUIRED_PROPERTY"
    TYPE_MISMATCH = "CONFIG_TYPE_MISMATCH"
    INVALID_NUMERIC_FORMAT = "CONFIG_INVALID_NUMERIC_FORMAT"
    INVALID_SECRET_ENCODING = "CONFIG_INVALID_SECRET_ENCODING"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
