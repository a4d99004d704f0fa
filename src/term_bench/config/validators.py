"""Field validation utilities for suite file parsing.

This module provides a small fluent API for extracting typed fields from
YAML mappings with error messages that point at the offending entry.
"""

from __future__ import annotations

from typing import Any, TypeVar

from term_bench.config.exceptions import ConfigurationError

__all__ = ["FieldValidator"]

T = TypeVar("T")


class FieldValidator:
    """Fluent validator for configuration dictionary fields.

    Example:
        v = FieldValidator(data, "benchmarks[0] in suite.yaml")
        name = v.require("name", str, empty_check=True)
        volume = v.require_int("bytes", minimum=0)
        extra = v.optional_str_list("args")

    """

    def __init__(self, data: dict[str, Any], context: str) -> None:
        """Initialize the validator with data and context.

        Args:
            data: Dictionary containing fields to validate.
            context: Context string for error messages.

        """
        self._data = data
        self._context = context

    @property
    def context(self) -> str:
        """Get the context string for error messages."""
        return self._context

    def require_mapping(self) -> dict[str, Any]:
        """Validate that the data is a mapping.

        Raises:
            ConfigurationError: If data is not a dict.

        """
        if not isinstance(self._data, dict):
            raise ConfigurationError(
                f"Invalid structure: expected mapping, "
                f"got {type(self._data).__name__} in {self._context}"
            )
        return self._data

    def require(
        self,
        field: str,
        expected_type: type[T],
        *,
        empty_check: bool = False,
    ) -> T:
        """Validate and extract a required field.

        Strings are stripped before the emptiness check.

        Raises:
            ConfigurationError: If the field is missing, has the wrong type,
                or is an empty string when empty_check is set.

        """
        if field not in self._data:
            raise ConfigurationError(
                f"Missing required field '{field}' in {self._context}"
            )

        value = self._data[field]
        self._check_type(field, value, expected_type)

        if isinstance(value, str):
            value = value.strip()
            if empty_check and not value:
                raise ConfigurationError(
                    f"Invalid '{field}': must be a non-empty string in {self._context}"
                )

        return value  # type: ignore[return-value]

    def optional(
        self,
        field: str,
        expected_type: type[T],
        *,
        default: T | None = None,
    ) -> T | None:
        """Validate and extract an optional field.

        Raises:
            ConfigurationError: If the field is present with the wrong type.

        """
        value = self._data.get(field)
        if value is None:
            return default
        self._check_type(field, value, expected_type)
        return value  # type: ignore[return-value]

    def require_int(self, field: str, *, minimum: int | None = None) -> int:
        """Validate and extract a required integer with an optional lower bound.

        Underscore-separated YAML strings such as ``50_000_000`` are accepted.

        Raises:
            ConfigurationError: If missing, not an integer, or below minimum.

        """
        if field not in self._data:
            raise ConfigurationError(
                f"Missing required field '{field}' in {self._context}"
            )
        return self._to_int(field, self._data[field], minimum)

    def optional_int(
        self,
        field: str,
        *,
        default: int,
        minimum: int | None = None,
    ) -> int:
        """Validate and extract an optional integer.

        Raises:
            ConfigurationError: If present and not an integer or below minimum.

        """
        value = self._data.get(field)
        if value is None:
            return default
        return self._to_int(field, value, minimum)

    def optional_str_list(self, field: str) -> list[str]:
        """Extract an optional list of arguments.

        Scalars inside the list (``--lines-from-bottom``, ``1``) are
        converted to strings since they are passed on a command line.

        Raises:
            ConfigurationError: If present and not a list of scalars.

        """
        value = self._data.get(field)
        if value is None:
            return []
        if not isinstance(value, list):
            raise ConfigurationError(
                f"Invalid '{field}': expected list in {self._context}"
            )
        if not all(isinstance(item, (str, int, float)) for item in value):
            raise ConfigurationError(
                f"Invalid '{field}': all items must be scalars in {self._context}"
            )
        return [str(item) for item in value]

    def _check_type(self, field: str, value: Any, expected_type: type) -> None:
        if not isinstance(value, expected_type):
            raise ConfigurationError(
                f"Invalid '{field}': expected {expected_type.__name__}, "
                f"got {type(value).__name__} in {self._context}"
            )

    def _to_int(self, field: str, value: Any, minimum: int | None) -> int:
        if isinstance(value, str):
            try:
                value = int(value.replace("_", ""))
            except ValueError:
                raise ConfigurationError(
                    f"Invalid '{field}': expected integer, got '{value}' "
                    f"in {self._context}"
                ) from None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(
                f"Invalid '{field}': expected integer, "
                f"got {type(value).__name__} in {self._context}"
            )
        if minimum is not None and value < minimum:
            raise ConfigurationError(
                f"Invalid '{field}': must be >= {minimum} in {self._context}"
            )
        return value
