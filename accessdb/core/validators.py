#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for accessdb operations.

Provides type-safe conversion, validation, and normalization functions
used by the managers before anything is written to the store.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from .exceptions import ValidationError

E = TypeVar("E", bound=Enum)

RATING_MIN = 1
RATING_MAX = 5


class DataValidator:
    """Centralized data validation for database operations."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-empty.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If validation fails
        """
        for field in required_fields:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def validate_rating(value: Any, field_name: str = "rating") -> int:
        """
        Validate a 1-5 rating.

        Args:
            value: Candidate rating
            field_name: Field name used in the error message

        Returns:
            The rating as an int

        Raises:
            ValidationError: If value is missing, not an integer, or out of range
        """
        if isinstance(value, bool) or value is None:
            raise ValidationError(f"{field_name} is required")
        try:
            rating = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{field_name} must be an integer, got {value!r}")
        if rating != value and not isinstance(value, str):
            raise ValidationError(f"{field_name} must be an integer, got {value!r}")
        if not RATING_MIN <= rating <= RATING_MAX:
            raise ValidationError(
                f"{field_name} must be between {RATING_MIN} and {RATING_MAX}"
            )
        return rating

    @staticmethod
    def validate_optional_rating(value: Any, field_name: str) -> Optional[int]:
        """Validate a rating that may be absent (None means "unknown")."""
        if value is None:
            return None
        return DataValidator.validate_rating(value, field_name)

    @staticmethod
    def validate_limit(value: Any) -> int:
        """
        Validate a result-size limit.

        SQLite reads a negative LIMIT as "no limit", so only positive
        integers are accepted.

        Raises:
            ValidationError: If value is not a positive integer
        """
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValidationError(f"limit must be a positive integer, got {value!r}")
        return value

    @staticmethod
    def validate_choice(value: Any, enum_class: Type[E]) -> E:
        """
        Coerce a value into a member of enum_class.

        Raises:
            ValidationError: If value is not a valid member or member value
        """
        if isinstance(value, enum_class):
            return value
        try:
            return enum_class(value)
        except ValueError:
            choices = ", ".join(member.value for member in enum_class)
            raise ValidationError(
                f"Invalid {enum_class.__name__} '{value}'. Expected one of: {choices}"
            )

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Normalize string value.

        Args:
            value: Value to normalize

        Returns:
            Stripped string, or None if empty
        """
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_string_list(value: Any) -> List[str]:
        """
        Normalize a list of strings, dropping blanks.

        A bare string is treated as a one-item list.
        """
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        normalized = (DataValidator.normalize_string(item) for item in value)
        return [item for item in normalized if item]

    @staticmethod
    def normalize_bool(value: Any) -> Optional[bool]:
        """
        Convert various inputs to boolean.

        Raises:
            ValidationError: If conversion fails
        """
        if isinstance(value, bool):
            return value
        elif isinstance(value, (int, float)):
            if value == 0:
                return False
            elif value == 1:
                return True
            raise ValidationError(f"Cannot convert numeric '{value}' to boolean")
        elif isinstance(value, str):
            if value.lower() in ("true", "1", "yes", "on"):
                return True
            elif value.lower() in ("false", "0", "no", "off"):
                return False
            raise ValidationError(f"Cannot convert '{value}' to boolean")
        elif value is not None:
            return bool(value)
        return None

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """Convert value to integer, returning None when it cannot be parsed."""
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def normalize_float(value: Any) -> Optional[float]:
        """Convert value to float, returning None when it cannot be parsed."""
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
