#!/usr/bin/env python3
"""
validators.py
--------------------
Argument validation and normalization for repository operations.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional

from .exceptions import ValidationError


class DataValidator:
    """Centralized argument validation for database operations."""

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Normalize string value.

        Args:
            value: Value to normalize

        Returns:
            Stripped string, or None for empty/None input
        """
        if value is None:
            return None
        normalized = str(value).strip()
        return normalized or None

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """
        Convert value to integer.

        Args:
            value: Value to convert

        Returns:
            Integer value or None

        Raises:
            ValidationError: If the value is not an integer
        """
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValidationError(f"Expected an integer, got boolean {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Expected an integer, got {value!r}")

    @staticmethod
    def normalize_ids(values: Optional[Iterable[Any]]) -> List[int]:
        """
        Normalize an iterable of identifiers to a de-duplicated list.

        Order of first appearance is kept.

        Args:
            values: Identifiers (ints or numeric strings)

        Returns:
            List of unique integer ids

        Raises:
            ValidationError: If any value is not an integer
        """
        if values is None:
            return []
        seen: List[int] = []
        for value in values:
            normalized = DataValidator.normalize_int(value)
            if normalized is not None and normalized not in seen:
                seen.append(normalized)
        return seen

    @staticmethod
    def validate_paging(count: int, offset: int) -> None:
        """
        Validate skip/take arguments.

        Raises:
            ValidationError: If either value is negative or not an int
        """
        for name, value in (("count", count), ("offset", offset)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValidationError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ValidationError(f"{name} must be non-negative, got {value}")

    @staticmethod
    def validate_year_month(year: int, month: int) -> None:
        """
        Validate a calendar year and month.

        Raises:
            ValidationError: If month is outside 1-12, year outside 1-9999,
                or the month is December 9999
        """
        if not isinstance(month, int) or not 1 <= month <= 12:
            raise ValidationError(f"month must be between 1 and 12, got {month!r}")
        if not isinstance(year, int) or not 1 <= year <= 9999:
            raise ValidationError(f"year out of range: {year!r}")
        # the month window ends at the first instant of the next month
        if (year, month) == (9999, 12):
            raise ValidationError("December 9999 has no following month")
