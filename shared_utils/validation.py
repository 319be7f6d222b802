"""
Input validation utilities.
Validates tool arguments before any backend call is made.
"""

from typing import Any, Optional

from domain.models import SummaryFormat
from shared_utils.error_handler import InvalidParamsError


class InputValidator:
    """Utility class for input validation."""

    @staticmethod
    def validate_non_empty_string(value: Any, field_name: str) -> str:
        """Validate a required, non-empty string.

        Args:
            value: Value to validate
            field_name: Name of field for error messages

        Returns:
            Validated string, stripped

        Raises:
            InvalidParamsError: If the value is missing, blank or not a string
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidParamsError(
                f"{field_name} parameter is required",
                context={"field": field_name},
            )

        if not isinstance(value, str):
            raise InvalidParamsError(
                f"{field_name} must be a string",
                context={"field": field_name},
            )

        return value.strip()

    @staticmethod
    def validate_positive_int(value: Any, field_name: str) -> int:
        """Validate positive integer.

        Args:
            value: Integer to validate
            field_name: Name of field for error messages

        Returns:
            Validated integer

        Raises:
            InvalidParamsError: If validation fails
        """
        value = InputValidator.coerce_integral(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParamsError(f"{field_name} must be an integer", context={"field": field_name})

        if value < 1:
            raise InvalidParamsError(f"{field_name} must be >= 1", context={"field": field_name})

        return value

    @staticmethod
    def coerce_integral(value: Any) -> Any:
        """Turn integral floats (JSON numbers such as ``5.0``) into ints.

        Anything else is returned unchanged for the backend to judge.
        """
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @staticmethod
    def validate_summary_format(value: Any) -> str:
        """Resolve the summary format argument.

        Missing means ``bullet_points``; unrecognised values are kept and
        render as paragraph.
        """
        if value is None or value == "":
            return SummaryFormat.BULLET_POINTS.value
        return str(value)

    @staticmethod
    def validate_optional_date(value: Optional[Any]) -> Optional[str]:
        """Pass date bounds through; empty strings mean no bound."""
        if value is None or value == "":
            return None
        return str(value)
