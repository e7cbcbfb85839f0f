"""
Input validation utilities for command-line and configuration values.

These guard the values a caller hands to the services (file paths, limits,
thresholds). Student field rules live in roster.core.validators instead.
"""

import math

MAX_PATH_LENGTH = 4096


class InputValidationError(ValueError):
    """Raised when a caller-supplied argument is unusable."""
    pass


def validate_file_path(file_path: str, field_name: str = "file_path") -> str:
    """
    Check a user-supplied CSV path and return it trimmed.

    Parent-directory segments are refused so an export or report name cannot
    climb out of the data directory.

    Raises:
        InputValidationError: If the path is blank, too long, or contains
                              ".." or a NUL character

    Examples:
        >>> validate_file_path(" exports/top.csv ")
        'exports/top.csv'
    """
    path = file_path.strip() if isinstance(file_path, str) else ""
    if not path:
        raise InputValidationError(f"{field_name} must be a non-empty path")

    problems = []
    if ".." in path:
        problems.append("path traversal characters (..)")
    if "\x00" in path:
        problems.append("null bytes")
    if problems:
        raise InputValidationError(f"{field_name} contains {' and '.join(problems)}")

    if len(path) > MAX_PATH_LENGTH:
        raise InputValidationError(f"{field_name} is longer than {MAX_PATH_LENGTH} characters")

    return path


def validate_limit(limit: int, field_name: str = "limit", max_limit: int = 10000) -> int:
    """
    Check the N of a top-N report: an int between 1 and max_limit.

    Examples:
        >>> validate_limit(10)
        10
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InputValidationError(f"{field_name} must be an integer, got {type(limit).__name__}")
    if not 1 <= limit <= max_limit:
        raise InputValidationError(f"{field_name} must be between 1 and {max_limit}, got {limit}")
    return limit


def validate_threshold(threshold: float, field_name: str = "threshold") -> float:
    """
    Validate a GPA threshold; it must lie on the GPA scale 0.0-4.0.

    Examples:
        >>> validate_threshold(2.0)
        2.0
        >>> validate_threshold(4.5)  # doctest: +SKIP
        InputValidationError: threshold must be between 0.0 and 4.0
    """
    if isinstance(threshold, bool) or not isinstance(threshold, int | float):
        raise InputValidationError(f"{field_name} must be a number, got {type(threshold).__name__}")

    threshold = float(threshold)
    if math.isnan(threshold) or not 0.0 <= threshold <= 4.0:
        raise InputValidationError(f"{field_name} must be between 0.0 and 4.0, got {threshold}")

    return threshold
