"""
Validation functions for configuration values.

Each validator returns the normalized value or raises ValidationError with
the offending field name attached.
"""

from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import ValidationError

PLACEHOLDER = "$1"


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a positive float.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """Accept real booleans and the usual string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "on"):
            return True
        if lowered in ("false", "no", "0", "off"):
            return False
    raise ValidationError(
        f"{field_name} must be a boolean, got {value!r}",
        field_name=field_name,
        value=value
    )


def validate_command_template(template: Any, field_name: str = "command_template") -> str:
    """
    Validate a build or run command template.

    The ``$1`` placeholder is optional: a run command such as ``python app.py``
    does not need to reference the build artifact.

    Args:
        template: Command template to validate
        field_name: Name of the field being validated

    Returns:
        Validated command template, stripped of surrounding whitespace

    Raises:
        ValidationError: If template is empty or not a string
    """
    if not isinstance(template, str) or not template.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=template
        )
    return template.strip()


def validate_watch_paths(value: Union[str, List[Any]], field_name: str = "watch") -> List[str]:
    """
    Validate the watch set.

    Accepts either a comma separated string (command-line form) or a list of
    strings (TOML form). Empty entries are dropped; duplicates are kept.

    Raises:
        ValidationError: If no usable path remains
    """
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list):
        items = value
    else:
        raise ValidationError(
            f"{field_name} must be a string or a list of strings",
            field_name=field_name,
            value=value
        )

    paths = []
    for item in items:
        if not isinstance(item, str):
            raise ValidationError(
                f"{field_name} entries must be strings, got {item!r}",
                field_name=field_name,
                value=value
            )
        if item.strip():
            paths.append(item.strip())

    if not paths:
        raise ValidationError(
            f"{field_name} must name at least one path",
            field_name=field_name,
            value=value
        )
    return paths


def validate_relative_file(value: Any, field_name: str = "path") -> Path:
    """
    Validate a path used for a transient artifact.

    Raises:
        ValidationError: If the value is empty or names a directory
    """
    if not isinstance(value, (str, Path)) or not str(value).strip():
        raise ValidationError(
            f"{field_name} must be a non-empty path",
            field_name=field_name,
            value=value
        )
    path = Path(str(value).strip())
    if path.is_dir():
        raise ValidationError(
            f"{field_name} must name a file, but {path} is a directory",
            field_name=field_name,
            value=value
        )
    return path
