"""Field-presence checks shared by the auth and profile flows."""

from typing import Any, Dict, Mapping, Optional, Sequence

from videotube.core.exceptions import ValidationException


def blank_fields(values: Mapping[str, Any], required: Sequence[str]) -> list[str]:
    """Names in `required` whose value is missing, not a string, or empty after trimming."""
    missing = []
    for name in required:
        value = values.get(name)
        if not isinstance(value, str) or not value.strip():
            missing.append(name)
    return missing


def ensure_required_fields(
    values: Mapping[str, Any],
    required: Sequence[str],
    *,
    message: Optional[str] = None,
) -> Dict[str, str]:
    """Return the trimmed required values, or raise `ValidationException` (400).

    The exception's `details` lists the offending field names.
    """
    missing = blank_fields(values, required)
    if missing:
        raise ValidationException(message, details={"missing": missing})
    return {name: values[name].strip() for name in required}


def normalize_handle(value: str) -> str:
    """Usernames and emails are compared and stored lowercased."""
    return value.strip().lower()


__all__ = ["blank_fields", "ensure_required_fields", "normalize_handle"]
