"""Validation utilities for profile input, URLs, interests and coordinates.

Small, self-contained helpers used across the application and tests. The
checks report their outcome as values; ``ensure_valid`` is the one gate that
raises.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

from src.utils.errors import ProfileValidationError

# Callers surface a single message; it is the first failing field in check order.
ERROR_SELECTION_STRATEGY = "first_insertion_order"

MIN_NAME_LENGTH = 2
MIN_DESCRIPTION_LENGTH = 10
MIN_ADDRESS_LENGTH = 5


class ErrorKind(Enum):
    """Reason a single field failed validation."""

    MISSING_FIELD = "MissingField"
    TOO_SHORT = "TooShort"
    INVALID_URL = "InvalidUrl"
    WRONG_TYPE = "WrongType"


@dataclass(frozen=True)
class FieldError:
    kind: ErrorKind
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating one profile payload.

    ``errors`` keeps the order in which the fields were checked, which is
    what ``first_error`` relies on.
    """

    errors: Dict[str, FieldError] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def messages(self) -> Dict[str, str]:
        return {name: err.message for name, err in self.errors.items()}

    def first_error(self) -> Optional[str]:
        for err in self.errors.values():
            return err.message
        return None


# (field, label, minimum length, message when too short)
_REQUIRED_TEXT_FIELDS: List[Tuple[str, str, int, str]] = [
    ("name", "Name", MIN_NAME_LENGTH, "Name must be at least 2 characters long"),
    ("description", "Description", MIN_DESCRIPTION_LENGTH, "Description must be at least 10 characters long"),
    ("address", "Address", MIN_ADDRESS_LENGTH, "Please enter a valid address"),
]


def _get_field(profile: Any, name: str) -> Any:
    if isinstance(profile, Mapping):
        return profile.get(name)
    return getattr(profile, name, None)


def is_valid_url(value: str) -> bool:
    """Return True when ``value`` is a well-formed absolute URL (scheme and host)."""
    if not isinstance(value, str) or not value.strip() or any(ch.isspace() for ch in value.strip()):
        return False
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def validate_profile(profile: Any) -> ValidationResult:
    """
    Check a profile payload against the field rules.

    Every rule runs independently and every failing field is reported.
    Required text fields are considered missing when empty after trimming;
    length limits apply to the trimmed value.

    Args:
        profile: Mapping of form fields or any object exposing them as attributes

    Returns:
        ValidationResult whose ``is_valid`` is True iff no field failed
    """
    result = ValidationResult()
    if profile is None:
        profile = {}

    for name, label, min_length, short_message in _REQUIRED_TEXT_FIELDS:
        value = _get_field(profile, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            result.errors[name] = FieldError(ErrorKind.MISSING_FIELD, f"{label} is required")
        elif not isinstance(value, str):
            result.errors[name] = FieldError(ErrorKind.WRONG_TYPE, f"{label} must be text")
        elif len(value.strip()) < min_length:
            result.errors[name] = FieldError(ErrorKind.TOO_SHORT, short_message)

    photo = _get_field(profile, "photo")
    if photo and not is_valid_url(photo):
        result.errors["photo"] = FieldError(ErrorKind.INVALID_URL, "Please enter a valid URL for the photo")

    interests = _get_field(profile, "interests")
    if interests is not None and not isinstance(interests, (list, tuple)):
        result.errors["interests"] = FieldError(ErrorKind.WRONG_TYPE, "Interests must be a list")

    return result


def ensure_valid(profile: Any) -> ValidationResult:
    """Validate ``profile`` and raise ``ProfileValidationError`` when any field fails."""
    result = validate_profile(profile)
    if not result.is_valid:
        raise ProfileValidationError(result)
    return result


def parse_interests(interests_text: Optional[str]) -> List[str]:
    """Split a comma-separated interests string into trimmed, non-empty tags."""
    if not interests_text:
        return []
    return [item.strip() for item in interests_text.split(",") if item.strip()]


def validate_coordinates(lat: float, lng: float) -> Tuple[bool, str]:
    """
    Validate latitude and longitude coordinates.

    Args:
        lat: Latitude value
        lng: Longitude value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False, "Coordinates must be numeric"
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False, "Coordinates must be numeric"

    if not (-90 <= lat <= 90):
        return False, "Latitude must be between -90 and 90"

    if not (-180 <= lng <= 180):
        return False, "Longitude must be between -180 and 180"

    return True, "Valid coordinates"
