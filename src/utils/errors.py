"""Exception hierarchy shared by the validation, geocoding and store layers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from src.utils.validation import ValidationResult


class ProfileValidationError(ValueError):
    """Raised when profile input fails field validation."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        super().__init__(result.first_error() or "Invalid profile")


class GeocodingError(RuntimeError):
    """Base error for address resolution."""

    title = "Address Error"


class ServiceUnavailable(GeocodingError):
    """No geocoding provider is configured or loaded."""

    title = "Map Service Error"

    def __init__(self, message: str = "Geocoding service not available. Please reload and try again."):
        super().__init__(message)


class AddressNotFound(GeocodingError):
    """The provider returned no usable result for an address."""

    def __init__(self, message: str = "Could not find the location. Please check the address."):
        super().__init__(message)


class ProfileStoreError(RuntimeError):
    """Base error for profile store operations."""


class ProfileNotFoundError(ProfileStoreError):
    """Raised when a profile id is not known to the store."""

    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"Profile '{profile_id}' not found")


class DuplicateProfileError(ProfileStoreError):
    """Raised when a profile id is already present in the store."""

    def __init__(self, profile_id: str):
        self.profile_id = profile_id
        super().__init__(f"Profile '{profile_id}' already exists")


def describe_error(error: Exception) -> Tuple[str, str]:
    """Map an error from any user action to a (title, message) pair for the UI."""
    if isinstance(error, GeocodingError):
        return error.title, str(error)
    et = str(error).lower()
    if "network" in et or "connection" in et:
        return "No Internet Connection", "Please check your internet connection and try again."
    if "timeout" in et:
        return "Timeout", "The service is taking too long to respond. Please try again."
    return "Something went wrong", str(error) or "An unexpected error occurred. Please try again."
