"""Utilities package for the Profile Map app.

Re-export stable helper functions from the utility modules.
"""
# This module intentionally re-exports symbols from submodules. Flake8 F401
# warnings are expected for re-exported names and are silenced locally.
# flake8: noqa: F401

from .errors import (
    AddressNotFound,
    DuplicateProfileError,
    GeocodingError,
    ProfileNotFoundError,
    ProfileStoreError,
    ProfileValidationError,
    ServiceUnavailable,
    describe_error,
)
from .filtering import FilterCriteria, SortKey, apply_filters, clear_filters
from .geocoding import GeocodingResolver, Resolution
from .io_utils import get_profile_summary_bytes, handle_streamlit_error, profiles_to_csv_bytes, sanitize_filename
from .profiles import Location, Profile, ProfileStore
from .validation import ensure_valid, parse_interests, validate_coordinates, validate_profile

__all__ = [
    # Errors
    "AddressNotFound",
    "DuplicateProfileError",
    "GeocodingError",
    "ProfileNotFoundError",
    "ProfileStoreError",
    "ProfileValidationError",
    "ServiceUnavailable",
    "describe_error",
    # Profiles and filtering
    "FilterCriteria",
    "Location",
    "Profile",
    "ProfileStore",
    "SortKey",
    "apply_filters",
    "clear_filters",
    # Geocoding
    "GeocodingResolver",
    "Resolution",
    # Validation
    "ensure_valid",
    "parse_interests",
    "validate_coordinates",
    "validate_profile",
    # Exports
    "get_profile_summary_bytes",
    "handle_streamlit_error",
    "profiles_to_csv_bytes",
    "sanitize_filename",
]
