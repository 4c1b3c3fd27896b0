"""
Configuration and secrets access for the Profile Map app.

Values come from Streamlit's secrets (``.streamlit/secrets.toml``) with
environment-variable fallbacks for the geocoding credential, so the app can
run locally without a secrets file.

Usage:
    from src.utils.config import get_api_config, is_api_enabled

    geocoding_config = get_api_config("geocoding")
    api_key = geocoding_config["google_maps_api_key"]
"""

import logging
import os
from typing import Any, Dict

import streamlit as st

logger = logging.getLogger(__name__)

_MISSING = object()


def get_secret(key_path: str, default: Any = None) -> Any:
    """
    Safely retrieve a secret from Streamlit's secrets management.

    Args:
        key_path: Dot-notation path to the secret (e.g., 'geocoding.request_timeout')
        default: Default value if secret is not found

    Returns:
        The secret value or default if not found

    Examples:
        >>> get_secret('geocoding.google_maps_api_key', '')
        >>> get_secret('app.debug_mode', False)
    """
    try:
        value = st.secrets
        for key in key_path.split("."):
            try:
                value = value[key]
            except (KeyError, TypeError):
                return default
        return value
    except Exception as e:
        # st.secrets raises when no secrets file exists at all
        logger.debug(f"Failed to retrieve secret '{key_path}': {e}")
        return default


def _secret_or_env(key_path: str, env_name: str, default: Any) -> Any:
    value = get_secret(key_path, _MISSING)
    if value is _MISSING:
        return os.getenv(env_name, default)
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def get_api_config(api_name: str) -> Dict[str, Any]:
    """
    Get configuration for a specific external service.

    Args:
        api_name: Name of the service ('geocoding')

    Returns:
        Dictionary containing the service configuration, empty when unknown
    """
    if api_name == "geocoding":
        api_key = _secret_or_env("geocoding.google_maps_api_key", "GOOGLE_MAPS_API_KEY", "")
        return {
            "enabled": _as_bool(get_secret("geocoding.enabled", True)),
            "google_maps_api_key": api_key,
            "google_maps_enabled": _as_bool(get_secret("geocoding.google_maps_enabled", bool(api_key))),
            "nominatim_user_agent": get_secret("geocoding.nominatim_user_agent", "profile_map_app"),
            "request_timeout": float(get_secret("geocoding.request_timeout", 10)),
            "rate_limit_delay": float(get_secret("geocoding.rate_limit_delay", 1.0)),
            "max_retries": int(get_secret("geocoding.max_retries", 2)),
        }
    return {}


def get_map_config() -> Dict[str, Any]:
    """
    Get map display defaults.

    Returns:
        Dictionary with the default center, the overview zoom and the zoom
        used when a profile is selected
    """
    return {
        "default_center_lat": float(get_secret("map.default_center_lat", 40.7128)),
        "default_center_lng": float(get_secret("map.default_center_lng", -74.0060)),
        "default_zoom": int(get_secret("map.default_zoom", 4)),
        "selected_zoom": int(get_secret("map.selected_zoom", 13)),
    }


def get_app_config() -> Dict[str, Any]:
    """
    Get general application configuration.

    Returns:
        Dictionary containing app configuration
    """
    return {
        "environment": get_secret("app.environment", "production"),
        "debug_mode": _as_bool(get_secret("app.debug_mode", False)),
        "log_level": str(get_secret("app.log_level", "INFO")).upper(),
    }


def is_api_enabled(api_name: str) -> bool:
    """
    Check if a specific API is enabled and properly configured.

    Args:
        api_name: 'google_maps' or 'geocoding'

    Returns:
        True if the API is enabled and has required configuration
    """
    config = get_api_config("geocoding")
    if api_name == "google_maps":
        return config["enabled"] and config["google_maps_enabled"] and bool(config["google_maps_api_key"])
    if api_name == "geocoding":
        return config["enabled"]
    return False


def validate_configuration() -> Dict[str, str]:
    """
    Validate the application configuration and return any warnings or errors.

    Returns:
        Dictionary mapping component name to the issue found
    """
    issues = {}

    geocoding_config = get_api_config("geocoding")
    if not geocoding_config["enabled"]:
        issues["geocoding"] = "Geocoding is disabled; profiles cannot be added or edited"
    elif geocoding_config["google_maps_enabled"] and not geocoding_config["google_maps_api_key"]:
        issues["geocoding"] = "Google Maps is enabled but no API key is provided"
    elif geocoding_config["request_timeout"] <= 0:
        issues["geocoding"] = "Geocoding request timeout must be positive"

    app_config = get_app_config()
    if app_config["environment"] not in ["development", "staging", "production"]:
        issues["app"] = f"Unknown environment: {app_config['environment']}"
    if app_config["log_level"] not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        issues["logging"] = f"Unknown log level: {app_config['log_level']}"

    return issues
