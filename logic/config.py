"""
Configuration management module.

This module loads the application settings from the environment (and an
optional .env file) once at start-up and exposes them as a read-only
dictionary.
"""

import os
from typing import Dict, Any, List, Optional

from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
ENV_PATH = os.path.join(BASE_DIR, ".env")

PLACEHOLDER_MAP_TOKEN = "your-mapbox-token-here"

_config: Optional[Dict[str, Any]] = None


def load_config() -> Dict[str, Any]:
    """Load configuration from environment variables.

    Returns:
        Configuration dictionary with all required fields ensured.
    """
    load_dotenv(ENV_PATH)

    config = {
        "database_url": os.getenv("DATABASE_URL"),
        "environment": os.getenv("ENVIRONMENT"),
        "log_level": os.getenv("LOG_LEVEL"),
        "api_base_url": os.getenv("API_BASE_URL"),
        "cors_origins": parse_origins(os.getenv("CORS_ORIGIN")),
        "map_token": os.getenv("MAPBOX_TOKEN"),
        "port": os.getenv("PORT"),
    }

    return ensure_config_fields(config)


def get_config() -> Dict[str, Any]:
    """Get the process-wide configuration, loading it on first use.

    Returns:
        The cached configuration dictionary.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config():
    """Drop the cached configuration so the next read reloads it."""
    global _config
    _config = None


def get_default_config() -> Dict[str, Any]:
    """Get default configuration structure.

    Returns:
        Default configuration dictionary.
    """
    return {
        "database_url": f"sqlite:///{os.path.join(BASE_DIR, 'biblemap.db')}",
        "environment": "development",
        "log_level": "INFO",
        "api_base_url": "http://localhost:4000/api",
        "cors_origins": ["http://localhost:3000", "http://localhost:3001"],
        "map_token": None,
        "port": 4000,
    }


def ensure_config_fields(config: Dict[str, Any]) -> Dict[str, Any]:
    """Ensure all required fields are present in the configuration.

    Missing or empty values are replaced by their defaults.

    Args:
        config: Configuration dictionary to update.

    Returns:
        Updated configuration dictionary.
    """
    for key, default in get_default_config().items():
        if config.get(key) in (None, "", []):
            config[key] = default

    try:
        config["port"] = int(config["port"])
    except (TypeError, ValueError):
        config["port"] = 4000

    config["log_level"] = str(config["log_level"]).upper()
    config["environment"] = str(config["environment"]).lower()

    return config


def parse_origins(value: Optional[str]) -> List[str]:
    """Split a comma separated CORS origin list.

    Args:
        value: Raw CORS_ORIGIN value.

    Returns:
        List of non-empty origins.
    """
    if not value:
        return []
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def is_development(config: Optional[Dict[str, Any]] = None) -> bool:
    config = config or get_config()
    return config.get("environment") == "development"


def validate_map_token(token: Optional[str]) -> Dict[str, Any]:
    """Check that a map provider token is usable by the client.

    An invalid token is reported, never raised: the client shows a
    "map unavailable" panel instead of the map.

    Args:
        token: Access token from the environment.

    Returns:
        Dictionary with token, isValid and, when invalid, errorMessage.
    """
    if not token:
        return {
            "token": None,
            "isValid": False,
            "errorMessage": "Map service is not configured. Check the environment variables.",
        }

    if token == PLACEHOLDER_MAP_TOKEN:
        return {
            "token": token,
            "isValid": False,
            "errorMessage": "Map token has not been set. Provide a valid token.",
        }

    if not token.startswith(("pk.", "sk.")):
        return {
            "token": token,
            "isValid": False,
            "errorMessage": "Map token has an invalid format.",
        }

    return {"token": token, "isValid": True}
