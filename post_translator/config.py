"""
Post-Translator Configuration Module

This module implements a hierarchical configuration system:
1. The provider bearer token is retrieved from environment variables (NOT from config.yaml)
2. Other settings are loaded from config.yaml file

Environment Variables (Required):
    - PTC_API_TOKEN: Bearer token for the translation provider API

Environment Variables (Optional):
    - POST_TRANSLATOR_CONFIG: Alternative path to config.yaml

Usage:
    export PTC_API_TOKEN="your_token_here"
"""
import os
from pathlib import Path
from typing import List, Optional

import yaml


# ==================== Path Configuration ====================
# Get the project root directory (the one holding config.yaml)
BASE_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = Path(os.environ.get("POST_TRANSLATOR_CONFIG", BASE_DIR / "config.yaml"))


# ==================== Load YAML Configuration ====================
def _load_yaml_config():
    """Load configuration from config.yaml file."""
    if not CONFIG_PATH.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {CONFIG_PATH}\n"
            "Please create config.yaml in the project root or set POST_TRANSLATOR_CONFIG."
        )

    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


# Load config at module import time
_config = _load_yaml_config()


def get_config(key: str, default=None):
    """
    Get configuration value by dot-notation key.

    Args:
        key: Dot-separated key path (e.g., 'polling.max_attempts')
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    keys = key.split(".")
    value = _config

    for k in keys:
        if isinstance(value, dict):
            value = value.get(k)
        else:
            return default

    return value if value is not None else default


# ==================== Secrets from Environment Variables ====================
def _get_env_key(key: str, required: bool = True) -> Optional[str]:
    """
    Get a secret from an environment variable.

    Args:
        key: Environment variable name
        required: If True, raises error when key is not set

    Returns:
        Secret value or None

    Raises:
        ValueError: If required key is not set
    """
    value = os.environ.get(key)
    if required and not value:
        raise ValueError(
            f"Required environment variable '{key}' is not set.\n"
            f"Please set it before starting the service:\n"
            f"  export {key}=\"your_token_here\""
        )
    return value


# ==================== Public Configuration Constants ====================

# Application Settings
APP_NAME = get_config("app.name", "Post-Translator")
APP_VERSION = get_config("app.version", "1.0.0")
DEBUG = get_config("app.debug", False)

# Database Settings
DATABASE_PATH = str(BASE_DIR / get_config("database.path", "./data/posts.db"))
DATABASE_ECHO = get_config("database.echo", False)

# ==================== Translation Provider ====================
# Read once at startup; absence is a fatal configuration error
PTC_API_TOKEN = _get_env_key("PTC_API_TOKEN", required=True)
PROVIDER_BASE_URL = get_config("provider.base_url", "https://app.ptc.wpml.org").rstrip("/")
PROVIDER_CONNECT_TIMEOUT = float(get_config("provider.connect_timeout", 10))
PROVIDER_READ_TIMEOUT = float(get_config("provider.read_timeout", 10))

# ==================== Locales ====================
DEFAULT_LOCALE = get_config("i18n.default_locale", "en")
AVAILABLE_LOCALES: List[str] = list(get_config("i18n.available_locales", ["en", "fr", "de"]))

# ==================== Polling ====================
POLLING_ENABLED = get_config("polling.enabled", True)
POLL_INTERVAL_SECONDS = float(get_config("polling.interval_seconds", 60))
POLL_MAX_ATTEMPTS = int(get_config("polling.max_attempts", 3))
POLL_WORKERS = int(get_config("polling.workers", 4))
POLL_RESUME_ON_STARTUP = get_config("polling.resume_on_startup", True)

# ==================== Callbacks ====================
CALLBACK_PUBLIC_BASE_URL = (get_config("callbacks.public_base_url", "") or "").rstrip("/")

# ==================== Logging Configuration ====================
LOG_LEVEL = get_config("logging.level", "INFO")
LOG_FILE = str(BASE_DIR / get_config("logging.file", "./logs/app.log"))
LOG_ROTATION = get_config("logging.rotation", "10 MB")
LOG_RETENTION = get_config("logging.retention", "7 days")

# ==================== API Server Configuration ====================
API_HOST = get_config("api.host", "127.0.0.1")
API_PORT = get_config("api.port", 8000)
CORS_ORIGINS = get_config("api.cors_origins", [])


# ==================== Utility Functions ====================
def get_target_locales() -> List[str]:
    """
    Get the locales posts are translated into.

    Returns:
        list: Available locales excluding the source (default) locale, in config order
    """
    return [locale for locale in AVAILABLE_LOCALES if locale != DEFAULT_LOCALE]


def build_callback_url(post_id: int) -> Optional[str]:
    """
    Build the webhook URL the provider calls when a post's translation is done.

    Args:
        post_id: Post primary key

    Returns:
        Absolute callback URL, or None in polling-only mode
    """
    if not CALLBACK_PUBLIC_BASE_URL:
        return None
    return f"{CALLBACK_PUBLIC_BASE_URL}/api/posts/{post_id}/callback"


def reload_config():
    """Reload configuration from config.yaml file."""
    global _config
    _config = _load_yaml_config()


def print_config_summary():
    """Print a summary of current configuration (without exposing the token)."""
    print(f"\n{'='*60}")
    print(f"Application: {APP_NAME} v{APP_VERSION}")
    print(f"Debug Mode: {DEBUG}")
    print(f"{'='*60}")
    print(f"\n[Database]")
    print(f"  Path: {DATABASE_PATH}")
    print(f"  Echo Queries: {DATABASE_ECHO}")

    print(f"\n[Provider]")
    print(f"  Base URL: {PROVIDER_BASE_URL}")
    print(f"  API Token: {'*** Set ***' if PTC_API_TOKEN else 'NOT SET'}")
    print(f"  Timeouts: connect={PROVIDER_CONNECT_TIMEOUT}s read={PROVIDER_READ_TIMEOUT}s")

    print(f"\n[Translation]")
    print(f"  Source Locale: {DEFAULT_LOCALE}")
    print(f"  Target Locales: {', '.join(get_target_locales())}")
    print(f"  Polling: {'enabled' if POLLING_ENABLED else 'disabled'}"
          f" (every {POLL_INTERVAL_SECONDS:.0f}s, max {POLL_MAX_ATTEMPTS} attempts)")
    print(f"  Callback URL base: {CALLBACK_PUBLIC_BASE_URL or 'NOT SET (polling-only)'}")

    print(f"\n[API Server]")
    print(f"  Host: {API_HOST}")
    print(f"  Port: {API_PORT}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    # Test configuration loading
    print_config_summary()
