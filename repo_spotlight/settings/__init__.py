"""Application settings loading."""

from .app import AUTHENTICATED_USER_LABEL, CONFIG_KEYS, AppSettings, get_settings


__all__ = ["AUTHENTICATED_USER_LABEL", "CONFIG_KEYS", "AppSettings", "get_settings"]
