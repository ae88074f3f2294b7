"""Configuration helpers for the registry API."""

from .settings import RegistryApiSettings, RegistrySettings, get_api_settings, get_settings

__all__ = ["RegistryApiSettings", "RegistrySettings", "get_api_settings", "get_settings"]
