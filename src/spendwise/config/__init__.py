"""Configuration module."""
from .settings import AppSettings, get_settings, get_api_key

__all__ = ["AppSettings", "get_settings", "get_api_key"]
