"""
Configuration module for diary runs.

Provides:
- YAML config loading with validation
- Credentials from the environment / .env
- Environment variable substitution
"""

from .loader import ConfigLoader, Settings, load_settings

__all__ = ["ConfigLoader", "Settings", "load_settings"]
