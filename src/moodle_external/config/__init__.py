"""
Configuration module.

Handles loading of validator settings and web service connection settings.
"""

from .loader import ConfigLoader
from .models import ClientSettings, ValidatorSettings, parse_flag

__all__ = ["ConfigLoader", "ClientSettings", "ValidatorSettings", "parse_flag"]
