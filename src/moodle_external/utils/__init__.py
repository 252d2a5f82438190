"""
Utility module.

Logging helpers shared by the library and the command line.
"""

from .logging import setup_logging, get_logger

__all__ = ["setup_logging", "get_logger"]
