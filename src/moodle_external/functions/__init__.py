"""
External functions module.

Registers external function implementations alongside their descriptions
and runs them with parameter validation and return value cleaning.
"""

from .registry import ExternalFunction, FunctionRegistry, check_descriptions

__all__ = ["ExternalFunction", "FunctionRegistry", "check_descriptions"]
