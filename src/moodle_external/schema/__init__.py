"""
Schema module.

Description trees for external function parameters and return values,
and loading them from YAML descriptor files.
"""

from .loader import SchemaLoader
from .models import (
    NULL_ALLOWED,
    NULL_NOT_ALLOWED,
    VALUE_DEFAULT,
    VALUE_OPTIONAL,
    VALUE_REQUIRED,
    Description,
    ExternalDescription,
    ExternalValue,
    FunctionDescription,
    FunctionParameters,
    MultipleStructure,
    Requirement,
    SingleStructure,
    warnings_description,
)

__all__ = [
    "SchemaLoader",
    "NULL_ALLOWED",
    "NULL_NOT_ALLOWED",
    "VALUE_DEFAULT",
    "VALUE_OPTIONAL",
    "VALUE_REQUIRED",
    "Description",
    "ExternalDescription",
    "ExternalValue",
    "FunctionDescription",
    "FunctionParameters",
    "MultipleStructure",
    "Requirement",
    "SingleStructure",
    "warnings_description",
]
