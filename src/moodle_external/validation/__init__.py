"""
Validation module.

Validates parameters sent to external functions and cleans the values
they return.
"""

from ..errors import ErrorReason, InvalidParameterError, InvalidResponseError
from .validator import clean_returnvalue, validate_parameters

__all__ = [
    "ErrorReason",
    "InvalidParameterError",
    "InvalidResponseError",
    "clean_returnvalue",
    "validate_parameters",
]
