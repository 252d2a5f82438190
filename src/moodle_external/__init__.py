"""
Moodle External

Descriptions for external (web service) function parameters and return
values, with recursive validation of inbound parameters and cleaning of
outbound responses.
"""

from .errors import (
    CodingError,
    ErrorReason,
    ExternalValidationError,
    FunctionNotFoundError,
    InvalidParameterError,
    InvalidResponseError,
)
from .params import ParamType
from .schema import (
    ExternalValue,
    FunctionParameters,
    MultipleStructure,
    Requirement,
    SingleStructure,
)
from .validation import clean_returnvalue, validate_parameters

__version__ = "0.1.0"

__all__ = [
    "CodingError",
    "ErrorReason",
    "ExternalValidationError",
    "FunctionNotFoundError",
    "InvalidParameterError",
    "InvalidResponseError",
    "ParamType",
    "ExternalValue",
    "FunctionParameters",
    "MultipleStructure",
    "Requirement",
    "SingleStructure",
    "clean_returnvalue",
    "validate_parameters",
]
