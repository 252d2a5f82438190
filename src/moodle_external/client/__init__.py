"""
Web service client module.

Calls Moodle REST web service functions with parameter validation and
response cleaning.
"""

from .api import (
    MoodleAPIError,
    MoodleAuthError,
    MoodleNotFoundError,
    MoodleValidationError,
    WebServiceClient,
    flatten_params,
)

__all__ = [
    "MoodleAPIError",
    "MoodleAuthError",
    "MoodleNotFoundError",
    "MoodleValidationError",
    "WebServiceClient",
    "flatten_params",
]
