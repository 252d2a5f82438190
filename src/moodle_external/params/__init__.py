"""
Parameter types module.

Scalar parameter kinds and the cleaning rules behind them.
"""

from .types import ParamType, as_text, clean_param, render_value, validate_param

PARAM_INT = ParamType.INT
PARAM_FLOAT = ParamType.FLOAT
PARAM_BOOL = ParamType.BOOL
PARAM_ALPHA = ParamType.ALPHA
PARAM_ALPHAEXT = ParamType.ALPHAEXT
PARAM_ALPHANUM = ParamType.ALPHANUM
PARAM_ALPHANUMEXT = ParamType.ALPHANUMEXT
PARAM_SEQUENCE = ParamType.SEQUENCE
PARAM_NOTAGS = ParamType.NOTAGS
PARAM_TEXT = ParamType.TEXT
PARAM_RAW = ParamType.RAW
PARAM_PATH = ParamType.PATH
PARAM_SAFEDIR = ParamType.SAFEDIR
PARAM_SAFEPATH = ParamType.SAFEPATH
PARAM_URL = ParamType.URL
PARAM_EMAIL = ParamType.EMAIL
PARAM_PLUGIN = ParamType.PLUGIN
PARAM_COMPONENT = ParamType.COMPONENT

__all__ = [
    "ParamType",
    "as_text",
    "clean_param",
    "render_value",
    "validate_param",
    "PARAM_INT",
    "PARAM_FLOAT",
    "PARAM_BOOL",
    "PARAM_ALPHA",
    "PARAM_ALPHAEXT",
    "PARAM_ALPHANUM",
    "PARAM_ALPHANUMEXT",
    "PARAM_SEQUENCE",
    "PARAM_NOTAGS",
    "PARAM_TEXT",
    "PARAM_RAW",
    "PARAM_PATH",
    "PARAM_SAFEDIR",
    "PARAM_SAFEPATH",
    "PARAM_URL",
    "PARAM_EMAIL",
    "PARAM_PLUGIN",
    "PARAM_COMPONENT",
]
