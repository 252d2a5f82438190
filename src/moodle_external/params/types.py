"""Primitive parameter types and their cleaning rules.

Each ``ParamType`` names a cleaning function. ``clean_param`` always returns
something (possibly an emptied string or zero), while ``validate_param``
rejects any value that cleaning would have changed.
"""

import re
from enum import Enum
from typing import Any, Callable
from urllib.parse import urlsplit

from ..errors import ErrorReason, InvalidParameterError


class ParamType(str, Enum):
    """Scalar value kinds understood by external function descriptions."""

    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    ALPHA = "alpha"
    ALPHAEXT = "alphaext"
    ALPHANUM = "alphanum"
    ALPHANUMEXT = "alphanumext"
    SEQUENCE = "sequence"
    NOTAGS = "notags"
    TEXT = "text"
    RAW = "raw"
    PATH = "path"
    SAFEDIR = "safedir"
    SAFEPATH = "safepath"
    URL = "url"
    EMAIL = "email"
    PLUGIN = "plugin"
    COMPONENT = "component"

    def __str__(self) -> str:
        return self.value


_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_FLOAT_STRICT = re.compile(r"^[+-]?[0-9]*\.?[0-9]*(e[-+]?[0-9]+)?$", re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")
_MULTILANG_TAG = re.compile(
    r'^<(/?lang\b[^>]*|span\s+lang="[a-zA-Z0-9_-]+"\s+class="multilang"|/span)>$'
)
_EMAIL = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+$")
_PLUGIN = re.compile(r"^[a-z](?:[a-z0-9_](?!__))*[a-z0-9]+$")
_COMPONENT = re.compile(r"^[a-z][a-z0-9]*(_[a-z][a-z0-9_]*)?[a-z0-9]+$")
_URL_SCHEMES = {"http", "https", "ftp", "ftps"}


def as_text(value: Any) -> str:
    """Render a scalar the way the web service transport compares values."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def _clean_int(value: Any) -> int:
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        return int(value)
    match = _INT_PREFIX.match(as_text(value))
    return int(match.group(0)) if match else 0


def _clean_float(value: Any) -> float:
    if isinstance(value, (bool, int, float)):
        return float(value)
    match = _FLOAT_PREFIX.match(as_text(value))
    return float(match.group(0)) if match else 0.0


def _clean_bool(value: Any) -> int:
    text = as_text(value).strip().lower()
    if text in ("yes", "on", "true"):
        return 1
    if text in ("no", "off", "false", "", "0"):
        return 0
    return 1


def _strip(pattern: str) -> Callable[[Any], str]:
    compiled = re.compile(pattern)

    def cleaner(value: Any) -> str:
        return compiled.sub("", as_text(value))

    return cleaner


def _clean_notags(value: Any) -> str:
    return _TAG.sub("", as_text(value))


def _clean_text(value: Any) -> str:
    # Multilang spans survive so translated strings keep their markup.
    def keep_multilang(match: re.Match) -> str:
        tag = match.group(0)
        return tag if _MULTILANG_TAG.match(tag) else ""

    return _TAG.sub(keep_multilang, as_text(value))


def _clean_path(value: Any) -> str:
    path = as_text(value).replace("\\", "/")
    path = re.sub(r"[\x00-\x1f\x7f&<>\"`|':]", "", path)
    path = re.sub(r"\.\.+", "", path)
    path = re.sub(r"//+", "/", path)
    return re.sub(r"/(\./)+", "/", path)


def _clean_url(value: Any) -> str:
    text = as_text(value).strip()
    if not text:
        return ""
    parts = urlsplit(text)
    if parts.scheme.lower() in _URL_SCHEMES and parts.netloc and " " not in text:
        return text
    return ""


def _matching(pattern: re.Pattern) -> Callable[[Any], str]:
    def cleaner(value: Any) -> str:
        text = as_text(value)
        return text if pattern.match(text) else ""

    return cleaner


CLEANERS: dict[ParamType, Callable[[Any], Any]] = {
    ParamType.INT: _clean_int,
    ParamType.FLOAT: _clean_float,
    ParamType.BOOL: _clean_bool,
    ParamType.ALPHA: _strip(r"[^a-zA-Z]"),
    ParamType.ALPHAEXT: _strip(r"[^a-zA-Z_-]"),
    ParamType.ALPHANUM: _strip(r"[^a-zA-Z0-9]"),
    ParamType.ALPHANUMEXT: _strip(r"[^a-zA-Z0-9_-]"),
    ParamType.SEQUENCE: _strip(r"[^0-9,]"),
    ParamType.NOTAGS: _clean_notags,
    ParamType.TEXT: _clean_text,
    ParamType.RAW: lambda value: value,
    ParamType.PATH: _clean_path,
    ParamType.SAFEDIR: _strip(r"[^a-zA-Z0-9_-]"),
    ParamType.SAFEPATH: _strip(r"[^a-zA-Z0-9/_-]"),
    ParamType.URL: _clean_url,
    ParamType.EMAIL: _matching(_EMAIL),
    ParamType.PLUGIN: _matching(_PLUGIN),
    ParamType.COMPONENT: _matching(_COMPONENT),
}


def clean_param(value: Any, param_type: ParamType | str) -> Any:
    """Clean a scalar according to its parameter type.

    Args:
        value: Raw scalar value
        param_type: A ParamType or its string value (e.g. "int")

    Returns:
        The cleaned value

    Raises:
        ValueError: If the parameter type is unknown
    """
    return CLEANERS[ParamType(param_type)](value)


def validate_param(
    value: Any,
    param_type: ParamType | str,
    allownull: bool = True,
    debuginfo: str = "",
) -> Any:
    """Return the cleaned value, or raise if cleaning would change it.

    Args:
        value: Raw scalar value
        param_type: Expected parameter type
        allownull: Whether ``None`` is an acceptable value
        debuginfo: Detail attached to the raised error

    Returns:
        The cleaned value, or None when null is allowed and given

    Raises:
        InvalidParameterError: If the value is null and not allowed, or does
            not survive cleaning unchanged
    """
    param_type = ParamType(param_type)

    if value is None:
        if allownull:
            return None
        raise InvalidParameterError(
            "Invalid parameter value detected",
            reason=ErrorReason.INVALID_VALUE,
            debuginfo=f"{debuginfo} (null not allowed)".strip(),
        )

    # Non-finite floats and over-long digit strings cannot become ints.
    try:
        cleaned = clean_param(value, param_type)

        if param_type == ParamType.FLOAT:
            # Precision loss is not detected, only non-numeric input.
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                valid = True
            else:
                valid = bool(_FLOAT_STRICT.match(as_text(value))) and _is_numeric(value)
        else:
            valid = as_text(value) == as_text(cleaned)
    except (ValueError, OverflowError):
        valid = False

    if not valid:
        raise InvalidParameterError(
            "Invalid parameter value detected",
            reason=ErrorReason.INVALID_VALUE,
            debuginfo=debuginfo,
        )

    return cleaned


def render_value(value: Any) -> str:
    """Render a scalar for error messages, even when it cannot be compared."""
    try:
        return as_text(value)
    except ValueError:
        return f"<{type(value).__name__} too large to display>"


def _is_numeric(value: Any) -> bool:
    try:
        float(as_text(value))
    except ValueError:
        return False
    return True
