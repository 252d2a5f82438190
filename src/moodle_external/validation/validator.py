"""Recursive validation of values against external descriptions.

``validate_parameters`` checks what a caller sent to an external function,
``clean_returnvalue`` checks what the function produced. Both walk the same
three description kinds and differ only in the error class they raise, in
when defaults are filled in, and in what happens to undeclared keys.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..config.models import ValidatorSettings
from ..errors import (
    ErrorReason,
    ExternalValidationError,
    InvalidParameterError,
    InvalidResponseError,
)
from ..params import ParamType, render_value, validate_param
from ..schema.models import (
    ExternalDescription,
    ExternalValue,
    MultipleStructure,
    Requirement,
    SingleStructure,
)
from ..utils.logging import get_logger

logger = get_logger(__name__)

_DEFAULT_SETTINGS = ValidatorSettings()
_BOOL_LITERALS = ("0", "1")


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple, set, frozenset))


def _is_bool_literal(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if type(value) is int:
        return value in (0, 1)
    return isinstance(value, str) and value in _BOOL_LITERALS


def _shown(value: Any) -> str:
    try:
        return repr(value)
    except ValueError:
        return render_value(value)


class _DescriptionWalker(ABC):
    """Walks a description tree and a value tree side by side."""

    error_class: type[ExternalValidationError] = ExternalValidationError
    debug_prefix = "Invalid external api value"
    missing_message = "Missing required key in single structure: {key}"

    def __init__(self, settings: ValidatorSettings):
        self.settings = settings

    def walk(self, description: ExternalDescription, value: Any, depth: int = 0) -> Any:
        if depth > self.settings.max_depth:
            raise self.error_class(
                f"Maximum nesting depth of {self.settings.max_depth} exceeded",
                reason=ErrorReason.DEPTH_EXCEEDED,
            )

        if isinstance(description, ExternalValue):
            return self._walk_value(description, value)
        if isinstance(description, SingleStructure):
            return self._walk_single(description, value, depth)
        if isinstance(description, MultipleStructure):
            return self._walk_multiple(description, value, depth)

        raise self.error_class(
            f"Invalid external api description: {type(description).__name__}",
            reason=ErrorReason.INVALID_DESCRIPTION,
        )

    def _walk_value(self, description: ExternalValue, value: Any) -> Any:
        if _is_container(value):
            raise self.error_class(
                "Scalar type expected, array or object received.",
                reason=ErrorReason.TYPE_MISMATCH,
            )

        debuginfo = (
            f'{self.debug_prefix}: the value is "{render_value(value)}", '
            f'the server was expecting "{description.type}" type'
        )

        # Transports encode booleans as 0/1; nothing else is a boolean.
        if description.type == ParamType.BOOL and value is not None:
            if _is_bool_literal(value):
                return bool(int(value))
            raise self._invalid_value(debuginfo)

        return self._validate_scalar(description, value, debuginfo)

    def _walk_single(self, description: SingleStructure, value: Any, depth: int) -> dict[str, Any]:
        if not isinstance(value, Mapping):
            raise self.error_class(
                f"Only arrays accepted. The bad value is: '{_shown(value)}'",
                reason=ErrorReason.TYPE_MISMATCH,
            )

        remaining = dict(value)
        result: dict[str, Any] = {}

        for key, child in description.keys.items():
            if key not in remaining:
                if child.required == Requirement.REQUIRED:
                    raise self.error_class(
                        self.missing_message.format(key=key),
                        reason=ErrorReason.MISSING_FIELD,
                        path=(key,),
                        fields=(key,),
                    )
                if self._fills_default(child):
                    try:
                        result[key] = self.walk(child, child.default, depth + 1)
                    except self.error_class as e:
                        e.prepend(key)
                        raise
                continue

            try:
                result[key] = self.walk(child, remaining.pop(key), depth + 1)
            except self.error_class as e:
                e.prepend(key)
                raise

        if remaining:
            self._leftover_keys([str(key) for key in remaining])

        return result

    def _walk_multiple(self, description: MultipleStructure, value: Any, depth: int) -> list[Any]:
        if not isinstance(value, (list, tuple)):
            raise self.error_class(
                f"Only arrays accepted. The bad value is: '{_shown(value)}'",
                reason=ErrorReason.TYPE_MISMATCH,
            )

        result = []
        for index, item in enumerate(value):
            try:
                result.append(self.walk(description.content, item, depth + 1))
            except self.error_class as e:
                if self.settings.index_list_paths:
                    e.prepend(index)
                raise
        return result

    def _fills_default(self, child: ExternalDescription) -> bool:
        return child.required == Requirement.DEFAULT

    def _validate_scalar(self, description: ExternalValue, value: Any, debuginfo: str) -> Any:
        return validate_param(value, description.type, description.allownull, debuginfo)

    @abstractmethod
    def _invalid_value(self, debuginfo: str) -> ExternalValidationError:
        """Build the error for a scalar that fails its type."""

    @abstractmethod
    def _leftover_keys(self, keys: list[str]) -> None:
        """Handle keys present in a value but not in its structure."""


class _ParameterValidator(_DescriptionWalker):
    error_class = InvalidParameterError
    debug_prefix = "Invalid external api parameter"

    def _invalid_value(self, debuginfo: str) -> ExternalValidationError:
        return InvalidParameterError(
            "Invalid parameter value detected",
            reason=ErrorReason.INVALID_VALUE,
            debuginfo=debuginfo,
        )

    def _leftover_keys(self, keys: list[str]) -> None:
        raise InvalidParameterError(
            f"Unexpected keys ({', '.join(keys)}) detected in parameter array.",
            reason=ErrorReason.UNEXPECTED_FIELDS,
            fields=tuple(keys),
        )


class _ResponseCleaner(_DescriptionWalker):
    error_class = InvalidResponseError
    debug_prefix = "Invalid external api response"
    missing_message = "Error in response - Missing following required key in a single structure: {key}"

    def _fills_default(self, child: ExternalDescription) -> bool:
        # Only scalar defaults are synthesized in responses; missing
        # optional structures and lists stay absent.
        return isinstance(child, ExternalValue) and child.required == Requirement.DEFAULT

    def _invalid_value(self, debuginfo: str) -> ExternalValidationError:
        return InvalidResponseError(debuginfo, reason=ErrorReason.INVALID_VALUE, debuginfo=debuginfo)

    def _leftover_keys(self, keys: list[str]) -> None:
        logger.debug(f"Dropping undeclared response keys: {', '.join(keys)}")

    def _validate_scalar(self, description: ExternalValue, value: Any, debuginfo: str) -> Any:
        try:
            return super()._validate_scalar(description, value, debuginfo)
        except InvalidParameterError as e:
            message = e.debuginfo or e.message
            raise InvalidResponseError(message, reason=e.reason, debuginfo=message) from e


def validate_parameters(
    description: ExternalDescription,
    params: Any,
    settings: ValidatorSettings | None = None,
) -> Any:
    """Validate submitted function parameters against their description.

    This is a simple recursive walk intended to be called at the start of
    every external function implementation.

    Args:
        description: Description of the parameters
        params: The actual parameters
        settings: Optional depth limit and list path settings

    Returns:
        The parameters with defaults added for missing DEFAULT keys

    Raises:
        InvalidParameterError: If anything does not match the description
    """
    walker = _ParameterValidator(settings or _DEFAULT_SETTINGS)
    try:
        return walker.walk(description, params)
    except InvalidParameterError as e:
        logger.debug(f"Invalid parameters at '{e.dotted_path}': {e.message}")
        raise


def clean_returnvalue(
    description: ExternalDescription,
    response: Any,
    settings: ValidatorSettings | None = None,
) -> Any:
    """Clean a function's return value against its description.

    Keys the description does not know are dropped. Missing keys only get a
    default when they describe a scalar with a DEFAULT requirement.

    Args:
        description: Description of the return value
        response: The actual return value
        settings: Optional depth limit and list path settings

    Returns:
        The cleaned return value

    Raises:
        InvalidResponseError: If anything does not match the description
    """
    walker = _ResponseCleaner(settings or _DEFAULT_SETTINGS)
    try:
        return walker.walk(description, response)
    except InvalidResponseError as e:
        logger.debug(f"Invalid response at '{e.dotted_path}': {e.message}")
        raise
