"""Registry of external functions and their descriptions."""

from dataclasses import dataclass
from typing import Any, Callable

from ..config.models import ValidatorSettings
from ..errors import CodingError, FunctionNotFoundError
from ..schema.models import (
    ExternalDescription,
    FunctionDescription,
    FunctionParameters,
)
from ..utils.logging import get_logger
from ..validation.validator import clean_returnvalue, validate_parameters

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExternalFunction:
    """An external function: its implementation plus its descriptions."""

    name: str
    implementation: Callable[..., Any]
    parameters: FunctionParameters
    returns: ExternalDescription | None = None
    description: str | None = None
    component: str | None = None

    @property
    def signature(self) -> FunctionDescription:
        return FunctionDescription(
            name=self.name,
            parameters=self.parameters,
            returns=self.returns,
            description=self.description,
        )


def check_descriptions(name: str, parameters: Any, returns: Any) -> None:
    """Make sure a function's descriptions have the right kinds.

    Raises:
        CodingError: If parameters is not a FunctionParameters, or returns
            is neither None nor an ExternalDescription
    """
    if not isinstance(parameters, FunctionParameters):
        raise CodingError(f"Invalid parameters description for {name}")
    # None means void result or result is ignored.
    if returns is not None and not isinstance(returns, ExternalDescription):
        raise CodingError(f"Invalid return description for {name}")


class FunctionRegistry:
    """Holds external functions by name and runs them with validation.

    Usage:
        registry = FunctionRegistry()
        registry.register("core_course_get_courses", get_courses,
                          get_courses_parameters(), get_courses_returns())
        courses = registry.call("core_course_get_courses", {"options": {}})
    """

    def __init__(self, settings: ValidatorSettings | None = None):
        self.settings = settings or ValidatorSettings()
        self._functions: dict[str, ExternalFunction] = {}

    def register(
        self,
        name: str,
        implementation: Callable[..., Any],
        parameters: FunctionParameters,
        returns: ExternalDescription | None = None,
        description: str | None = None,
        component: str | None = None,
    ) -> ExternalFunction:
        """Register an external function.

        Args:
            name: Unique function name (e.g. "core_course_get_courses")
            implementation: Callable receiving the validated parameters as
                keyword arguments
            parameters: Description of the parameters
            returns: Description of the return value, None for void
            description: Human readable description
            component: Owning component, if any

        Returns:
            The registered ExternalFunction

        Raises:
            CodingError: If the implementation is not callable, the
                descriptions have the wrong kinds, or the name is taken
        """
        if not callable(implementation):
            raise CodingError(f"Missing implementation method of {name}")
        check_descriptions(name, parameters, returns)
        if name in self._functions:
            raise CodingError(f"External function {name} is already registered")

        function = ExternalFunction(
            name=name,
            implementation=implementation,
            parameters=parameters,
            returns=returns,
            description=description,
            component=component,
        )
        self._functions[name] = function
        logger.debug(f"Registered external function {name}")
        return function

    def register_class(
        self,
        name: str,
        cls: type,
        methodname: str,
        description: str | None = None,
        component: str | None = None,
    ) -> ExternalFunction:
        """Register a function implemented as ``cls.methodname``.

        The class must also provide ``<methodname>_parameters()`` and
        ``<methodname>_returns()`` returning the descriptions.

        Raises:
            CodingError: If any of the three methods is missing or returns
                the wrong kind of description
        """
        implementation = getattr(cls, methodname, None)
        if implementation is None:
            raise CodingError(f"Missing implementation method of {cls.__name__}.{methodname}")

        parameters_method = getattr(cls, f"{methodname}_parameters", None)
        if parameters_method is None:
            raise CodingError("Missing parameters description")
        returns_method = getattr(cls, f"{methodname}_returns", None)
        if returns_method is None:
            raise CodingError("Missing returned values description")

        return self.register(
            name,
            implementation,
            parameters_method(),
            returns_method(),
            description=description or (cls.__doc__ or "").strip() or None,
            component=component,
        )

    def bind(self, signature: FunctionDescription, implementation: Callable[..., Any]) -> ExternalFunction:
        """Register an implementation for a loaded FunctionDescription."""
        return self.register(
            signature.name,
            implementation,
            signature.parameters,
            signature.returns,
            description=signature.description,
        )

    def get(self, name: str) -> ExternalFunction:
        """Look up a registered function.

        Raises:
            FunctionNotFoundError: If nothing is registered under that name
        """
        try:
            return self._functions[name]
        except KeyError:
            raise FunctionNotFoundError(f"External function not found: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def names(self) -> list[str]:
        return sorted(self._functions)

    def call(self, name: str, params: Any) -> Any:
        """Validate parameters, run the function and clean its result.

        Args:
            name: Registered function name
            params: Raw parameters, a mapping keyed by parameter name

        Returns:
            The cleaned return value, or None for functions without a
            returns description

        Raises:
            FunctionNotFoundError: If the function is unknown
            InvalidParameterError: If the parameters are invalid
            InvalidResponseError: If the function returned an invalid value
        """
        function = self.get(name)
        validated = validate_parameters(function.parameters, params, self.settings)

        logger.debug(f"Calling external function {name}")
        result = function.implementation(**validated)

        if function.returns is None:
            return None
        return clean_returnvalue(function.returns, result, self.settings)
