"""Description data models for external function parameters and return values."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from ..config.models import parse_flag
from ..params import ParamType


class Requirement(str, Enum):
    """Whether a key must be present in a structure."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    DEFAULT = "default"


VALUE_REQUIRED = Requirement.REQUIRED
VALUE_OPTIONAL = Requirement.OPTIONAL
VALUE_DEFAULT = Requirement.DEFAULT

NULL_ALLOWED = True
NULL_NOT_ALLOWED = False


class ExternalDescription:
    """Common ancestor of the three description kinds.

    Every description carries ``desc``, ``required`` and ``default``;
    ``default`` is only used when ``required`` is ``Requirement.DEFAULT``.
    """

    desc: str
    required: Requirement
    default: Any

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Description":
        """Build a description from its dictionary form.

        A mapping with ``type`` is a value, with ``keys`` a single structure
        and with ``content`` a multiple structure.

        Raises:
            ValueError: If the mapping matches none of the three shapes
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Description must be a mapping, got {type(data).__name__}")
        if "type" in data:
            return ExternalValue.from_dict(data)
        if "keys" in data:
            return SingleStructure.from_dict(data)
        if "content" in data:
            return MultipleStructure.from_dict(data)
        raise ValueError(
            f"Cannot tell description kind from keys: {', '.join(sorted(data)) or '(none)'}"
        )

    def _common_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"desc": self.desc, "required": self.required.value}
        if self.required == Requirement.DEFAULT:
            data["default"] = self.default
        return data


@dataclass(frozen=True)
class ExternalValue(ExternalDescription):
    """Scalar value description."""

    type: ParamType
    desc: str = ""
    required: Requirement = Requirement.REQUIRED
    default: Any = None
    allownull: bool = NULL_ALLOWED

    def __post_init__(self):
        object.__setattr__(self, "type", ParamType(self.type))
        object.__setattr__(self, "required", Requirement(self.required))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExternalValue":
        return cls(
            type=ParamType(data["type"]),
            desc=data.get("desc", ""),
            required=Requirement(data.get("required", "required")),
            default=data.get("default"),
            allownull=parse_flag(data.get("allownull", NULL_ALLOWED)),
        )

    def to_dict(self) -> dict[str, Any]:
        data = {"type": self.type.value, **self._common_dict()}
        data["allownull"] = self.allownull
        return data


@dataclass(frozen=True)
class SingleStructure(ExternalDescription):
    """Associative structure description: a fixed set of named keys."""

    keys: Mapping[str, "Description"]
    desc: str = ""
    required: Requirement = Requirement.REQUIRED
    default: Any = None

    def __post_init__(self):
        for name, child in self.keys.items():
            if not isinstance(child, ExternalDescription):
                raise TypeError(f"Key '{name}' is not an external description")
        object.__setattr__(self, "keys", MappingProxyType(dict(self.keys)))
        object.__setattr__(self, "required", Requirement(self.required))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SingleStructure":
        keys = data.get("keys") or {}
        return cls(
            keys={name: ExternalDescription.from_dict(child) for name, child in keys.items()},
            desc=data.get("desc", ""),
            required=Requirement(data.get("required", "required")),
            default=data.get("default"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "keys": {name: child.to_dict() for name, child in self.keys.items()},
            **self._common_dict(),
        }


@dataclass(frozen=True)
class MultipleStructure(ExternalDescription):
    """Bulk list description: every item shares the ``content`` description."""

    content: "Description"
    desc: str = ""
    required: Requirement = Requirement.REQUIRED
    default: Any = None

    def __post_init__(self):
        if not isinstance(self.content, ExternalDescription):
            raise TypeError("Multiple structure content must be an external description")
        object.__setattr__(self, "required", Requirement(self.required))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MultipleStructure":
        return cls(
            content=ExternalDescription.from_dict(data["content"]),
            desc=data.get("desc", ""),
            required=Requirement(data.get("required", "required")),
            default=data.get("default"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content.to_dict(), **self._common_dict()}


@dataclass(frozen=True)
class FunctionParameters(SingleStructure):
    """Top level description of an external function's parameters."""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FunctionParameters":
        # Parameter files list the keys directly, without a ``keys`` wrapper.
        return cls(
            keys={name: ExternalDescription.from_dict(child) for name, child in (data or {}).items()},
        )


Description = Union[ExternalValue, SingleStructure, MultipleStructure]


def warnings_description() -> MultipleStructure:
    """The shared list-of-warnings description returned by many functions."""
    return MultipleStructure(
        SingleStructure(
            {
                "item": ExternalValue(ParamType.TEXT, "item", VALUE_OPTIONAL),
                "itemid": ExternalValue(ParamType.INT, "item id", VALUE_OPTIONAL),
                "warningcode": ExternalValue(
                    ParamType.ALPHANUM,
                    "the warning code can be used by the client app to implement specific behaviour",
                ),
                "message": ExternalValue(
                    ParamType.TEXT, "untranslated english message to explain the warning"
                ),
            },
            "warning",
        ),
        "list of warnings",
        VALUE_OPTIONAL,
    )


@dataclass(frozen=True)
class FunctionDescription:
    """Parameters and return value descriptions of one external function.

    ``returns`` of None means the function is void or its result is ignored.
    """

    name: str
    parameters: FunctionParameters
    returns: Description | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "FunctionDescription":
        returns = data.get("returns")
        return cls(
            name=name,
            parameters=FunctionParameters.from_dict(data.get("parameters") or {}),
            returns=ExternalDescription.from_dict(returns) if returns is not None else None,
            description=data.get("description"),
        )
