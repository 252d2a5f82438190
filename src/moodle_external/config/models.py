"""Configuration data models."""

from dataclasses import dataclass
from typing import Any

DEFAULT_MAX_DEPTH = 64

TRUE_WORDS = frozenset({"1", "true", "yes", "on"})


def parse_flag(value: Any) -> bool:
    """Read a boolean from YAML or the environment, where "false" is a string."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_WORDS
    return bool(value)


@dataclass(frozen=True)
class ValidatorSettings:
    """Settings for walking descriptions against values.

    ``max_depth`` bounds how deeply nested a description may be walked.
    ``index_list_paths`` adds list indices to error paths, which the
    default behaviour leaves out.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    index_list_paths: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidatorSettings":
        return cls(
            max_depth=int(data.get("max_depth", DEFAULT_MAX_DEPTH)),
            index_list_paths=parse_flag(data.get("index_list_paths", False)),
        )


@dataclass
class ClientSettings:
    """Moodle web service connection settings."""

    url: str
    token: str | None = None
    timeout: float = 30.0
    verify_ssl: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientSettings":
        return cls(
            url=data["url"],
            token=data.get("token"),
            timeout=data.get("timeout", 30.0),
            verify_ssl=parse_flag(data.get("verify_ssl", True)),
        )
