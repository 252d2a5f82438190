"""Loader for external function descriptions declared in YAML files."""

from pathlib import Path
from typing import Any

import yaml

from ..utils.logging import get_logger
from .models import FunctionDescription

logger = get_logger(__name__)


class SchemaLoader:
    """Loads function descriptions from YAML descriptor files.

    A descriptor file has a top level ``functions`` mapping from function
    name to ``description``, ``parameters`` and ``returns``.
    """

    def __init__(self, schema_dir: Path | None = None):
        """Initialize the schema loader.

        Args:
            schema_dir: Directory relative descriptor paths are resolved against
        """
        self.schema_dir = schema_dir or Path.cwd()
        self._cache: dict[str, dict[str, FunctionDescription]] = {}

    def load(self, schema_file: str | Path, use_cache: bool = True) -> dict[str, FunctionDescription]:
        """Load every function description in a descriptor file.

        Args:
            schema_file: Path to the YAML descriptor file
            use_cache: Whether to reuse previously parsed files

        Returns:
            Dict mapping function names to FunctionDescription objects

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If a description in the file is malformed
        """
        path = self._resolve_path(schema_file)
        cache_key = str(path)

        if use_cache and cache_key in self._cache:
            return self._cache[cache_key]

        functions = self._parse(path, self._load_yaml(path))
        logger.debug(f"Loaded {len(functions)} function description(s) from {path}")

        if use_cache:
            self._cache[cache_key] = functions

        return functions

    def load_function(self, schema_file: str | Path, name: str) -> FunctionDescription:
        """Load a single function description by name.

        Raises:
            KeyError: If the file does not describe that function
        """
        functions = self.load(schema_file)
        if name not in functions:
            raise KeyError(f"Function '{name}' not described in {schema_file}")
        return functions[name]

    def clear_cache(self) -> None:
        """Clear the descriptor cache."""
        self._cache.clear()

    def _parse(self, path: Path, data: dict[str, Any]) -> dict[str, FunctionDescription]:
        functions = data.get("functions")
        if not isinstance(functions, dict):
            raise ValueError(f"Descriptor file has no 'functions' mapping: {path}")

        result = {}
        for name, entry in functions.items():
            try:
                result[name] = FunctionDescription.from_dict(name, entry or {})
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid description for function '{name}' in {path}: {e}") from e
        return result

    def _resolve_path(self, file_path: str | Path) -> Path:
        """Resolve a descriptor file path."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.schema_dir / path
        return path

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load and parse a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Descriptor file not found: {path}")

        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
