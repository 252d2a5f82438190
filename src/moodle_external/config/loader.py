"""Configuration loader for validator and client settings."""

import os
from pathlib import Path
from typing import Any

import yaml

from .models import ClientSettings, ValidatorSettings, parse_flag

ENV_MAX_DEPTH = "MOODLE_EXTERNAL_MAX_DEPTH"
ENV_INDEX_LIST_PATHS = "MOODLE_EXTERNAL_INDEX_LIST_PATHS"
ENV_URL = "MOODLE_URL"
ENV_TOKEN = "MOODLE_TOKEN"

class ConfigLoader:
    """Loads settings from YAML files, with environment overrides."""

    def __init__(self, config_dir: Path | None = None, environ: dict[str, str] | None = None):
        """Initialize the config loader.

        Args:
            config_dir: Directory relative config paths are resolved against.
                Defaults to the current directory
            environ: Environment mapping. Defaults to ``os.environ``
        """
        self.config_dir = config_dir or Path.cwd()
        self.environ = os.environ if environ is None else environ

    def load_validator(self, config_file: str | Path | None = None) -> ValidatorSettings:
        """Load validator settings from the ``validator`` section of a YAML file.

        Args:
            config_file: Path to the YAML file. When omitted only the
                environment is consulted

        Returns:
            Parsed ValidatorSettings
        """
        data: dict[str, Any] = {}
        if config_file is not None:
            data = dict(self._load_yaml(self._resolve_path(config_file)).get("validator") or {})

        if ENV_MAX_DEPTH in self.environ:
            data["max_depth"] = int(self.environ[ENV_MAX_DEPTH])
        if ENV_INDEX_LIST_PATHS in self.environ:
            data["index_list_paths"] = parse_flag(self.environ[ENV_INDEX_LIST_PATHS])

        return ValidatorSettings.from_dict(data)

    def load_client(self, config_file: str | Path | None = None) -> ClientSettings:
        """Load web service client settings from the ``moodle`` section of a YAML file.

        ``MOODLE_URL`` and ``MOODLE_TOKEN`` fill in values the file leaves out.

        Raises:
            ValueError: If no URL is configured anywhere
        """
        data: dict[str, Any] = {}
        if config_file is not None:
            data = dict(self._load_yaml(self._resolve_path(config_file)).get("moodle") or {})

        if not data.get("url") and self.environ.get(ENV_URL):
            data["url"] = self.environ[ENV_URL]
        if not data.get("token") and self.environ.get(ENV_TOKEN):
            data["token"] = self.environ[ENV_TOKEN]

        if not data.get("url"):
            raise ValueError(f"Moodle URL not configured (set 'moodle.url' or {ENV_URL})")

        return ClientSettings.from_dict(data)

    def _resolve_path(self, file_path: str | Path) -> Path:
        """Resolve a config file path."""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.config_dir / path
        return path

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load and parse a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
