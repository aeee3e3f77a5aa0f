from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from core.errors import ConfigError
from gen.shallowcopy.writer import DEFAULT_FILE_NAME


@dataclass
class GeneratorConfig:
    # ===== GENERATION =====
    marker_name: str = "shallowcopy:generate"      # type marker that opts a type in
    method_name: str = "ShallowCopy"
    receiver_name: str = "o"
    output_file_name: str = DEFAULT_FILE_NAME

    # ===== OUTPUT =====
    output_directory: Optional[str] = None          # None: next to each package
    to_stdout: bool = False
    header_file: Optional[str] = None               # boilerplate prepended to every file
    year: Optional[str] = None                      # replaces YEAR in the boilerplate

    # ===== RUNTIME =====
    jobs: int = 1                                   # packages generated in parallel
    log_level: str = "INFO"

    def validate(self) -> "GeneratorConfig":
        for key in ("method_name", "receiver_name"):
            value = getattr(self, key)
            if not value.isidentifier():
                raise ConfigError(f"{key} must be a Go identifier, got {value!r}")
        if not self.method_name[0].isupper():
            raise ConfigError(f"method_name must be exported, got {self.method_name!r}")
        if not self.marker_name:
            raise ConfigError("marker_name must not be empty")
        if not self.output_file_name.endswith(".go"):
            raise ConfigError(f"output_file_name must end in .go, got {self.output_file_name!r}")
        if self.jobs < 1:
            raise ConfigError(f"jobs must be at least 1, got {self.jobs}")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ConfigError(f"unknown log_level {self.log_level!r}")
        if self.year is not None:
            self.year = str(self.year)
        return self

    def with_overrides(self, **overrides: Any) -> "GeneratorConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes).validate()

    def read_header(self) -> Optional[str]:
        if not self.header_file:
            return None
        try:
            with open(self.header_file, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise ConfigError(f"cannot read header file {self.header_file}: {e}") from e


DEFAULT_CONFIG = GeneratorConfig()


def _load_mapping(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        if path.lower().endswith((".yml", ".yaml")):
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"invalid YAML in {path}: {e}") from e
        else:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigError(f"invalid JSON in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    return data


def load_config(path: str, base: Optional[GeneratorConfig] = None) -> GeneratorConfig:
    """Load a YAML or JSON config file on top of ``base``.

    Keys use the dataclass field names; dashes are accepted in place of
    underscores.  Unknown keys are an error.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"config file not found: {path}")
    raw = _load_mapping(path)
    known = {f.name for f in dataclasses.fields(GeneratorConfig)}
    values: Dict[str, Any] = {}
    for key, value in raw.items():
        name = str(key).replace("-", "_")
        if name not in known:
            raise ConfigError(f"unknown config key {key!r} in {path}")
        values[name] = value
    try:
        return dataclasses.replace(base or DEFAULT_CONFIG, **values).validate()
    except (TypeError, AttributeError) as e:
        raise ConfigError(f"invalid value in {path}: {e}") from e


__all__ = [
    "GeneratorConfig",
    "DEFAULT_CONFIG",
    "load_config",
]
