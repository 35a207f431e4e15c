"""
Run configuration for the minipas toolchain.

Classes:
    CompilerConfig: Input/output locations and analysis limits.

A configuration starts from built-in defaults and can be overlaid with a JSON
object whose keys are field names:

    {
        "output_dir": "build",
        "max_identifier_length": 16
    }

Raises:
    ConfigError: If the file cannot be read, is not a JSON object, names an
        unknown field, gives a value of the wrong type or a nesting limit above
        the supported ceiling.
"""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from minipas.minipas_constants import (
    MAX_IDENTIFIER_LENGTH,
    MAX_NESTING_DEPTH,
    MAX_NESTING_DEPTH_CEILING,
)
from minipas.minipas_errors import ConfigError


@dataclass(frozen=True)
class CompilerConfig:
    source_path: str = "input/source.pas"
    output_dir: str = "output"
    token_file: str = "source.dyd"
    cleaned_token_file: str = "source.dys"
    variable_file: str = "source.var"
    procedure_file: str = "source.pro"
    error_file: str = "source.err"
    max_identifier_length: int = MAX_IDENTIFIER_LENGTH
    max_nesting_depth: int = MAX_NESTING_DEPTH

    def output_path(self, name: str) -> Path:
        return Path(self.output_dir) / name

    def updated(self, **overrides: Any) -> "CompilerConfig":
        """Returns a copy with the non-None `overrides` applied and validated."""
        return self.configure({k: v for k, v in overrides.items() if v is not None})

    def configure(self, cfg: dict[str, Any]) -> "CompilerConfig":
        """Returns a copy of this configuration with the entries of `cfg` applied.

        Raises:
            ConfigError: On unknown keys or wrongly typed values.
        """
        if not isinstance(cfg, dict):
            raise ConfigError("Configuration must be a JSON object")

        types = {f.name: type(getattr(self, f.name)) for f in fields(self)}
        problems = []
        for key, value in cfg.items():
            if key not in types:
                problems.append(f"unknown setting {key!r}")
            elif type(value) is not types[key]:
                problems.append(
                    f"{key!r} must be {types[key].__name__}, got {type(value).__name__}"
                )
            elif isinstance(value, int) and value < 1:
                problems.append(f"{key!r} must be positive")
            elif key == "max_nesting_depth" and value > MAX_NESTING_DEPTH_CEILING:
                problems.append(f"{key!r} must be at most {MAX_NESTING_DEPTH_CEILING}")
        if problems:
            raise ConfigError("Invalid configuration: " + "; ".join(problems))
        return replace(self, **cfg)

    @classmethod
    def load_from_json(cls, path: str) -> "CompilerConfig":
        """Builds a configuration from the defaults and the JSON file at `path`.

        Raises:
            ConfigError: If the file cannot be loaded or the configuration is invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw_cfg = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load config file: {e}") from e
        return cls().configure(raw_cfg)


__all__ = ["CompilerConfig"]
