"""Interpreter configuration and its YAML/JSON file format."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class InterpreterConfig:
    """Knobs for parsing and evaluation.

    strict: refuse to evaluate a source that has parse errors.
    max_errors: stop parsing after this many errors (None: report all).
    max_call_depth: limit on nested function calls (None: host limit only).
    """
    strict: bool = True
    max_errors: Optional[int] = None
    max_call_depth: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise ConfigError(f"strict must be a boolean, got {self.strict!r}")
        for name in ("max_errors", "max_call_depth"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "InterpreterConfig":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"configuration must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(map(str, set(data) - known))
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Path | str) -> InterpreterConfig:
    """Read a configuration file. `.json` files are JSON, anything else YAML."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"config not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as fp:
        try:
            if config_path.suffix == ".json":
                text = fp.read()
                data = json.loads(text) if text.strip() else None
            else:
                data = yaml.safe_load(fp)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"cannot parse {config_path}: {exc}") from exc
    config = InterpreterConfig.from_dict(data)
    logger.info("loaded interpreter config from %s: %s", config_path, config.to_dict())
    return config


def save_config(config: InterpreterConfig, path: Path | str) -> None:
    """Write a configuration file in YAML (or JSON for a `.json` path)."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as fp:
        if config_path.suffix == ".json":
            json.dump(config.to_dict(), fp, indent=2)
        else:
            yaml.safe_dump(config.to_dict(), fp, sort_keys=False)
