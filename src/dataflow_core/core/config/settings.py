# src/dataflow_core/core/config/settings.py
"""
Configuração tipada de runtime.

`RuntimeSettings` é a visão tipada (e validada) da configuração efetiva.
Chaves desconhecidas são preservadas em `raw`, mas ignoradas pelo runtime.

Knobs:
    - executor.isolated               → escopo isolado por run de job
    - scheduler.validate_requirements → valida requisitos antes de planejar
    - engine.checkpoint_dir           → diretório base de checkpoints
    - history.path                    → arquivo JSON do histórico de runs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError
from .hashing import compute_config_hash
from .loader import load_config


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = config.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Configuration section '{name}' must be a mapping")
    return value


def _flag(section: Dict[str, Any], key: str, default: bool, where: str) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"Configuration key '{where}.{key}' must be a boolean")
    return value


def _path(section: Dict[str, Any], key: str) -> Optional[Path]:
    value = section.get(key)
    return Path(value) if value else None


@dataclass(frozen=True)
class RuntimeSettings:
    isolated: bool = True
    validate_requirements: bool = True
    checkpoint_dir: Optional[Path] = None
    history_path: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RuntimeSettings":
        executor = _section(config, "executor")
        scheduler = _section(config, "scheduler")
        engine = _section(config, "engine")
        history = _section(config, "history")
        return cls(
            isolated=_flag(executor, "isolated", True, "executor"),
            validate_requirements=_flag(scheduler, "validate_requirements", True, "scheduler"),
            checkpoint_dir=_path(engine, "checkpoint_dir"),
            history_path=_path(history, "path"),
            raw=dict(config),
        )

    @classmethod
    def load(cls, local_path: Optional[Any] = None, *, defaults_path: Optional[Any] = None) -> "RuntimeSettings":
        return cls.from_config(load_config(defaults_path=defaults_path, local_path=local_path))

    @property
    def config_hash(self) -> str:
        return compute_config_hash(self.raw)
