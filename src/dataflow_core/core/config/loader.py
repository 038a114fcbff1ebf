# src/dataflow_core/core/config/loader.py
"""
Loader da configuração de runtime.

A configuração efetiva é resolvida a partir de:
    - um arquivo de defaults (obrigatório; por padrão o `defaults.yaml`
      embarcado no pacote)
    - um arquivo local de overrides (opcional; ignorado se não existir)

Formatos suportados: YAML (.yaml, .yml) via PyYAML e JSON (.json).

Invariantes:
    - O arquivo de defaults é obrigatório
    - O resultado é sempre um dicionário puro
    - Overrides nunca mutam os defaults

Limites explícitos:
    - Não valida semântica dos knobs (ver `RuntimeSettings`)
    - Não persiste configuração nem hash
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


DEFAULTS_PATH = Path(__file__).with_name("defaults.yaml")


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo YAML/JSON e valida que a raiz é um dicionário.

    Arquivos vazios são interpretados como dicionários vazios.

    Raises:
        DefaultsNotFoundError: se o arquivo não existir.
        UnsupportedConfigFormatError: se a extensão não for suportada.
        InvalidConfigRootTypeError: se a raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Unsupported configuration format: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Configuration root must be a mapping, got {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: Optional[Union[str, Path]] = None,
    local_path: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva de runtime.

    Args:
        defaults_path: arquivo de defaults; None usa o `defaults.yaml` do pacote.
        local_path: arquivo opcional de overrides, aplicado via `deep_merge`.

    Raises:
        DefaultsNotFoundError, UnsupportedConfigFormatError,
        InvalidConfigRootTypeError, ConfigTypeConflictError.
    """
    defaults = _load_file(Path(defaults_path) if defaults_path is not None else DEFAULTS_PATH)

    if local_path is None:
        return defaults

    local_file = Path(local_path)
    if not local_file.exists():
        return defaults

    return deep_merge(defaults, _load_file(local_file))
