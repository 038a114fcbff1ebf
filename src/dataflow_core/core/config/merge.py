# src/dataflow_core/core/config/merge.py
"""
Deep-merge determinístico de configuração.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - null (None) em qualquer um dos lados → sobrescrita direta
    - conflito de tipos → `ConfigTypeConflictError`

O caso `null` permite que os defaults declarem knobs opcionais
(`engine.checkpoint_dir: null`) que o override local preenche.

Invariantes:
    - Nenhum input é mutado
    - Chaves não sobrescritas são preservadas
"""

from copy import deepcopy
from typing import Any, Dict, List, Optional

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any], _path: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Combina `base` com `override`, retornando um novo dicionário.

    Raises:
        ConfigTypeConflictError: se uma chave tiver tipos incompatíveis;
            a mensagem inclui o caminho completo (ex.: `executor.isolated`).
    """
    path = list(_path or [])
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requires dicts at the root, got "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]
        key_path = path + [str(key)]

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value, key_path)
            continue

        if base_value is None or override_value is None or isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        if type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Type conflict at '{'.'.join(key_path)}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result
