# src/dataflow_core/core/config/hashing.py
"""
Hash canônico da configuração efetiva.

O hash identifica a configuração usada numa run e é gravado em cada
registro do histórico de execuções (`JobRunRecord.config_hash`).

Política (v1):
    - JSON canônico (chaves ordenadas, separadores compactos, UTF-8)
    - SHA-256, representado como hexadecimal de 64 caracteres
    - valores não serializáveis em JSON (ex.: datas) usam `str()`
"""

import hashlib
import json
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera o hash SHA-256 determinístico de uma configuração.

    Configurações estruturalmente equivalentes (mesmas chaves e valores,
    em qualquer ordem) produzem o mesmo hash.

    Raises:
        TypeError: se `config` não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(f"Config to hash must be a dict, got {type(config).__name__}")

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
