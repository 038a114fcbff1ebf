# src/dataflow_core/core/execution/oracle.py
"""
Oráculos de existência de recursos físicos.

Durante a validação de requisitos, um recurso requerido que nenhum target
selecionado fornece ainda pode ser aceito se já existir fisicamente. A
verificação é delegada a um `ResourceOracle` registrado por categoria.

Oráculos embutidos:
    - "file"  → existência no filesystem (glob via pathlib; alternativas
      `{a,b}` são expandidas antes)
    - "local" → idem, aceitando URIs `file://`

Convenção de partições: cada par `key=value` da partição do recurso vira um
subdiretório, na ordem de inserção do dicionário.

Limites explícitos:
    - Não acessa rede, catálogos de tabelas ou bancos de dados
    - Categorias sem oráculo não são verificáveis (decisão do Scheduler)
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Protocol
from urllib.parse import unquote, urlparse

from dataflow_core.core.model.resources import ResourceIdentifier, expand_braces


class ResourceOracle(Protocol):
    def exists(self, resource: ResourceIdentifier) -> bool:
        ...


def _split_glob(path: str) -> tuple:
    """Separa o prefixo literal do padrão glob (`/out/a*/b` → (`/out`, `a*/b`))."""
    parts = Path(path).parts
    for idx, part in enumerate(parts):
        if any(c in part for c in "*?["):
            base = Path(*parts[:idx]) if idx else Path(".")
            return base, "/".join(parts[idx:])
    return Path(path), ""


class FileResourceOracle:
    """Verifica recursos de arquivo no filesystem local."""

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else None

    def resolve(self, resource: ResourceIdentifier) -> str:
        name = resource.name
        if name.startswith("file:"):
            name = unquote(urlparse(name).path)
        path = Path(name)
        if self.root is not None and not path.is_absolute():
            path = self.root / path
        for key, value in resource.partition.items():
            path = path / f"{key}={value}"
        return str(path)

    def exists(self, resource: ResourceIdentifier) -> bool:
        for path in expand_braces(self.resolve(resource)):
            base, pattern = _split_glob(path)
            if not pattern:
                if base.exists():
                    return True
            elif any(True for _ in base.glob(pattern)):
                return True
        return False


def default_oracles(root: Optional[Path] = None) -> Dict[str, ResourceOracle]:
    oracle = FileResourceOracle(root)
    return {"file": oracle, "local": oracle}
