# src/dataflow_core/core/registry.py
"""
Tabelas de registro de kinds.

Este módulo define o `KindRegistry`, a tabela explícita que associa o nome
de um kind (ex.: "distinct", "file", "relation") à classe concreta que o
implementa, para uma família de entidades (mappings, relations, targets).

As tabelas são populadas estaticamente na importação de
`dataflow_core.kinds`; não existe varredura de classpath/plugins em runtime.

Responsabilidades do módulo:
    - Validar unicidade de nomes de kind
    - Preservar ordem de registro
    - Instanciar entidades a partir do kind

Invariantes:
    - Cada kind registrado possui um nome único e não vazio na sua família
    - A lista de kinds reflete exatamente a ordem de registro

Limites explícitos:
    - Não lê arquivos de configuração
    - Não valida argumentos específicos de cada kind
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from dataflow_core.core.exceptions import NoSuchKindError


class DuplicateKindError(ValueError):
    """
    Exceção levantada quando um kind é registrado duas vezes na mesma família.

    Decisões arquiteturais:
        - Nomes de kind devem ser únicos por família
        - A duplicidade é tratada como erro fatal no momento do registro
    """


@dataclass
class KindRegistry:
    """
    Registro canônico de kinds de uma família de entidades.

    Uso:
        MAPPING_KINDS.register("distinct", DistinctMapping)
        mapping = MAPPING_KINDS.create("distinct", properties=..., input=...)
    """

    family: str
    _kinds: Dict[str, Callable[..., Any]] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)

    def register(self, kind: str, factory: Callable[..., Any]) -> None:
        if not isinstance(kind, str) or not kind.strip():
            raise ValueError("kind must be a non-empty string")
        if kind in self._kinds:
            raise DuplicateKindError(f"Duplicate {self.family} kind: {kind}")
        self._kinds[kind] = factory
        self._order.append(kind)

    def get(self, kind: str) -> Callable[..., Any]:
        if kind not in self._kinds:
            raise NoSuchKindError(
                f"No {self.family} kind registered as '{kind}'",
                details={"family": self.family, "kind": kind, "known": list(self._order)},
            )
        return self._kinds[kind]

    def create(self, kind: str, **kwargs: Any) -> Any:
        return self.get(kind)(**kwargs)

    def kinds(self) -> List[str]:
        return list(self._order)

    def __contains__(self, kind: object) -> bool:
        return kind in self._kinds
