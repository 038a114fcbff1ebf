# src/dataflow_core/core/model/mapping.py
"""
Contrato canônico de Mapping (step de transformação).

Um Mapping é uma computação nomeada que produz um ou mais outputs (artefatos)
a partir dos outputs de mappings upstream. A computação em si é delegada ao
compute engine externo; o Executor apenas resolve dependências, memoiza e
aplica os hints declarados.

Hints:
    - cache: nível de persistência (ex.: "MEMORY_ONLY"); None/"NONE" desliga
    - broadcast: marca os outputs para distribuição por broadcast
    - checkpoint: força um checkpoint dos outputs

Invariantes:
    - Cada mapping declara explicitamente seus inputs e outputs
    - `execute` é chamado no máximo uma vez por escopo de cache

Limites explícitos:
    - Não resolve dependências (responsabilidade do Executor)
    - Não conhece targets nem fases
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Set, runtime_checkable

from dataflow_core.core.model.identifiers import (
    DEFAULT_OUTPUT,
    MappingIdentifier,
    MappingOutputIdentifier,
)
from dataflow_core.core.model.instance import Instance
from dataflow_core.core.model.resources import ResourceIdentifier


Artifact = Any

STORAGE_LEVELS = (
    "NONE",
    "MEMORY_ONLY",
    "MEMORY_AND_DISK",
    "DISK_ONLY",
)


@dataclass(frozen=True)
class MappingHints:
    """Hints de pós-processamento aplicados pelo Executor após `execute`."""

    cache: Optional[str] = None
    broadcast: bool = False
    checkpoint: bool = False

    def __post_init__(self) -> None:
        if self.cache is not None and self.cache.upper() not in STORAGE_LEVELS:
            raise ValueError(
                f"Unsupported cache level '{self.cache}', expected one of {list(STORAGE_LEVELS)}"
            )

    @property
    def cache_level(self) -> Optional[str]:
        if self.cache is None or self.cache.upper() == "NONE":
            return None
        return self.cache.upper()


@runtime_checkable
class Mapping(Protocol):
    """Contrato mínimo de um Mapping."""
    identifier: MappingIdentifier
    hints: MappingHints

    def inputs(self) -> List[MappingOutputIdentifier]:
        ...

    def outputs(self) -> List[str]:
        ...

    def dependencies(self) -> Set[MappingOutputIdentifier]:
        ...

    def execute(
        self,
        executor: Any,
        inputs: Dict[MappingOutputIdentifier, Artifact],
    ) -> Dict[str, Artifact]:
        ...


class BaseMapping(Instance):
    """
    Implementação base de Mapping.

    Subclasses (dataclasses) declaram `properties`, seus campos específicos
    e, opcionalmente, `hints`.
    """

    category = "mapping"
    hints: MappingHints = MappingHints()

    @property
    def identifier(self) -> MappingIdentifier:
        return MappingIdentifier(self.properties.name, self.properties.project)

    @property
    def cache(self) -> Optional[str]:
        return self.hints.cache_level

    @property
    def broadcast(self) -> bool:
        return self.hints.broadcast

    @property
    def checkpoint(self) -> bool:
        return self.hints.checkpoint

    def inputs(self) -> List[MappingOutputIdentifier]:
        return []

    def outputs(self) -> List[str]:
        return [DEFAULT_OUTPUT]

    def dependencies(self) -> Set[MappingOutputIdentifier]:
        return set(self.inputs())

    def requires(self, project: Any) -> Set[ResourceIdentifier]:
        """
        Recursos físicos requeridos para instanciar este mapping.

        Por padrão é a união dos requisitos de todos os mappings de entrada;
        mappings que leem relations sobrescrevem este método.
        """
        result: Set[ResourceIdentifier] = set()
        for dep in self.inputs():
            result |= project.get_mapping(dep.mapping).requires(project)
        return result

    def execute(
        self,
        executor: Any,
        inputs: Dict[MappingOutputIdentifier, Artifact],
    ) -> Dict[str, Artifact]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier})"
