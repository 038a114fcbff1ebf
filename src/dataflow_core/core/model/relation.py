# src/dataflow_core/core/model/relation.py
"""
Contrato de Relation (adapter de storage).

Relations são colaboradores externos que representam dados persistidos
(arquivos, tabelas). O core só as acessa através desta interface: leitura,
escrita, existência e as operações de ciclo de vida usadas pelos targets.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Set, runtime_checkable

from dataflow_core.core.exceptions import UnsupportedOperationError
from dataflow_core.core.model.identifiers import RelationIdentifier
from dataflow_core.core.model.instance import Instance
from dataflow_core.core.model.resources import ResourceIdentifier


WRITE_MODES = ("overwrite", "append", "error_if_exists")


@runtime_checkable
class Relation(Protocol):
    identifier: RelationIdentifier

    def provides(self) -> Set[ResourceIdentifier]:
        ...

    def requires(self) -> Set[ResourceIdentifier]:
        ...

    def resources(self, partition: Optional[Dict[str, str]] = None) -> Set[ResourceIdentifier]:
        ...

    def read(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> Any:
        ...

    def write(
        self,
        executor: Any,
        artifact: Any,
        partition: Optional[Dict[str, str]] = None,
        mode: str = "overwrite",
    ) -> None:
        ...

    def exists(self, executor: Any) -> bool:
        ...

    def create(self, executor: Any) -> None:
        ...

    def migrate(self, executor: Any) -> None:
        ...

    def truncate(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> None:
        ...

    def destroy(self, executor: Any) -> None:
        ...


class BaseRelation(Instance):
    """Relation sem dados: leitura/escrita não suportadas, ciclo de vida sem efeito."""

    category = "relation"

    @property
    def identifier(self) -> RelationIdentifier:
        return RelationIdentifier(self.properties.name, self.properties.project)

    def provides(self) -> Set[ResourceIdentifier]:
        return set()

    def requires(self) -> Set[ResourceIdentifier]:
        return set()

    def resources(self, partition: Optional[Dict[str, str]] = None) -> Set[ResourceIdentifier]:
        return set()

    def read(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> Any:
        raise UnsupportedOperationError(
            f"Relation '{self.identifier}' does not support reading",
            details={"relation": str(self.identifier), "operation": "read"},
        )

    def write(
        self,
        executor: Any,
        artifact: Any,
        partition: Optional[Dict[str, str]] = None,
        mode: str = "overwrite",
    ) -> None:
        raise UnsupportedOperationError(
            f"Relation '{self.identifier}' does not support writing",
            details={"relation": str(self.identifier), "operation": "write"},
        )

    def exists(self, executor: Any) -> bool:
        return False

    def create(self, executor: Any) -> None:
        pass

    def migrate(self, executor: Any) -> None:
        pass

    def truncate(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> None:
        pass

    def destroy(self, executor: Any) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier})"
