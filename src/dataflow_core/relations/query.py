# src/dataflow_core/relations/query.py
"""
Relation "query": relation somente-leitura derivada de uma função.

A função recebe o Executor e devolve um DataFrame (ex.: consulta a uma API
ou a um banco via engine externo). Escritas e operações de ciclo de vida
destrutivas não são suportadas.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

import pandas as pd

from dataflow_core.core.exceptions import UnsupportedOperationError
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.relation import BaseRelation
from dataflow_core.core.model.resources import ResourceIdentifier


@dataclass(eq=False, repr=False)
class QueryRelation(BaseRelation):
    properties: InstanceProperties
    query: Callable[[Any], pd.DataFrame]
    sources: List[ResourceIdentifier] = field(default_factory=list)

    def requires(self) -> Set[ResourceIdentifier]:
        return set(self.sources)

    def resources(self, partition: Optional[Dict[str, str]] = None) -> Set[ResourceIdentifier]:
        return set(self.sources)

    def read(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> pd.DataFrame:
        df = self.query(executor)
        for partition in partitions or []:
            for column, value in partition.items():
                df = df[df[column].astype(str) == str(value)]
        return df.reset_index(drop=True)

    def exists(self, executor: Any) -> bool:
        return True

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(
            f"Relation '{self.identifier}' is read-only and does not support {operation}",
            details={"relation": str(self.identifier), "operation": operation},
        )

    def truncate(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> None:
        raise self._unsupported("truncate")

    def destroy(self, executor: Any) -> None:
        raise self._unsupported("destroy")
