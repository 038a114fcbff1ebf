# src/dataflow_core/relations/memory.py
"""
Relation "memory": tabela local ao processo.

Útil para testes e para projetos montados inteiramente em memória. Os
dados vivem na própria instância da relation, indexados pelos valores de
partição (tupla vazia quando não particionada).

Recursos: categoria "memory", nome = nome da relation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

import pandas as pd

from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.relation import WRITE_MODES, BaseRelation
from dataflow_core.core.model.resources import ResourceIdentifier, SimpleResourceIdentifier


@dataclass(eq=False, repr=False)
class MemoryRelation(BaseRelation):
    properties: InstanceProperties
    records: Optional[Any] = None
    partitions: List[str] = field(default_factory=list)
    created: bool = False

    def __post_init__(self) -> None:
        self._data: Dict[Tuple[str, ...], pd.DataFrame] = {}
        if self.records is not None:
            self.created = True
            self.write(None, pd.DataFrame(self.records), mode="append")

    def provides(self) -> Set[ResourceIdentifier]:
        return {SimpleResourceIdentifier("memory", self.name)}

    def resources(self, partition: Optional[Dict[str, str]] = None) -> Set[ResourceIdentifier]:
        return {SimpleResourceIdentifier("memory", self.name, dict(partition or {}))}

    def _key(self, values: Dict[str, Any]) -> Tuple[str, ...]:
        return tuple(str(values[k]) for k in self.partitions)

    def _selected(self, partitions: Optional[List[Dict[str, str]]]) -> List[Tuple[str, ...]]:
        keys = sorted(self._data)
        if not partitions:
            return keys
        selected = []
        for key in keys:
            values = dict(zip(self.partitions, key))
            if any(all(values.get(k) == str(v) for k, v in p.items()) for p in partitions):
                selected.append(key)
        return selected

    def read(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> pd.DataFrame:
        frames = []
        for key in self._selected(partitions):
            df = self._data[key].copy()
            for column, value in zip(self.partitions, key):
                df[column] = value
            frames.append(df)
        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, ignore_index=True, sort=False)

    def write(
        self,
        executor: Any,
        artifact: Any,
        partition: Optional[Dict[str, str]] = None,
        mode: str = "overwrite",
    ) -> None:
        if mode not in WRITE_MODES:
            raise ValueError(f"Unsupported write mode '{mode}', expected one of {list(WRITE_MODES)}")
        df = pd.DataFrame(artifact)
        if partition:
            groups = [(self._key(partition), df)]
        elif self.partitions:
            groups = []
            for keys, group in df.groupby(list(self.partitions), sort=True):
                keys = keys if isinstance(keys, tuple) else (keys,)
                groups.append((tuple(str(k) for k in keys), group))
        else:
            groups = [((), df)]

        for key, group in groups:
            group = group.drop(columns=[c for c in self.partitions if c in group.columns])
            current = self._data.get(key)
            if current is not None and mode == "error_if_exists":
                raise FileExistsError(f"Relation '{self.identifier}' already has data for {key}")
            if current is not None and mode == "append":
                group = pd.concat([current, group], ignore_index=True, sort=False)
            self._data[key] = group.reset_index(drop=True)
        self.created = True

    def exists(self, executor: Any) -> bool:
        return self.created

    def create(self, executor: Any) -> None:
        self.created = True

    def truncate(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> None:
        for key in self._selected(partitions):
            del self._data[key]

    def destroy(self, executor: Any) -> None:
        self._data.clear()
        self.created = False
