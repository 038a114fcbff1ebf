# src/dataflow_core/relations/file.py
"""
Relation "file": tabela CSV armazenada sob um diretório.

Layout físico:
    <location>/part-00000.csv                          (não particionada)
    <location>/<k1>=<v1>/<k2>=<v2>/part-00000.csv      (particionada)

Recursos:
    - provides()           → {file:<location>}
    - resources(partition) → {file:<location>[partition]}

Como o identificador fornecido não tem partição, ele contém qualquer
recurso particionado da mesma location; o oráculo de arquivos converte a
partição nos subdiretórios `key=value` acima.

Modos de escrita: overwrite (padrão), append, error_if_exists.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

import pandas as pd

from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.relation import WRITE_MODES, BaseRelation
from dataflow_core.core.model.resources import ResourceIdentifier, of_file


def _matches(values: Dict[str, str], partitions: Optional[List[Dict[str, str]]]) -> bool:
    if not partitions:
        return True
    return any(all(values.get(k) == str(v) for k, v in p.items()) for p in partitions)


@dataclass(eq=False, repr=False)
class FileRelation(BaseRelation):
    properties: InstanceProperties
    location: Path
    partitions: List[str] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    separator: str = ","

    def __post_init__(self) -> None:
        self.location = Path(self.location)

    # -----------------------------
    # Recursos
    # -----------------------------
    def provides(self) -> Set[ResourceIdentifier]:
        return {of_file(self.location)}

    def resources(self, partition: Optional[Dict[str, str]] = None) -> Set[ResourceIdentifier]:
        partition = {k: str(v) for k, v in (partition or {}).items()}
        unknown = [k for k in partition if k not in self.partitions]
        if unknown:
            raise ValueError(f"Relation '{self.identifier}' has no partition column(s) {unknown}")
        return {of_file(self.location).with_partition(partition)}

    # -----------------------------
    # Layout
    # -----------------------------
    def partition_path(self, partition: Dict[str, str]) -> Path:
        path = self.location
        for key in self.partitions:
            path = path / f"{key}={partition[key]}"
        return path

    def _files(self) -> Iterator[Tuple[Dict[str, str], Path]]:
        if not self.location.is_dir():
            return
        depth = len(self.partitions)
        for csv in sorted(self.location.rglob("*.csv")):
            parts = csv.relative_to(self.location).parts[:-1]
            if len(parts) != depth:
                continue
            values: Dict[str, str] = {}
            for key, part in zip(self.partitions, parts):
                name, _, value = part.partition("=")
                if name != key:
                    break
                values[key] = value
            else:
                yield values, csv

    # -----------------------------
    # Dados
    # -----------------------------
    def read(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> pd.DataFrame:
        frames: List[pd.DataFrame] = []
        for values, csv in self._files():
            if not _matches(values, partitions):
                continue
            df = pd.read_csv(csv, sep=self.separator)
            for key in self.partitions:
                df[key] = values[key]
            frames.append(df)
        if not frames:
            return pd.DataFrame(columns=list(self.columns) + [k for k in self.partitions if k not in self.columns])
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
        unknown = [k for k in (partition or {}) if k not in self.partitions]
        if unknown:
            raise ValueError(f"Relation '{self.identifier}' has no partition column(s) {unknown}")
        if not self.partitions:
            self._write_dir(self.location, artifact, mode)
            return
        if partition:
            missing = [k for k in self.partitions if k not in partition]
            if missing:
                raise ValueError(f"Partition for relation '{self.identifier}' misses {missing}")
            values = {k: str(partition[k]) for k in self.partitions}
            data = artifact.drop(columns=[k for k in self.partitions if k in artifact.columns])
            self._write_dir(self.partition_path(values), data, mode)
            return
        # escrita dinâmica: particiona pelas colunas do próprio artefato
        for keys, group in artifact.groupby(list(self.partitions), sort=True):
            keys = keys if isinstance(keys, tuple) else (keys,)
            values = {k: str(v) for k, v in zip(self.partitions, keys)}
            self._write_dir(self.partition_path(values), group.drop(columns=list(self.partitions)), mode)

    def _write_dir(self, directory: Path, df: pd.DataFrame, mode: str) -> None:
        existing = sorted(directory.glob("*.csv")) if directory.is_dir() else []
        if existing and mode == "error_if_exists":
            raise FileExistsError(f"Relation '{self.identifier}' already has data in {directory}")
        if mode == "overwrite":
            for csv in existing:
                csv.unlink()
            existing = []
        directory.mkdir(parents=True, exist_ok=True)
        df.to_csv(directory / f"part-{len(existing):05d}.csv", sep=self.separator, index=False)

    # -----------------------------
    # Ciclo de vida
    # -----------------------------
    def exists(self, executor: Any) -> bool:
        return self.location.is_dir()

    def create(self, executor: Any) -> None:
        self.location.mkdir(parents=True, exist_ok=True)

    def truncate(self, executor: Any, partitions: Optional[List[Dict[str, str]]] = None) -> None:
        for values, csv in list(self._files()):
            if _matches(values, partitions):
                csv.unlink()

    def destroy(self, executor: Any) -> None:
        if self.location.exists():
            shutil.rmtree(self.location)
