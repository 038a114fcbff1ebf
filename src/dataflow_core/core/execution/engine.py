# src/dataflow_core/core/execution/engine.py
"""
Adapter do compute engine externo.

O core nunca transforma dados por conta própria: mappings produzem artefatos
através do engine e o Executor aplica, via este adapter, os hints de
pós-processamento declarados (persistência, broadcast, checkpoint).

O adapter padrão (`PandasEngine`) trabalha com `pandas.DataFrame`/`Series`:
    - persist    → cópia materializada em memória (ou em disco via joblib
                   para DISK_ONLY / MEMORY_AND_DISK)
    - broadcast  → marca `attrs["broadcast"] = True` numa cópia rasa
    - checkpoint → grava o artefato com joblib e o relê do disco

Decisões:
    - Todo estado materializado é registrado por escopo (`scope`), para que
      o teardown do escopo devolva tudo ao engine (`release`)
    - Checkpoints usam caminho determinístico relativo ao diretório base:
      `<checkpoint_dir>/<scope>/<name>.joblib`

Limites explícitos:
    - Não executa mappings
    - Não conhece targets nem fases
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import joblib
import pandas as pd


class ComputeEngine(Protocol):
    def persist(self, artifact: Any, level: str, *, scope: str, name: str) -> Any:
        ...

    def broadcast(self, artifact: Any, *, scope: str, name: str) -> Any:
        ...

    def checkpoint(self, artifact: Any, *, scope: str, name: str) -> Any:
        ...

    def release(self, scope: str) -> None:
        ...


def _require_frame(artifact: Any, operation: str) -> None:
    if not isinstance(artifact, (pd.DataFrame, pd.Series)):
        raise TypeError(
            f"{operation} requires a pandas DataFrame or Series, got {type(artifact).__name__}"
        )


def _safe_name(name: str) -> str:
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in name)


class PandasEngine:
    """Compute engine adapter sobre pandas + joblib."""

    def __init__(self, *, checkpoint_dir: Optional[Union[str, Path]] = None) -> None:
        self._checkpoint_dir = Path(checkpoint_dir) if checkpoint_dir else None
        self._owns_checkpoint_dir = checkpoint_dir is None
        self._persisted: Dict[str, List[Any]] = {}
        self._checkpoints: Dict[str, List[Path]] = {}

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    @property
    def checkpoint_dir(self) -> Path:
        if self._checkpoint_dir is None:
            self._checkpoint_dir = Path(tempfile.mkdtemp(prefix="dataflow-checkpoint-"))
        return self._checkpoint_dir

    def checkpoint_path(self, *, scope: str, name: str) -> Path:
        return self.checkpoint_dir / _safe_name(scope) / f"{_safe_name(name)}.joblib"

    # ------------------------------------------------------------------
    # Hints
    # ------------------------------------------------------------------
    def persist(self, artifact: Any, level: str, *, scope: str, name: str) -> Any:
        _require_frame(artifact, "persist")
        if level in ("DISK_ONLY", "MEMORY_AND_DISK"):
            path = self.checkpoint_path(scope=scope, name=f"{name}.persist")
            path.parent.mkdir(parents=True, exist_ok=True)
            joblib.dump(artifact, path)
            self._checkpoints.setdefault(scope, []).append(path)
            if level == "DISK_ONLY":
                materialized = joblib.load(path)
            else:
                materialized = artifact.copy(deep=True)
        else:
            materialized = artifact.copy(deep=True)
        self._persisted.setdefault(scope, []).append(materialized)
        return materialized

    def broadcast(self, artifact: Any, *, scope: str, name: str) -> Any:
        _require_frame(artifact, "broadcast")
        marked = artifact.copy(deep=False)
        marked.attrs["broadcast"] = True
        return marked

    def checkpoint(self, artifact: Any, *, scope: str, name: str) -> Any:
        _require_frame(artifact, "checkpoint")
        path = self.checkpoint_path(scope=scope, name=name)
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(artifact, path)
        self._checkpoints.setdefault(scope, []).append(path)
        return joblib.load(path)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def materialized(self, scope: str) -> int:
        """Quantidade de artefatos persistidos + checkpoints ativos no escopo."""
        return len(self._persisted.get(scope, [])) + len(self._checkpoints.get(scope, []))

    def release(self, scope: str) -> None:
        self._persisted.pop(scope, None)
        for path in self._checkpoints.pop(scope, []):
            path.unlink(missing_ok=True)
        if self._checkpoint_dir is not None:
            scope_dir = self._checkpoint_dir / _safe_name(scope)
            if scope_dir.is_dir() and not any(scope_dir.iterdir()):
                scope_dir.rmdir()

    def shutdown(self) -> None:
        """Libera todos os escopos e remove o diretório temporário, se próprio."""
        for scope in list(set(self._persisted) | set(self._checkpoints)):
            self.release(scope)
        if self._owns_checkpoint_dir and self._checkpoint_dir is not None:
            shutil.rmtree(self._checkpoint_dir, ignore_errors=True)
            self._checkpoint_dir = None
