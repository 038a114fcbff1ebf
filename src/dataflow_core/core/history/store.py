# src/dataflow_core/core/history/store.py
"""
Histórico de execuções de jobs.

Cada run de job produz um `JobRunRecord`: aberto no início (`RUNNING`) e
fechado ao final com o status final e, em caso de falha, o payload
serializável do erro (ver `dataflow_core.core.errors`).

Implementações:
    - InMemoryHistoryStore → registros no processo (testes, runs avulsas)
    - JsonHistoryStore     → arquivo JSON determinístico (indent=2, chaves
                             ordenadas), reescrito a cada alteração

Decisões arquiteturais:
    - UTC é o timezone canônico para todos os timestamps
    - Registros são imutáveis; atualizações produzem novas instâncias
    - A ordem de `list_runs` é a ordem de abertura das runs

Invariantes:
    - `run_id` é único por store
    - `finish_run` só fecha runs abertas (status RUNNING)

Limites explícitos:
    - Não executa jobs
    - Não realiza migração de schema
    - Não é seguro para múltiplos processos concorrentes
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from dataflow_core.core.execution.types import Status


def _iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def _utcnow() -> str:
    return _iso(datetime.now(timezone.utc))


@dataclass(frozen=True)
class JobRunRecord:
    """
    Registro de uma run de job.

    Campos:
        - run_id: identificador da run (o mesmo do RunContext)
        - job / project: identificação do job executado
        - phase: fase solicitada
        - args: argumentos efetivos (já convertidos para texto)
        - status: RUNNING até `finish_run`; depois SUCCESS/FAILED/SKIPPED
        - started_at / finished_at: timestamps UTC ISO 8601
        - config_hash: hash da configuração de runtime usada
        - error: payload do erro quando FAILED
    """

    run_id: str
    job: str
    phase: str
    project: Optional[str] = None
    args: Dict[str, str] = field(default_factory=dict)
    status: Status = Status.RUNNING
    started_at: str = field(default_factory=_utcnow)
    finished_at: Optional[str] = None
    config_hash: Optional[str] = None
    error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "job": self.job,
            "project": self.project,
            "phase": self.phase,
            "args": dict(self.args),
            "status": self.status.value,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "config_hash": self.config_hash,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobRunRecord":
        return cls(
            run_id=data["run_id"],
            job=data["job"],
            project=data.get("project"),
            phase=data["phase"],
            args=dict(data.get("args") or {}),
            status=Status(data.get("status", Status.RUNNING.value)),
            started_at=data.get("started_at") or _utcnow(),
            finished_at=data.get("finished_at"),
            config_hash=data.get("config_hash"),
            error=data.get("error"),
        )


class JobHistoryStore(Protocol):
    def start_run(self, record: JobRunRecord) -> JobRunRecord:
        ...

    def finish_run(
        self,
        run_id: str,
        status: Status,
        *,
        error: Optional[Dict[str, Any]] = None,
    ) -> JobRunRecord:
        ...

    def get_run(self, run_id: str) -> JobRunRecord:
        ...

    def list_runs(self, job: Optional[str] = None) -> List[JobRunRecord]:
        ...


class InMemoryHistoryStore:
    """Histórico mantido apenas em memória."""

    def __init__(self) -> None:
        self._records: Dict[str, JobRunRecord] = {}

    def start_run(self, record: JobRunRecord) -> JobRunRecord:
        if record.run_id in self._records:
            raise ValueError(f"Duplicate run id: {record.run_id}")
        self._records[record.run_id] = record
        self._flush()
        return record

    def finish_run(
        self,
        run_id: str,
        status: Status,
        *,
        error: Optional[Dict[str, Any]] = None,
    ) -> JobRunRecord:
        current = self.get_run(run_id)
        if current.status is not Status.RUNNING:
            raise ValueError(f"Run {run_id} is already finished ({current.status})")
        if status is Status.RUNNING:
            raise ValueError("finish_run requires a final status")
        updated = replace(current, status=status, finished_at=_utcnow(), error=error)
        self._records[run_id] = updated
        self._flush()
        return updated

    def get_run(self, run_id: str) -> JobRunRecord:
        if run_id not in self._records:
            raise KeyError(f"Unknown run id: {run_id}")
        return self._records[run_id]

    def list_runs(self, job: Optional[str] = None) -> List[JobRunRecord]:
        return [r for r in self._records.values() if job is None or r.job == job]

    def _flush(self) -> None:
        pass


class JsonHistoryStore(InMemoryHistoryStore):
    """Histórico persistido como JSON determinístico num único arquivo."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8"))
            for item in data.get("runs", []):
                record = JobRunRecord.from_dict(item)
                self._records[record.run_id] = record

    def _flush(self) -> None:
        data = {"runs": [r.to_dict() for r in self._records.values()]}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True, default=str),
            encoding="utf-8",
        )
