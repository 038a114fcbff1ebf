# src/dataflow_core/core/execution/types.py
"""
Tipos canônicos de resultado de execução.

Componentes:
    - Status        → estados de execução (RUNNING, SUCCESS, FAILED, SKIPPED)
    - TargetResult  → resultado imutável de uma entrada (target, fase) do plano
    - RunResult     → resultado agregado de uma execução de plano/job

Princípios fundamentais:
    - Tipos são estáveis e serializáveis (`to_dict`)
    - Nenhuma lógica de execução vive neste módulo

Invariantes:
    - Enums possuem valores textuais canônicos
    - Resultados são imutáveis (frozen)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Status(str, Enum):
    """
    Estado de execução de uma entrada do plano ou de uma run de job.

    RUNNING só aparece em registros de histórico de runs ainda abertas;
    resultados de targets são sempre finais.
    """
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TargetResult:
    target: str
    phase: str
    status: Status
    duration_ms: int = 0
    error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "phase": self.phase,
            "status": self.status.value,
            "duration_ms": self.duration_ms,
            "error": dict(self.error) if self.error else None,
        }


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado: status final + resultados por entrada, em ordem de execução."""

    run_id: str
    status: Status
    targets: List[TargetResult] = field(default_factory=list)
    error: Optional[Dict[str, Any]] = None

    @property
    def executed(self) -> List[str]:
        return [f"{r.target}:{r.phase}" for r in self.targets if r.status is Status.SUCCESS]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "targets": [r.to_dict() for r in self.targets],
            "error": dict(self.error) if self.error else None,
        }
