# src/dataflow_core/core/execution/phase.py
"""
Fases e ciclos de vida de targets.

Este módulo define as cinco fases fixas do ciclo de vida de um target e os
dois grupos (lifecycles) nos quais elas são executadas.

Fases:
    - CREATE   → cria recursos físicos (diretórios, tabelas)
    - MIGRATE  → ajusta recursos existentes ao schema atual
    - BUILD    → produz os dados
    - TRUNCATE → remove os dados, mantendo a estrutura
    - DESTROY  → remove os recursos físicos

Lifecycles:
    - DEFAULT = [CREATE, MIGRATE, BUILD]
    - CLEAN   = [TRUNCATE, DESTROY]

Decisões arquiteturais:
    - `Phase` é um enum fechado; não há hierarquia extensível
    - O despacho fase → operação do target usa uma tabela explícita
    - Não existem transições entre fases no nível do enum: a ordem é uma
      propriedade do grupo ao qual a fase solicitada pertence

Invariantes:
    - Solicitar a fase P executa, em ordem, todas as fases do grupo de P
      até P (inclusive)
    - Solicitar uma fase de CLEAN nunca executa fases de DEFAULT
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List

from dataflow_core.core.exceptions import UnknownPhaseError


class Phase(str, Enum):
    """
    Fase do ciclo de vida de um target.

    Os valores são strings para facilitar serialização no histórico de
    execuções e em eventos.
    """
    CREATE = "create"
    MIGRATE = "migrate"
    BUILD = "build"
    TRUNCATE = "truncate"
    DESTROY = "destroy"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def of_string(cls, value: Any) -> "Phase":
        if isinstance(value, Phase):
            return value
        text = str(value or "").strip().lower()
        for phase in cls:
            if phase.value == text:
                return phase
        raise UnknownPhaseError(
            f"No phase defined for '{value}'",
            details={"phase": str(value), "known": [p.value for p in cls]},
        )


# Tabela explícita de despacho: fase -> nome da operação do target
_OPERATIONS: Dict[Phase, str] = {
    Phase.CREATE: "create",
    Phase.MIGRATE: "migrate",
    Phase.BUILD: "build",
    Phase.TRUNCATE: "truncate",
    Phase.DESTROY: "destroy",
}


def execute_phase(phase: Phase, target: Any, executor: Any) -> None:
    """Executa em `target` exatamente a operação associada à fase."""
    operation = getattr(target, _OPERATIONS[Phase.of_string(phase)])
    operation(executor)


class Lifecycle:
    """Grupos fixos e ordenados de fases."""

    DEFAULT: List[Phase] = [Phase.CREATE, Phase.MIGRATE, Phase.BUILD]
    CLEAN: List[Phase] = [Phase.TRUNCATE, Phase.DESTROY]
    ALL: List[Phase] = DEFAULT + CLEAN

    @classmethod
    def of_phase(cls, phase: Any) -> List[Phase]:
        """
        Retorna todas as fases do grupo da fase solicitada, até ela (inclusive).

        Ex.: BUILD → [CREATE, MIGRATE, BUILD]; DESTROY → [TRUNCATE, DESTROY].
        """
        p = Phase.of_string(phase)
        group = cls.DEFAULT if p in cls.DEFAULT else cls.CLEAN
        return list(group[: group.index(p) + 1])
