# src/dataflow_core/core/exceptions.py
"""
dataflow-core: Canonical Exceptions (v1)

Este módulo define as exceções tipadas do dataflow-core.

Objetivo:
- Permitir que Scheduler, Executor, Runner e entidades do projeto levantem
  exceções semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload (ver `errors.py`)
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Regras:
- Toda exceção carrega o identificador do alvo/mapping envolvido em `details`
- Exceções devem carregar apenas dados estruturados (serializáveis)
- A causa original é preservada via encadeamento (`raise ... from exc`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, eq=False)
class DataflowException(Exception):
    """Base class para exceções internas do dataflow-core.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Planejamento
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class CyclicDependencyError(DataflowException):
    """Os targets selecionados formam um ciclo de recursos em alguma fase."""


@dataclass(frozen=True, eq=False)
class MissingResourceError(DataflowException):
    """Recurso requerido não é fornecido por nenhum target e não existe externamente."""


@dataclass(frozen=True, eq=False)
class UnknownPhaseError(DataflowException):
    """Nome de fase desconhecido."""


# ---------------------------------------------------------------------------
# Resolução de identificadores
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class NoSuchTargetError(DataflowException):
    """Target referenciado não existe no projeto."""


@dataclass(frozen=True, eq=False)
class NoSuchStepError(DataflowException):
    """Mapping (step) referenciado não existe no projeto."""


@dataclass(frozen=True, eq=False)
class NoSuchOutputError(DataflowException):
    """Output referenciado não foi declarado pelo mapping produtor."""


@dataclass(frozen=True, eq=False)
class NoSuchJobError(DataflowException):
    """Job referenciado não existe no projeto."""


@dataclass(frozen=True, eq=False)
class NoSuchRelationError(DataflowException):
    """Relation referenciada não existe no projeto."""


@dataclass(frozen=True, eq=False)
class NoSuchKindError(DataflowException):
    """Kind não registrado na tabela de registro da família de entidades."""


@dataclass(frozen=True, eq=False)
class InvalidParameterError(DataflowException):
    """Argumento de job ausente, desconhecido ou não conversível para o tipo declarado."""


# ---------------------------------------------------------------------------
# Execução
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class OperationError(DataflowException):
    """Falha durante a operação de fase de um target."""


@dataclass(frozen=True, eq=False)
class UnsupportedOperationError(DataflowException):
    """Operação não suportada (ex.: escrita em relation somente leitura)."""


@dataclass(frozen=True, eq=False)
class ExternalEngineError(DataflowException):
    """Falha reportada pelo compute engine ou por um adapter de storage (encapsulada)."""


# ---------------------------------------------------------------------------
# Métricas
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class UnsupportedMetricTypeError(DataflowException):
    """Relabel solicitado para um metric que não é gauge."""
