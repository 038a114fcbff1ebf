# src/dataflow_core/core/errors.py
"""
dataflow-core: Canonical Error Structures (v1)

Este módulo define o padrão canônico de payloads de erro do dataflow-core.
Erros que encerram um plano ou um job são persistidos no histórico de
execuções e, por isso, devem ser:

- explícitos
- serializáveis
- rastreáveis até o target/mapping de origem

Nenhuma decisão implícita é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from .exceptions import DataflowException


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do dataflow-core.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    - cause: cadeia de causas (classe + mensagem), da mais externa à mais interna
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    cause: Optional[List[Dict[str, str]]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Planejamento
CYCLIC_DEPENDENCY = "CYCLIC_DEPENDENCY"
MISSING_RESOURCE = "MISSING_RESOURCE"
UNKNOWN_PHASE = "UNKNOWN_PHASE"

# Resolução de identificadores
NO_SUCH_TARGET = "NO_SUCH_TARGET"
NO_SUCH_STEP = "NO_SUCH_STEP"
NO_SUCH_OUTPUT = "NO_SUCH_OUTPUT"
NO_SUCH_JOB = "NO_SUCH_JOB"
NO_SUCH_RELATION = "NO_SUCH_RELATION"
NO_SUCH_KIND = "NO_SUCH_KIND"
INVALID_PARAMETER = "INVALID_PARAMETER"

# Execução
OPERATION_ERROR = "OPERATION_ERROR"
UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
EXTERNAL_ENGINE_ERROR = "EXTERNAL_ENGINE_ERROR"
UNSUPPORTED_METRIC_TYPE = "UNSUPPORTED_METRIC_TYPE"

# Fallback
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


_TYPE_BY_CLASS = {
    "CyclicDependencyError": CYCLIC_DEPENDENCY,
    "MissingResourceError": MISSING_RESOURCE,
    "UnknownPhaseError": UNKNOWN_PHASE,
    "NoSuchTargetError": NO_SUCH_TARGET,
    "NoSuchStepError": NO_SUCH_STEP,
    "NoSuchOutputError": NO_SUCH_OUTPUT,
    "NoSuchJobError": NO_SUCH_JOB,
    "NoSuchRelationError": NO_SUCH_RELATION,
    "NoSuchKindError": NO_SUCH_KIND,
    "InvalidParameterError": INVALID_PARAMETER,
    "OperationError": OPERATION_ERROR,
    "UnsupportedOperationError": UNSUPPORTED_OPERATION,
    "ExternalEngineError": EXTERNAL_ENGINE_ERROR,
    "UnsupportedMetricTypeError": UNSUPPORTED_METRIC_TYPE,
}


def _cause_chain(exc: BaseException) -> List[Dict[str, str]]:
    chain: List[Dict[str, str]] = []
    seen = set()
    current = exc.__cause__ or exc.__context__
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append({
            "exception_class": current.__class__.__name__,
            "message": str(current) or "",
        })
        current = current.__cause__ or current.__context__
    return chain


def exception_to_payload(exc: BaseException) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, acionável).

    Regras:
    - DataflowException: já vem com message/details/hint; o código é derivado
      da classe (primeira classe conhecida na MRO).
    - Outras exceções: encapsular como UNEXPECTED_ERROR sem expor stack trace.
    """
    chain = _cause_chain(exc) or None

    if isinstance(exc, DataflowException):
        error_type = UNEXPECTED_ERROR
        for klass in type(exc).__mro__:
            if klass.__name__ in _TYPE_BY_CLASS:
                error_type = _TYPE_BY_CLASS[klass.__name__]
                break
        return ErrorPayload(
            type=error_type,
            message=exc.message or "Erro de execução",
            details=dict(exc.details or {}),
            hint=exc.hint,
            cause=chain,
        )

    return ErrorPayload(
        type=UNEXPECTED_ERROR,
        message=str(exc) or "Erro inesperado durante execução",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique o log de eventos da run e a definição do projeto",
        cause=chain,
    )
