# tests/core/test_errors.py
"""
Testes da conversão de exceções em payloads serializáveis.

O payload é o formato persistido no histórico de runs. Os testes
asseguram que:
- exceções do dataflow-core mapeiam para códigos estáveis
- details e hint são preservados
- a cadeia de causas é registrada sem stack trace
- exceções genéricas viram UNEXPECTED_ERROR
"""

import json

from dataflow_core.core.errors import (
    CYCLIC_DEPENDENCY,
    OPERATION_ERROR,
    UNEXPECTED_ERROR,
    exception_to_payload,
)
from dataflow_core.core.exceptions import CyclicDependencyError, OperationError


def _raise_chained():
    try:
        raise KeyError("column 'amount'")
    except KeyError as exc:
        raise OperationError("Target 'orders' failed", details={"target": "orders", "phase": "build"}) from exc


def test_dataflow_exception_payload():
    exc = CyclicDependencyError("cycle", details={"targets": ["a", "b"]}, hint="check provides")

    payload = exception_to_payload(exc)

    assert payload.type == CYCLIC_DEPENDENCY
    assert payload.details == {"targets": ["a", "b"]}
    assert payload.hint == "check provides"
    assert payload.cause is None


def test_cause_chain_is_recorded():
    try:
        _raise_chained()
    except OperationError as exc:
        payload = exception_to_payload(exc).to_dict()

    assert payload["type"] == OPERATION_ERROR
    assert payload["cause"] == [{"exception_class": "KeyError", "message": "\"column 'amount'\""}]
    json.dumps(payload)


def test_generic_exception_payload():
    payload = exception_to_payload(RuntimeError("boom"))

    assert payload.type == UNEXPECTED_ERROR
    assert payload.message == "boom"
    assert payload.details == {"exception_class": "RuntimeError"}


def test_exceptions_are_immutable_and_structured():
    exc = OperationError("failed", details={"target": "t"})

    assert str(exc) == "failed"
    assert exc.hint is None
    assert isinstance(exc, Exception)
