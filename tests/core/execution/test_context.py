# tests/core/execution/test_context.py
"""
Testes do RunContext (log estruturado e warnings da run).

Invariantes verificados:
    - Todo evento carrega run_id, step_id, level e timestamp UTC
    - Campos extras são preservados no evento
    - Warnings são agrupados por step_id e também viram eventos
"""

from datetime import datetime

from dataflow_core.core.execution.context import RunContext


def test_log_event_shape(dummy_ctx):
    dummy_ctx.log(step_id="orders", level="info", message="relation written", rows=3)

    (event,) = dummy_ctx.events
    assert event["run_id"] == "run-test-001"
    assert event["step_id"] == "orders"
    assert event["rows"] == 3
    assert datetime.fromisoformat(event["timestamp"]).utcoffset().total_seconds() == 0


def test_warnings_are_grouped_by_step(dummy_ctx):
    dummy_ctx.add_warning(step_id="a", message="first")
    dummy_ctx.add_warning(step_id="a", message="second")
    dummy_ctx.add_warning(step_id="b", message="third")

    assert dummy_ctx.warnings == {"a": ["first", "second"], "b": ["third"]}
    assert [e["level"] for e in dummy_ctx.events_for("a")] == ["warning", "warning"]


def test_create_generates_unique_runs():
    a = RunContext.create(environment={"x": 1})
    b = RunContext.create()

    assert a.run_id != b.run_id
    assert a.environment == {"x": 1}
    assert a.created_at.tzinfo is not None
