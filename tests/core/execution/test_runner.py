# tests/core/execution/test_runner.py
"""
Testes do Runner (execução de planos e de jobs).

Este módulo valida a política de execução v1:

- cada entrada (target, fase) do plano roda até o fim ou levanta
- a primeira falha aborta o restante do plano (sem retry, sem rollback)
- exceções genéricas são encapsuladas em OperationError com a causa
- métricas de execução são registradas por target, fase e status
- runs de job são registradas no histórico (sucesso, falha, skip)

Decisões arquiteturais:
    - Targets dummy (conftest) registram as operações executadas em `calls`
    - O histórico usado é o InMemoryHistoryStore (padrão sem `history.path`)

Limites explícitos:
    - Não valida kinds concretos (ver tests/targets e tests/e2e)
"""

import pytest

from dataflow_core.core.config.settings import RuntimeSettings
from dataflow_core.core.exceptions import (
    InvalidParameterError,
    MissingResourceError,
    NoSuchTargetError,
    OperationError,
)
from dataflow_core.core.execution.phase import Phase
from dataflow_core.core.execution.runner import Runner
from dataflow_core.core.execution.types import Status
from dataflow_core.core.history.store import JsonHistoryStore
from dataflow_core.core.metric.board import CollectingSink, MetricBoard, StaticMetricSelection
from dataflow_core.core.model.job import JobParameter
from dataflow_core.core.model.resources import SimpleResourceIdentifier


def _res(name):
    return SimpleResourceIdentifier("table", name)


@pytest.fixture
def chain(project, DummyTarget):
    """Projeto com dois targets encadeados: `a` fornece o que `b` requer."""
    project.add_target(DummyTarget("b", provides=[_res("b")], requires=[_res("a")]))
    project.add_target(DummyTarget("a", provides=[_res("a")]))
    return project


def test_build_runs_default_lifecycle_in_order(chain, calls):
    """
    BUILD executa CREATE, MIGRATE e BUILD para todos os targets, fase a fase.
    """
    result = Runner(chain).build_targets(["a", "b"], Phase.BUILD)

    assert calls == [
        ("a", Phase.CREATE),
        ("b", Phase.CREATE),
        ("a", Phase.MIGRATE),
        ("b", Phase.MIGRATE),
        ("a", Phase.BUILD),
        ("b", Phase.BUILD),
    ]
    assert result.status is Status.SUCCESS
    assert result.executed == ["a:create", "b:create", "a:migrate", "b:migrate", "a:build", "b:build"]


def test_first_failure_aborts_the_plan(project, DummyTarget, calls):
    """
    A primeira falha encerra o plano e é encapsulada em OperationError.

    Invariantes:
        - Nenhuma entrada posterior é executada
        - details nomeia o target e a fase
        - A causa original é preservada no encadeamento
    """
    project.add_target(DummyTarget("a", provides=[_res("a")], fail_on=Phase.MIGRATE))
    project.add_target(DummyTarget("b", requires=[_res("a")]))

    with pytest.raises(OperationError) as excinfo:
        Runner(project).build_targets(all_targets=True)

    assert calls == [("a", Phase.CREATE), ("b", Phase.CREATE), ("a", Phase.MIGRATE)]
    assert excinfo.value.details == {"target": "a", "phase": "migrate"}
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_dataflow_exceptions_propagate_unchanged(project, DummyTarget):
    class _Lookup(DummyTarget):
        def build(self, executor):
            executor.project.get_target("ghost")

    project.add_target(_Lookup("a"))

    with pytest.raises(NoSuchTargetError):
        Runner(project).build_targets(["a"])


def test_planning_errors_raise_before_any_operation(project, DummyTarget, calls):
    project.add_target(DummyTarget("b", requires=[SimpleResourceIdentifier("file", "/definitely/absent")]))

    with pytest.raises(MissingResourceError):
        Runner(project).build_targets(["b"])

    assert calls == []


def test_requirement_validation_can_be_disabled(project, DummyTarget, calls):
    project.add_target(DummyTarget("b", requires=[SimpleResourceIdentifier("file", "/definitely/absent")]))
    settings = RuntimeSettings(validate_requirements=False)

    Runner(project, settings=settings).build_targets(["b"], "create")

    assert calls == [("b", Phase.CREATE)]


def test_metrics_are_recorded_per_entry(project, DummyTarget):
    project.add_target(DummyTarget("a", fail_on=Phase.BUILD))
    runner = Runner(project)

    with pytest.raises(OperationError):
        runner.build_targets(["a"])

    runs = {
        (m.labels["phase"], m.labels["status"]): m.value
        for m in runner.metrics.metrics
        if m.name == "target_runs"
    }
    assert runs == {("create", "success"): 1, ("migrate", "success"): 1, ("build", "failed"): 1}
    timer = runner.metrics.timer("target_runtime", target="a", phase="build", status="failed")
    assert len(timer.durations) == 1


def test_clean_lifecycle_runs_truncate_then_destroy(chain, calls):
    Runner(chain).build_targets(["a", "b"], "destroy")

    assert calls == [
        ("a", Phase.TRUNCATE),
        ("b", Phase.TRUNCATE),
        ("a", Phase.DESTROY),
        ("b", Phase.DESTROY),
    ]


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

def test_run_job_records_success(chain, calls):
    """
    Uma run de job bem-sucedida é registrada como SUCCESS no histórico.

    Invariantes:
        - O run_id do resultado é o do registro
        - Argumentos são registrados já convertidos para texto
        - O environment da run recebe os argumentos resolvidos
    """
    seen = {}
    chain.create_job("daily", targets=["a", "b"], parameters=[JobParameter("year", type="integer", default=2020)],
                     environment={"country": "BR"})
    original_build = chain.get_target("b").build

    def build(executor):
        seen.update(executor.environment)
        original_build(executor)

    chain.get_target("b").build = build
    runner = Runner(chain)

    result = runner.run_job("daily", "build", {"year": "2024"})

    record = runner.history.get_run(result.run_id)
    assert result.status is Status.SUCCESS
    assert record.status is Status.SUCCESS
    assert record.args == {"year": "2024"}
    assert record.phase == "build"
    assert record.finished_at is not None
    assert record.config_hash == RuntimeSettings().config_hash
    assert seen == {"country": "BR", "year": 2024}
    assert len(calls) == 6


def test_run_job_records_failure_and_reraises(project, DummyTarget):
    project.add_target(DummyTarget("a", fail_on=Phase.CREATE))
    project.create_job("daily", targets=["a"])
    runner = Runner(project)

    with pytest.raises(OperationError):
        runner.run_job("daily")

    (record,) = runner.history.list_runs("test/daily")
    assert record.status is Status.FAILED
    assert record.error["type"] == "OPERATION_ERROR"
    assert record.error["details"] == {"target": "a", "phase": "create"}
    assert record.error["cause"][0]["exception_class"] == "RuntimeError"


def test_run_job_without_targets_is_skipped(project):
    project.create_job("empty")
    runner = Runner(project)

    result = runner.run_job("empty")

    assert result.status is Status.SKIPPED
    assert runner.history.get_run(result.run_id).status is Status.SKIPPED


def test_invalid_arguments_are_rejected_before_history(project, DummyTarget):
    project.add_target(DummyTarget("a"))
    project.create_job("daily", targets=["a"], parameters=[JobParameter("year", type="integer")])
    runner = Runner(project)

    with pytest.raises(InvalidParameterError):
        runner.run_job("daily")

    assert runner.history.list_runs() == []


def test_run_job_publishes_metric_board(chain):
    board = MetricBoard(
        labels={"job": "daily"},
        selections=[StaticMetricSelection("target_runs", {"target": "a", "phase": "build", "status": "success"})],
    )
    chain.create_job("daily", targets=["a", "b"], metrics=board)
    sink = CollectingSink()

    Runner(chain, sinks=[sink]).run_job("daily")

    assert sink.snapshots == [
        [{
            "name": "target_runs",
            "labels": {"job": "daily", "target": "a", "phase": "build", "status": "success"},
            "value": 1.0,
        }]
    ]


def test_history_path_setting_uses_json_store(project, tmp_path):
    project.create_job("empty")
    path = tmp_path / "history" / "runs.json"
    runner = Runner(project, settings=RuntimeSettings(history_path=path))

    result = runner.run_job("empty")

    assert isinstance(runner.history, JsonHistoryStore)
    assert JsonHistoryStore(path).get_run(result.run_id).status is Status.SKIPPED


# ---------------------------------------------------------------------------
# Sessão
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("isolated, expected", [(True, 2), (False, 1)])
def test_job_scope_follows_isolation_setting(project, DummyTarget, DummyMapping, isolated, expected):
    """
    Runs de job penduram no Executor raiz da sessão.

    Invariantes:
        - Escopo isolado: cada run recomputa o mapping
        - Escopo compartilhado: a segunda run reutiliza o artefato memoizado
        - `close()` descarta o cache da sessão
    """
    mapping = project.add_mapping(DummyMapping("m"))

    class _Consumer(DummyTarget):
        def build(self, executor):
            super().build(executor)
            executor.instantiate(executor.project.get_mapping("m"))

    project.add_target(_Consumer("t"))
    project.create_job("j", targets=["t"])
    runner = Runner(project, settings=RuntimeSettings(isolated=isolated))

    runner.run_job("j")
    runner.run_job("j")

    assert mapping.executions == expected
    assert runner.root.cached(mapping) is not isolated

    runner.close()

    assert not runner.root.cached(mapping)
