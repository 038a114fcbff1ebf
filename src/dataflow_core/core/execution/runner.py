# src/dataflow_core/core/execution/runner.py
"""
Runner de planos e jobs do dataflow-core.

O Runner é a camada que transforma uma seleção de targets e uma fase
solicitada numa execução completa:

    1. validação de requisitos (opcional, via `RuntimeSettings`)
    2. planejamento (`plan_lifecycle`)
    3. execução sequencial de cada entrada (target, fase)
    4. métricas, eventos e histórico

Política de falha (v1):
    - cada entrada roda até o fim ou levanta
    - a primeira falha aborta o restante do plano (sem retry, sem rollback)
    - exceções que não são `DataflowException` são encapsuladas em
      `OperationError` (details: target, phase), encadeadas à causa
    - erros de planejamento são levantados antes de qualquer operação
    - em runs de job, a falha é registrada no histórico (payload
      serializável, sem stack trace) e então re-levantada

Sessão:
    - o Runner mantém um Executor raiz por sessão; cada run de job roda num
      escopo filho dele, isolado ou compartilhado (`executor.isolated`)
    - `close()` descarta o cache da sessão e libera o engine próprio

Métricas emitidas:
    - target_runs (counter)   labels: target, phase, status
    - target_runtime (timer)  labels: target, phase, status

Limites explícitos:
    - Não define formato de projeto
    - Não publica métricas em backends (apenas via `MetricSink`)
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

from dataflow_core.core.config.settings import RuntimeSettings
from dataflow_core.core.errors import exception_to_payload
from dataflow_core.core.exceptions import DataflowException, OperationError
from dataflow_core.core.execution.context import RunContext
from dataflow_core.core.execution.engine import ComputeEngine, PandasEngine
from dataflow_core.core.execution.executor import Executor
from dataflow_core.core.execution.oracle import ResourceOracle, default_oracles
from dataflow_core.core.execution.phase import Phase, execute_phase
from dataflow_core.core.execution.scheduler import (
    PlanEntry,
    plan_lifecycle,
    select_targets,
    validate_requirements,
)
from dataflow_core.core.execution.types import RunResult, Status, TargetResult
from dataflow_core.core.history.store import (
    InMemoryHistoryStore,
    JobHistoryStore,
    JobRunRecord,
    JsonHistoryStore,
)
from dataflow_core.core.metric.board import MetricSink
from dataflow_core.core.metric.catalog import MetricSystem
from dataflow_core.core.model.job import Job


class Runner:
    """Executa seleções de targets e jobs de um projeto."""

    def __init__(
        self,
        project: Any,
        *,
        settings: Optional[RuntimeSettings] = None,
        engine: Optional[ComputeEngine] = None,
        history: Optional[JobHistoryStore] = None,
        metrics: Optional[MetricSystem] = None,
        sinks: Sequence[MetricSink] = (),
        oracles: Optional[Mapping[str, ResourceOracle]] = None,
    ) -> None:
        self.project = project
        self.settings = settings if settings is not None else RuntimeSettings()
        self._owns_engine = engine is None
        self.engine = engine if engine is not None else PandasEngine(
            checkpoint_dir=self.settings.checkpoint_dir
        )
        if history is not None:
            self.history: JobHistoryStore = history
        elif self.settings.history_path is not None:
            self.history = JsonHistoryStore(self.settings.history_path)
        else:
            self.history = InMemoryHistoryStore()
        self.metrics = metrics if metrics is not None else MetricSystem()
        self.sinks = list(sinks)
        self.oracles = oracles if oracles is not None else default_oracles()
        self.root = Executor(
            self.project,
            self.engine,
            RunContext.create(config=self.settings.raw),
            self.metrics,
        )

    # ------------------------------------------------------------------
    # Sessão
    # ------------------------------------------------------------------
    def close(self) -> None:
        """
        Encerra a sessão: descarta o cache do Executor raiz e libera o engine.

        Um engine recebido de fora é apenas liberado no escopo raiz; o
        `shutdown()` fica a cargo de quem o criou.
        """
        self.root.cleanup()
        if self._owns_engine and isinstance(self.engine, PandasEngine):
            self.engine.shutdown()

    def __enter__(self) -> "Runner":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Planejamento
    # ------------------------------------------------------------------
    def plan(self, targets: Sequence[Any], phase: Any, *, ctx: Optional[RunContext] = None) -> List[PlanEntry]:
        """Valida requisitos (se habilitado) e produz o plano da fase solicitada."""
        phase = Phase.of_string(phase)
        if self.settings.validate_requirements:
            validate_requirements(targets, phase, oracles=self.oracles, ctx=ctx)
        return plan_lifecycle(targets, phase)

    # ------------------------------------------------------------------
    # Execução de targets
    # ------------------------------------------------------------------
    def _run_entry(self, entry: PlanEntry, executor: Executor) -> TargetResult:
        target_id = str(entry.target.identifier)
        ctx = executor.run_context
        ctx.log(step_id=target_id, level="info", message="phase started", phase=entry.phase.value)

        started = time.perf_counter()
        status = Status.SUCCESS
        try:
            execute_phase(entry.phase, entry.target, executor)
        except DataflowException:
            status = Status.FAILED
            raise
        except Exception as exc:
            status = Status.FAILED
            raise OperationError(
                f"Target '{target_id}' failed in phase {entry.phase}: {exc}",
                details={"target": target_id, "phase": entry.phase.value},
            ) from exc
        finally:
            elapsed = time.perf_counter() - started
            labels = {"target": target_id, "phase": entry.phase.value, "status": status.value}
            self.metrics.counter("target_runs", **labels).increment()
            self.metrics.timer("target_runtime", **labels).observe(elapsed)
            ctx.log(
                step_id=target_id,
                level="info" if status is Status.SUCCESS else "error",
                message=f"phase {status.value}",
                phase=entry.phase.value,
                duration_ms=int(elapsed * 1000),
            )

        return TargetResult(
            target=target_id,
            phase=entry.phase.value,
            status=Status.SUCCESS,
            duration_ms=int(elapsed * 1000),
        )

    def execute_targets(
        self,
        targets: Sequence[Any],
        phase: Any,
        *,
        executor: Optional[Executor] = None,
        ctx: Optional[RunContext] = None,
    ) -> RunResult:
        """
        Planeja e executa os targets para a fase solicitada.

        Quando `executor` não é informado, um escopo filho isolado do
        Executor raiz é criado e liberado ao final.

        Raises:
            CyclicDependencyError, MissingResourceError: antes de qualquer operação.
            DataflowException / OperationError: na primeira falha de execução.
        """
        owns_executor = executor is None
        if executor is None:
            executor = self.root.child(isolated=True, run_context=ctx or RunContext.create())
        ctx = executor.run_context

        try:
            plan = self.plan(targets, phase, ctx=ctx)
            ctx.log(
                step_id="runner",
                level="info",
                message="plan created",
                plan=[f"{e.target.identifier}:{e.phase}" for e in plan],
            )
            results = [self._run_entry(entry, executor) for entry in plan]
        finally:
            if owns_executor:
                executor.cleanup()

        return RunResult(run_id=ctx.run_id, status=Status.SUCCESS, targets=results)

    def build_targets(
        self,
        names: Optional[Sequence[Any]] = None,
        phase: Any = Phase.BUILD,
        *,
        all_targets: bool = False,
    ) -> RunResult:
        """Executa uma seleção avulsa de targets do projeto (sem job)."""
        targets = select_targets(self.project, names, all_targets=all_targets)
        return self.execute_targets(targets, phase)

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------
    def run_job(self, job: Any, phase: Any = Phase.BUILD, args: Optional[Dict[str, Any]] = None) -> RunResult:
        """
        Executa um job numa fase.

        Passos:
            - resolve o job (com parents) e seus argumentos
            - abre um registro no histórico
            - executa os targets do job num escopo filho do Executor raiz
              (isolado ou compartilhado, conforme `executor.isolated`)
            - publica o board de métricas do job nos sinks
            - fecha o registro (SUCCESS/SKIPPED/FAILED)

        Raises:
            InvalidParameterError: antes de abrir o registro no histórico.
            qualquer erro de planejamento/execução, após registrá-lo.
        """
        if not isinstance(job, Job):
            job = self.project.get_job(job)
        phase = Phase.of_string(phase)
        arguments = job.arguments(args)

        environment: Dict[str, Any] = dict(self.project.environment)
        environment.update(job.run_environment(arguments))
        ctx = RunContext.create(
            config=self.settings.raw,
            environment=environment,
            meta={"job": str(job.identifier), "phase": phase.value},
        )
        record = self.history.start_run(
            JobRunRecord(
                run_id=ctx.run_id,
                job=str(job.identifier),
                project=job.project,
                phase=phase.value,
                args={k: str(v) for k, v in arguments.items()},
                config_hash=self.settings.config_hash,
            )
        )

        if job.metrics is not None:
            for sink in self.sinks:
                sink.add_board(job.metrics, self.metrics)

        try:
            targets = [self.project.get_target(t) for t in job.targets]
            if not targets:
                ctx.add_warning(step_id=str(job.identifier), message="job has no targets")
                self.history.finish_run(record.run_id, Status.SKIPPED)
                return RunResult(run_id=ctx.run_id, status=Status.SKIPPED)

            with self.root.child(isolated=self.settings.isolated, run_context=ctx) as executor:
                result = self.execute_targets(targets, phase, executor=executor)
        except Exception as exc:
            payload = exception_to_payload(exc).to_dict()
            ctx.log(step_id=str(job.identifier), level="error", message=payload["message"], error=payload)
            self.history.finish_run(record.run_id, Status.FAILED, error=payload)
            raise
        finally:
            self._commit_metrics(job)

        self.history.finish_run(record.run_id, Status.SUCCESS)
        return result

    def _commit_metrics(self, job: Job) -> None:
        if job.metrics is None:
            return
        for sink in self.sinks:
            sink.commit(job.metrics)
