# src/dataflow_core/core/execution/executor.py
"""
Executor: escopo de execução com cache memoizado de artefatos.

O Executor é o "execution context" recebido pelas operações dos targets.
Ele resolve, instancia e memoiza os outputs de mappings, de forma que um
mesmo mapping intermediário é computado no máximo uma vez por escopo,
mesmo quando vários targets o consomem.

Fluxo de `instantiate(mapping)` (primeira chamada no escopo):
    1. para cada dependência declarada, resolver o mapping via projeto
       (`NoSuchStepError`) e validar o nome do output (`NoSuchOutputError`)
    2. instanciar recursivamente cada dependência
    3. chamar `mapping.execute(executor, inputs)`
    4. aplicar hints, nesta ordem: checkpoint → broadcast → persist
    5. armazenar o dicionário de outputs no cache do escopo

Escopos:
    - o Executor raiz é sempre isolado (possui cache próprio)
    - `child(isolated=True)` cria um escopo com cache novo
    - `child(isolated=False)` cria um escopo que compartilha (alias) o
      cache do pai e também o seu escopo no engine
    - `child(run_context=...)` permite que cada run de job registre eventos
      no próprio RunContext, mesmo pendurado num Executor de sessão

Decisões arquiteturais:
    - O cache é indexado pelo identificador do mapping e guarda todos os
      seus outputs juntos
    - Falhas do compute engine (em `execute` ou ao aplicar hints) são
      encapsuladas em `ExternalEngineError` nomeando o mapping
    - `cleanup()` de um escopo isolado descarta o cache e libera o estado
      materializado pelo engine; um escopo compartilhado não libera nada,
      pois o estado pertence ao dono do cache

Invariantes:
    - Duas chamadas a `instantiate` no mesmo cache retornam o mesmo objeto
    - Um escopo isolado nunca enxerga artefatos memoizados pelo pai
    - Execução single-thread; não há locking

Limites explícitos:
    - Não planeja targets
    - Não persiste histórico
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from dataflow_core.core.exceptions import (
    DataflowException,
    ExternalEngineError,
    NoSuchOutputError,
)
from dataflow_core.core.execution.context import RunContext
from dataflow_core.core.execution.engine import ComputeEngine, PandasEngine
from dataflow_core.core.metric.catalog import MetricSystem
from dataflow_core.core.model.identifiers import MappingIdentifier, MappingOutputIdentifier


Cache = Dict[MappingIdentifier, Dict[str, Any]]


class Executor:
    """Escopo de execução (raiz ou filho) com cache de artefatos."""

    def __init__(
        self,
        project: Any,
        engine: Optional[ComputeEngine] = None,
        run_context: Optional[RunContext] = None,
        metrics: Optional[MetricSystem] = None,
        *,
        parent: Optional["Executor"] = None,
        isolated: bool = True,
    ) -> None:
        self.project = project
        self.engine: ComputeEngine = engine if engine is not None else PandasEngine()
        self.run_context = run_context if run_context is not None else RunContext.create()
        self.metrics = metrics if metrics is not None else MetricSystem()
        self.parent = parent
        self.isolated = isolated if parent is not None else True
        if self.isolated:
            self.scope = uuid.uuid4().hex[:12]
            self._cache: Cache = {}
        else:
            self.scope = parent.scope  # type: ignore[union-attr]
            self._cache = parent._cache  # type: ignore[union-attr]

    # -----------------------------
    # Escopos
    # -----------------------------
    def child(self, *, isolated: bool = True, run_context: Optional[RunContext] = None) -> "Executor":
        return Executor(
            self.project,
            self.engine,
            run_context if run_context is not None else self.run_context,
            self.metrics,
            parent=self,
            isolated=isolated,
        )

    @property
    def environment(self) -> Dict[str, Any]:
        return self.run_context.environment

    def cached(self, mapping: Any) -> bool:
        return MappingIdentifier.parse(mapping.identifier) in self._cache

    # -----------------------------
    # Instanciação
    # -----------------------------
    def instantiate(self, mapping: Any) -> Dict[str, Any]:
        """Retorna todos os outputs do mapping, computando-os no máximo uma vez."""
        mid = mapping.identifier
        if mid in self._cache:
            return self._cache[mid]

        inputs: Dict[MappingOutputIdentifier, Any] = {}
        for dep in mapping.inputs():
            inputs[dep] = self.instantiate_output(dep)

        self.run_context.log(
            step_id=str(mid),
            level="info",
            message="instantiating mapping",
            scope=self.scope,
            inputs=[str(d) for d in inputs],
        )
        try:
            outputs = dict(mapping.execute(self, inputs))
        except DataflowException:
            raise
        except Exception as exc:
            raise ExternalEngineError(
                f"Compute engine failed while executing mapping '{mid}': {exc}",
                details={"mapping": str(mid), "exception_class": exc.__class__.__name__},
            ) from exc
        outputs = self._apply_hints(mapping, outputs)

        self._cache[mid] = outputs
        self.metrics.counter("mapping_instantiations", mapping=str(mid)).increment()
        return outputs

    def instantiate_output(self, output: Any) -> Any:
        """Resolve e instancia um único output (`mapping:output`)."""
        moi = MappingOutputIdentifier.parse(output)
        mapping = self.project.get_mapping(moi.mapping)
        if moi.output not in mapping.outputs():
            raise NoSuchOutputError(
                f"Mapping '{moi.mapping}' has no output '{moi.output}'",
                details={
                    "mapping": str(moi.mapping),
                    "output": moi.output,
                    "outputs": list(mapping.outputs()),
                },
            )
        return self.instantiate(mapping)[moi.output]

    def _apply_hints(self, mapping: Any, outputs: Dict[str, Any]) -> Dict[str, Any]:
        hints = mapping.hints
        if not (hints.checkpoint or hints.broadcast or hints.cache_level):
            return outputs

        result: Dict[str, Any] = {}
        for name, artifact in outputs.items():
            label = f"{mapping.identifier}:{name}"
            try:
                if hints.checkpoint:
                    artifact = self.engine.checkpoint(artifact, scope=self.scope, name=label)
                if hints.broadcast:
                    artifact = self.engine.broadcast(artifact, scope=self.scope, name=label)
                if hints.cache_level:
                    artifact = self.engine.persist(
                        artifact, hints.cache_level, scope=self.scope, name=label
                    )
            except DataflowException:
                raise
            except Exception as exc:
                raise ExternalEngineError(
                    f"Compute engine failed while applying hints to '{label}'",
                    details={
                        "mapping": str(mapping.identifier),
                        "output": name,
                        "exception_class": exc.__class__.__name__,
                    },
                ) from exc
            result[name] = artifact
        return result

    # -----------------------------
    # Teardown
    # -----------------------------
    def cleanup(self) -> None:
        if not self.isolated:
            return
        self._cache.clear()
        self.engine.release(self.scope)
        self.run_context.log(step_id="executor", level="debug", message="scope released", scope=self.scope)

    def __enter__(self) -> "Executor":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.cleanup()

    def __repr__(self) -> str:
        kind = "isolated" if self.isolated else "shared"
        return f"Executor(scope={self.scope}, {kind}, cached={len(self._cache)})"
