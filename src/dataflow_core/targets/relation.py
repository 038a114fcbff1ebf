# src/dataflow_core/targets/relation.py
"""
Target "relation": materializa o output de um mapping numa relation.

Operações por fase:
    - CREATE   → cria a relation, se ainda não existir
    - MIGRATE  → migra a relation
    - BUILD    → instancia o mapping e escreve o resultado
    - TRUNCATE → remove os dados (da partição, se declarada)
    - DESTROY  → remove a relation

Recursos por fase:
    - CREATE / DESTROY → provides: relation.provides();   requires: relation.requires()
    - BUILD            → provides: relation.resources(partition);
                         requires: recursos requeridos pelo mapping
    - TRUNCATE         → provides: relation.resources(partition)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from dataflow_core.core.execution.phase import Phase
from dataflow_core.core.model.identifiers import MappingOutputIdentifier, RelationIdentifier
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.relation import WRITE_MODES
from dataflow_core.core.model.resources import ResourceIdentifier
from dataflow_core.core.model.target import BaseTarget


@dataclass(eq=False, repr=False)
class RelationTarget(BaseTarget):
    properties: InstanceProperties
    relation: RelationIdentifier
    mapping: Optional[MappingOutputIdentifier] = None
    partition: Dict[str, str] = field(default_factory=dict)
    mode: str = "overwrite"
    enabled: bool = True

    def __post_init__(self) -> None:
        self.relation = RelationIdentifier.parse(self.relation)
        if self.mapping is not None:
            self.mapping = MappingOutputIdentifier.parse(self.mapping)
        self.partition = {k: str(v) for k, v in self.partition.items()}
        if self.mode not in WRITE_MODES:
            raise ValueError(f"Unsupported write mode '{self.mode}', expected one of {list(WRITE_MODES)}")

    def _context(self, executor: Any = None) -> Any:
        context = executor.project if executor is not None else self.context
        if context is None:
            raise RuntimeError(f"Target '{self.identifier}' is not bound to a project")
        return context

    def _relation(self, executor: Any = None) -> Any:
        return self._context(executor).get_relation(self.relation)

    def provides(self, phase: Phase) -> Set[ResourceIdentifier]:
        if phase in (Phase.CREATE, Phase.DESTROY):
            return set(self._relation().provides())
        if phase in (Phase.BUILD, Phase.TRUNCATE):
            return set(self._relation().resources(self.partition))
        return set()

    def requires(self, phase: Phase) -> Set[ResourceIdentifier]:
        if phase in (Phase.CREATE, Phase.DESTROY):
            return set(self._relation().requires())
        if phase is Phase.BUILD and self.mapping is not None:
            context = self._context()
            return set(context.get_mapping(self.mapping.mapping).requires(context))
        return set()

    def create(self, executor: Any) -> None:
        relation = self._relation(executor)
        if not relation.exists(executor):
            relation.create(executor)

    def migrate(self, executor: Any) -> None:
        self._relation(executor).migrate(executor)

    def build(self, executor: Any) -> None:
        if self.mapping is None:
            return
        df = executor.instantiate_output(self.mapping)
        self._relation(executor).write(executor, df, self.partition or None, self.mode)
        executor.run_context.log(
            step_id=str(self.identifier),
            level="info",
            message="relation written",
            relation=str(self.relation),
            rows=int(len(df)),
        )

    def truncate(self, executor: Any) -> None:
        self._relation(executor).truncate(executor, [self.partition] if self.partition else None)

    def destroy(self, executor: Any) -> None:
        self._relation(executor).destroy(executor)
