# src/dataflow_core/targets/null.py
"""
Target "null": nó de ordenação sem efeitos.

Declara recursos fornecidos/requeridos (iguais em todas as fases listadas)
apenas para impor ordem entre outros targets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set

from dataflow_core.core.execution.phase import Lifecycle, Phase
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.resources import ResourceIdentifier
from dataflow_core.core.model.target import BaseTarget


@dataclass(eq=False, repr=False)
class NullTarget(BaseTarget):
    properties: InstanceProperties
    provided: List[ResourceIdentifier] = field(default_factory=list)
    required: List[ResourceIdentifier] = field(default_factory=list)
    phases: List[Phase] = field(default_factory=lambda: list(Lifecycle.ALL))
    enabled: bool = True

    def __post_init__(self) -> None:
        self.phases = [Phase.of_string(p) for p in self.phases]

    def provides(self, phase: Phase) -> Set[ResourceIdentifier]:
        return set(self.provided) if phase in self.phases else set()

    def requires(self, phase: Phase) -> Set[ResourceIdentifier]:
        return set(self.required) if phase in self.phases else set()
