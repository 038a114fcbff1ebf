# src/dataflow_core/mappings/distinct.py
"""Mapping "distinct": remove linhas duplicadas (opcionalmente por subconjunto de colunas)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from dataflow_core.core.model.identifiers import DEFAULT_OUTPUT, MappingOutputIdentifier
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.mapping import BaseMapping, MappingHints


@dataclass(eq=False, repr=False)
class DistinctMapping(BaseMapping):
    properties: InstanceProperties
    input: MappingOutputIdentifier
    columns: List[str] = field(default_factory=list)
    hints: MappingHints = field(default_factory=MappingHints)

    def __post_init__(self) -> None:
        self.input = MappingOutputIdentifier.parse(self.input)

    def inputs(self) -> List[MappingOutputIdentifier]:
        return [self.input]

    def execute(self, executor: Any, inputs: Dict[MappingOutputIdentifier, Any]) -> Dict[str, Any]:
        df = inputs[self.input]
        subset = list(self.columns) or None
        return {DEFAULT_OUTPUT: df.drop_duplicates(subset=subset).reset_index(drop=True)}
