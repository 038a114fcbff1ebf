# src/dataflow_core/mappings/union.py
"""
Mapping "union": concatena vários outputs.

Colunas ausentes em algum input são preenchidas com nulos; a ordem das
colunas é a da primeira ocorrência. Com `distinct=True` as linhas
duplicadas são removidas após a união.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

from dataflow_core.core.model.identifiers import DEFAULT_OUTPUT, MappingOutputIdentifier
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.mapping import BaseMapping, MappingHints


@dataclass(eq=False, repr=False)
class UnionMapping(BaseMapping):
    properties: InstanceProperties
    input: List[MappingOutputIdentifier] = field(default_factory=list)
    distinct: bool = False
    hints: MappingHints = field(default_factory=MappingHints)

    def __post_init__(self) -> None:
        self.input = [MappingOutputIdentifier.parse(i) for i in self.input]
        if not self.input:
            raise ValueError(f"Mapping '{self.properties.name}' requires at least one input")

    def inputs(self) -> List[MappingOutputIdentifier]:
        return list(self.input)

    def execute(self, executor: Any, inputs: Dict[MappingOutputIdentifier, Any]) -> Dict[str, Any]:
        frames = [inputs[i] for i in self.input]
        df = pd.concat(frames, ignore_index=True, sort=False)
        if self.distinct:
            df = df.drop_duplicates().reset_index(drop=True)
        return {DEFAULT_OUTPUT: df}
