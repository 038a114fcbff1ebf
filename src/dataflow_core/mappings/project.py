# src/dataflow_core/mappings/project.py
"""
Mapping "project": seleciona (e opcionalmente renomeia) colunas.

`columns` aceita nomes simples ou pares `{"name": ..., "column": ...}`
quando a coluna de saída tem nome diferente da coluna de entrada.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from dataflow_core.core.model.identifiers import DEFAULT_OUTPUT, MappingOutputIdentifier
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.mapping import BaseMapping, MappingHints


ColumnSpec = Union[str, Dict[str, str]]


def _column_pair(spec: ColumnSpec) -> Tuple[str, str]:
    if isinstance(spec, str):
        return spec, spec
    source = spec.get("column") or spec["name"]
    return source, spec["name"]


@dataclass(eq=False, repr=False)
class ProjectMapping(BaseMapping):
    properties: InstanceProperties
    input: MappingOutputIdentifier
    columns: List[ColumnSpec] = field(default_factory=list)
    hints: MappingHints = field(default_factory=MappingHints)

    def __post_init__(self) -> None:
        self.input = MappingOutputIdentifier.parse(self.input)
        if not self.columns:
            raise ValueError(f"Mapping '{self.properties.name}' must project at least one column")

    def inputs(self) -> List[MappingOutputIdentifier]:
        return [self.input]

    def execute(self, executor: Any, inputs: Dict[MappingOutputIdentifier, Any]) -> Dict[str, Any]:
        pairs = [_column_pair(c) for c in self.columns]
        df = inputs[self.input][[source for source, _ in pairs]]
        df = df.rename(columns={source: target for source, target in pairs if source != target})
        return {DEFAULT_OUTPUT: df}
