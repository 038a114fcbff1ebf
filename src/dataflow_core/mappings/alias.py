# src/dataflow_core/mappings/alias.py
"""Mapping "alias": expõe um output upstream sob um novo nome, sem copiar dados."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from dataflow_core.core.model.identifiers import DEFAULT_OUTPUT, MappingOutputIdentifier
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.mapping import BaseMapping, MappingHints


@dataclass(eq=False, repr=False)
class AliasMapping(BaseMapping):
    properties: InstanceProperties
    input: MappingOutputIdentifier
    hints: MappingHints = field(default_factory=MappingHints)

    def __post_init__(self) -> None:
        self.input = MappingOutputIdentifier.parse(self.input)

    def inputs(self) -> List[MappingOutputIdentifier]:
        return [self.input]

    def execute(self, executor: Any, inputs: Dict[MappingOutputIdentifier, Any]) -> Dict[str, Any]:
        return {DEFAULT_OUTPUT: inputs[self.input]}
