# src/dataflow_core/mappings/read.py
"""
Mapping "read": lê uma relation e expõe o resultado como output `main`.

É o ponto de entrada de dados no grafo de mappings: os recursos requeridos
por todo mapping downstream derivam, em última instância, dos mappings de
leitura (`requires` = recursos da relation na partição lida).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from dataflow_core.core.model.identifiers import DEFAULT_OUTPUT, RelationIdentifier
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.mapping import BaseMapping, MappingHints
from dataflow_core.core.model.resources import ResourceIdentifier


@dataclass(eq=False, repr=False)
class ReadRelationMapping(BaseMapping):
    properties: InstanceProperties
    relation: RelationIdentifier
    partitions: Dict[str, Any] = field(default_factory=dict)
    columns: List[str] = field(default_factory=list)
    hints: MappingHints = field(default_factory=MappingHints)

    def __post_init__(self) -> None:
        self.relation = RelationIdentifier.parse(self.relation)
        self.partitions = {k: str(v) for k, v in self.partitions.items()}

    def requires(self, project: Any) -> Set[ResourceIdentifier]:
        relation = project.get_relation(self.relation)
        return set(relation.resources(self.partitions)) | set(relation.requires())

    def execute(self, executor: Any, inputs: Dict[Any, Any]) -> Dict[str, Any]:
        relation = executor.project.get_relation(self.relation)
        partitions: Optional[List[Dict[str, str]]] = [self.partitions] if self.partitions else None
        df = relation.read(executor, partitions)
        if self.columns:
            df = df[list(self.columns)]
        return {DEFAULT_OUTPUT: df}
