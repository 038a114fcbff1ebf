# src/dataflow_core/kinds.py
"""
Tabelas estáticas de kinds.

Toda entidade instanciável por nome de kind é registrada aqui, na
importação do módulo. Novos kinds de projetos externos são registrados
explicitamente com `MAPPING_KINDS.register(...)` (etc.) antes de montar
o projeto.
"""

from dataflow_core.core.registry import KindRegistry
from dataflow_core.mappings import (
    AggregateMapping,
    AliasMapping,
    DistinctMapping,
    ProjectMapping,
    ReadRelationMapping,
    UnionMapping,
)
from dataflow_core.relations import FileRelation, MemoryRelation, QueryRelation
from dataflow_core.targets import NullTarget, RelationTarget


MAPPING_KINDS = KindRegistry("mapping")
MAPPING_KINDS.register("read", ReadRelationMapping)
MAPPING_KINDS.register("alias", AliasMapping)
MAPPING_KINDS.register("distinct", DistinctMapping)
MAPPING_KINDS.register("project", ProjectMapping)
MAPPING_KINDS.register("aggregate", AggregateMapping)
MAPPING_KINDS.register("union", UnionMapping)

RELATION_KINDS = KindRegistry("relation")
RELATION_KINDS.register("file", FileRelation)
RELATION_KINDS.register("memory", MemoryRelation)
RELATION_KINDS.register("query", QueryRelation)

TARGET_KINDS = KindRegistry("target")
TARGET_KINDS.register("relation", RelationTarget)
TARGET_KINDS.register("null", NullTarget)
