# src/dataflow_core/mappings/__init__.py
"""
Mappings concretos do dataflow-core (artefatos: pandas DataFrames).

Kinds registrados: read, alias, distinct, project, aggregate, union.
"""

from .aggregate import AggregateMapping
from .alias import AliasMapping
from .distinct import DistinctMapping
from .project import ProjectMapping
from .read import ReadRelationMapping
from .union import UnionMapping

__all__ = [
    "AggregateMapping",
    "AliasMapping",
    "DistinctMapping",
    "ProjectMapping",
    "ReadRelationMapping",
    "UnionMapping",
]
