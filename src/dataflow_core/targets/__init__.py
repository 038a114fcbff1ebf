# src/dataflow_core/targets/__init__.py
"""
Targets concretos do dataflow-core.

Kinds registrados:
    - relation → materializa um mapping numa relation
    - null     → nó de ordenação sem efeitos
"""

from .null import NullTarget
from .relation import RelationTarget

__all__ = ["NullTarget", "RelationTarget"]
