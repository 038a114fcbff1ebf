# src/dataflow_core/relations/__init__.py
"""
Relations concretas do dataflow-core.

Kinds registrados:
    - file   → CSV sob um diretório (partições `key=value`)
    - memory → tabela local ao processo
    - query  → relation somente-leitura derivada de uma função
"""

from .file import FileRelation
from .memory import MemoryRelation
from .query import QueryRelation

__all__ = ["FileRelation", "MemoryRelation", "QueryRelation"]
