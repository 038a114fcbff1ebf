# src/dataflow_core/core/model/__init__.py
"""
Modelo de domínio: recursos físicos, identificadores, contratos de
Target/Mapping/Relation, jobs e projeto.
"""
