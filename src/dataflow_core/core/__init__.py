# src/dataflow_core/core/__init__.py
"""
Core do dataflow-core.

Componentes principais:
    - model     → ResourceIdentifier, identificadores, Target/Mapping/Relation,
                  Job e Project
    - execution → Phase/Lifecycle, Scheduler, Executor, Runner
    - metric    → MetricSystem, MetricBoard
    - history   → JobRunRecord e stores
    - config    → RuntimeSettings
    - errors / exceptions → taxonomia de erros e payloads serializáveis

Princípios fundamentais:
    - A ordem de execução é derivada de recursos, nunca declarada à mão
    - Nenhum estado global: cada run carrega seu próprio contexto
"""
