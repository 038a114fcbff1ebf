# src/dataflow_core/core/execution/__init__.py
"""
Execução: fases e lifecycles, scheduler, executor (cache memoizado),
adapter do compute engine e runner de planos/jobs.

Componentes:
    - phase     → Phase, Lifecycle, execute_phase
    - scheduler → plan_phase, plan_lifecycle, validate_requirements
    - executor  → Executor (escopos isolados/compartilhados)
    - runner    → Runner (execução de targets e jobs)
"""
