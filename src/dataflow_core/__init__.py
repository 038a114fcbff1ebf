# src/dataflow_core/__init__.py
"""
dataflow-core: orquestração de targets e mappings por recursos físicos.

Um projeto declara trabalho de processamento de dados como um grafo de
targets nomeados e mappings (transformações), cada um com conjuntos
declarados de recursos físicos fornecidos/requeridos. O runtime executa
os targets numa ordem correta em relação a esses recursos, através de uma
sequência fixa de fases de ciclo de vida, memoizando artefatos
intermediários compartilhados dentro de uma run.

Arquitetura em alto nível:
    - core.model     → recursos, identificadores, contratos, jobs, projeto
    - core.execution → fases, scheduler, executor, runner, engine adapter
    - core.metric    → catálogo de métricas, boards e sinks
    - core.history   → histórico de runs de jobs
    - core.config    → configuração de runtime (YAML/JSON)
    - mappings / relations / targets → kinds concretos (pandas)

Limites explícitos:
    - Não transforma dados por conta própria (delegado ao compute engine)
    - Não define formato de arquivo de projeto nem CLI
"""

__version__ = "0.1.0"
