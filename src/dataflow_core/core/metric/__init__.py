# src/dataflow_core/core/metric/__init__.py
"""
Métricas do dataflow-core.

Componentes:
    - metrics → tipos de métricas (gauge, counter, timer) e bundles
    - catalog → MetricSystem (catálogo vivo) e Selector
    - board   → MetricBoard, seleções estáticas/dinâmicas e protocolo de sink
"""

from .board import (
    CollectingSink,
    DynamicMetricSelection,
    MetricBoard,
    MetricSelection,
    MetricSink,
    StaticMetricSelection,
)
from .catalog import MetricCatalog, MetricSystem, Selector
from .metrics import (
    CounterMetric,
    FixedGaugeMetric,
    GaugeMetric,
    Metric,
    MetricBundle,
    TimerMetric,
)

__all__ = [
    "CollectingSink",
    "CounterMetric",
    "DynamicMetricSelection",
    "FixedGaugeMetric",
    "GaugeMetric",
    "Metric",
    "MetricBoard",
    "MetricBundle",
    "MetricCatalog",
    "MetricSelection",
    "MetricSink",
    "MetricSystem",
    "Selector",
    "StaticMetricSelection",
    "TimerMetric",
]
