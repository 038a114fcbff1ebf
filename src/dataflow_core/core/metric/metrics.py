# src/dataflow_core/core/metric/metrics.py
"""
Tipos de métricas de observabilidade.

Métricas são contadores vivos produzidos durante a execução (ex.: número de
instanciações de um mapping, duração de uma fase de um target). Elas são
registradas no `MetricSystem` e expostas a boards por seleção de labels.

Tipos:
    - GaugeMetric       → valor numérico atual (abstrato)
    - FixedGaugeMetric  → gauge com valor fixo (snapshot / relabel)
    - CounterMetric     → gauge incrementável
    - TimerMetric       → série de durações (não é gauge)
    - MetricBundle      → agrupamento nomeado de métricas com labels comuns
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


class Metric:
    """Base de todas as métricas: nome + labels + reset."""

    def __init__(self, name: str, labels: Dict[str, str] | None = None) -> None:
        self.name = name
        self.labels: Dict[str, str] = {k: str(v) for k, v in (labels or {}).items()}

    def reset(self) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.labels!r})"


class GaugeMetric(Metric):
    """Métrica com um único valor numérico atual."""

    @property
    def value(self) -> float:
        raise NotImplementedError


class FixedGaugeMetric(GaugeMetric):
    def __init__(self, name: str, labels: Dict[str, str] | None, value: float) -> None:
        super().__init__(name, labels)
        self._value = float(value)

    @property
    def value(self) -> float:
        return self._value

    def reset(self) -> None:
        self._value = 0.0


class CounterMetric(GaugeMetric):
    def __init__(self, name: str, labels: Dict[str, str] | None = None) -> None:
        super().__init__(name, labels)
        self._count = 0.0

    @property
    def value(self) -> float:
        return self._count

    def increment(self, amount: float = 1.0) -> None:
        self._count += amount

    def reset(self) -> None:
        self._count = 0.0


class TimerMetric(Metric):
    """Coleção de durações (segundos). Não é gauge e não pode ser relabelada."""

    def __init__(self, name: str, labels: Dict[str, str] | None = None) -> None:
        super().__init__(name, labels)
        self.durations: List[float] = []

    def observe(self, seconds: float) -> None:
        self.durations.append(float(seconds))

    @property
    def total(self) -> float:
        return sum(self.durations)

    def reset(self) -> None:
        self.durations = []


@dataclass(eq=False)
class MetricBundle:
    """Agrupamento de métricas publicado em conjunto."""

    name: str
    labels: Dict[str, str] = field(default_factory=dict)
    metrics: List[Metric] = field(default_factory=list)

    def add_metric(self, metric: Metric) -> None:
        if metric not in self.metrics:
            self.metrics.append(metric)

    def reset(self) -> None:
        for metric in self.metrics:
            metric.reset()
