# src/dataflow_core/core/metric/board.py
"""
MetricBoard: seleção dinâmica de métricas para publicação.

Um board é uma coleção de seleções publicadas em conjunto para um ou mais
sinks. As seleções são reavaliadas contra o catálogo a cada chamada, pois o
conjunto de métricas ativas muda durante a execução do plano.

Decisões arquiteturais:
    - `metrics()` e `bundles()` nunca são cacheados
    - Seleções dinâmicas podem re-rotular gauges, expondo-os sob o nome da
      própria seleção
    - `reset()` zera valores, sem remover métricas do catálogo

Limites explícitos:
    - Não implementa backends de publicação (apenas o protocolo `MetricSink`)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Protocol, Sequence

from dataflow_core.core.exceptions import UnsupportedMetricTypeError

from .catalog import MetricSystem, Selector
from .metrics import FixedGaugeMetric, GaugeMetric, Metric, MetricBundle


Relabel = Callable[[Dict[str, str]], Dict[str, str]]


def _identity(labels: Dict[str, str]) -> Dict[str, str]:
    return dict(labels)


class MetricSelection:
    """Conjunto possivelmente dinâmico de métricas de um board."""

    name: str

    def metrics(self, catalog: MetricSystem) -> List[Metric]:
        raise NotImplementedError

    def bundles(self, catalog: MetricSystem) -> List[MetricBundle]:
        raise NotImplementedError


@dataclass
class StaticMetricSelection(MetricSelection):
    """Seleciona o metric e o bundle de nome e labels exatos."""

    name: str
    labels: Dict[str, str] = field(default_factory=dict)

    def metrics(self, catalog: MetricSystem) -> List[Metric]:
        return [m for m in catalog.metrics if m.name == self.name and m.labels == self.labels]

    def bundles(self, catalog: MetricSystem) -> List[MetricBundle]:
        return [b for b in catalog.bundles if b.name == self.name and b.labels == self.labels]


@dataclass
class DynamicMetricSelection(MetricSelection):
    """
    Seleção por `Selector` com relabel opcional.

    Cada gauge encontrado é exposto como `FixedGaugeMetric(self.name,
    relabel(gauge.labels), gauge.value)`; qualquer outro tipo de metric
    levanta `UnsupportedMetricTypeError`.
    """

    name: str
    selector: Selector
    labels: Dict[str, str] = field(default_factory=dict)
    relabel: Relabel = _identity

    def metrics(self, catalog: MetricSystem) -> List[Metric]:
        return [self._relabel_metric(m) for m in catalog.find_metric(self.selector)]

    def bundles(self, catalog: MetricSystem) -> List[MetricBundle]:
        return catalog.find_bundle(self.selector)

    def _relabel_metric(self, metric: Metric) -> Metric:
        if isinstance(metric, GaugeMetric):
            labels = dict(self.labels)
            labels.update(self.relabel(dict(metric.labels)))
            return FixedGaugeMetric(self.name, labels, metric.value)
        raise UnsupportedMetricTypeError(
            f"Metric of type {type(metric).__name__} not supported",
            details={"selection": self.name, "metric": metric.name},
        )


@dataclass
class MetricBoard:
    """Coleção de seleções publicadas em conjunto."""

    labels: Dict[str, str] = field(default_factory=dict)
    selections: Sequence[MetricSelection] = field(default_factory=list)

    def metrics(self, catalog: MetricSystem) -> List[Metric]:
        result: List[Metric] = []
        for selection in self.selections:
            result.extend(selection.metrics(catalog))
        return result

    def bundles(self, catalog: MetricSystem) -> List[MetricBundle]:
        result: List[MetricBundle] = []
        for selection in self.selections:
            result.extend(selection.bundles(catalog))
        return result

    def reset(self, catalog: MetricSystem) -> None:
        """Zera os valores atuais dos metrics/bundles do catálogo casados pelas seleções."""
        for selection in self.selections:
            if isinstance(selection, DynamicMetricSelection):
                originals = catalog.find_metric(selection.selector)
            else:
                originals = selection.metrics(catalog)
            for metric in originals:
                metric.reset()
            for bundle in selection.bundles(catalog):
                bundle.reset()


class MetricSink(Protocol):
    def add_board(self, board: MetricBoard, catalog: MetricSystem) -> None:
        ...

    def commit(self, board: MetricBoard) -> None:
        ...


class CollectingSink:
    """Sink em memória: guarda snapshots (nome, labels, valor) de cada commit."""

    def __init__(self) -> None:
        self._boards: List[tuple] = []
        self.snapshots: List[List[Dict[str, object]]] = []

    def add_board(self, board: MetricBoard, catalog: MetricSystem) -> None:
        if any(registered is board for registered, _ in self._boards):
            return
        self._boards.append((board, catalog))

    def commit(self, board: MetricBoard) -> None:
        for registered, catalog in self._boards:
            if registered is not board:
                continue
            snapshot: List[Dict[str, object]] = []
            for metric in board.metrics(catalog):
                labels = dict(board.labels)
                labels.update(metric.labels)
                value = metric.value if isinstance(metric, GaugeMetric) else None
                snapshot.append({"name": metric.name, "labels": labels, "value": value})
            self.snapshots.append(snapshot)
