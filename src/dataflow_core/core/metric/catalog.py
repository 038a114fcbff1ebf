# src/dataflow_core/core/metric/catalog.py
"""
Catálogo vivo de métricas (MetricSystem).

O conteúdo do catálogo muda enquanto o plano executa: targets e mappings
registram contadores à medida que rodam. Consultas (`find_metric`,
`find_bundle`) são sempre avaliadas sobre o estado atual.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Type, TypeVar

from .metrics import CounterMetric, Metric, MetricBundle, TimerMetric


_M = TypeVar("_M", bound=Metric)


@dataclass(frozen=True)
class Selector:
    """
    Seleção de métricas por nome (regex, opcional) e labels.

    Um metric é selecionado quando seu nome casa integralmente com `name`
    (se informado) e quando contém todos os pares de `labels`.
    """

    name: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)

    def matches(self, name: str, labels: Dict[str, str]) -> bool:
        if self.name is not None and re.fullmatch(self.name, name) is None:
            return False
        return all(labels.get(k) == v for k, v in self.labels.items())


class MetricSystem:
    """Catálogo de métricas e bundles ativos."""

    def __init__(self) -> None:
        self._metrics: List[Metric] = []
        self._bundles: List[MetricBundle] = []

    # -----------------------------
    # Registro
    # -----------------------------
    def add_metric(self, metric: Metric) -> None:
        if metric not in self._metrics:
            self._metrics.append(metric)

    def remove_metric(self, metric: Metric) -> None:
        self._metrics = [m for m in self._metrics if m is not metric]

    def add_bundle(self, bundle: MetricBundle) -> None:
        if bundle not in self._bundles:
            self._bundles.append(bundle)

    def remove_bundle(self, bundle: MetricBundle) -> None:
        self._bundles = [b for b in self._bundles if b is not bundle]

    def get_or_create(
        self,
        kind: Type[_M],
        name: str,
        labels: Dict[str, str],
        factory: Optional[Callable[[], _M]] = None,
    ) -> _M:
        """Retorna o metric existente com nome+labels exatos, ou registra um novo."""
        wanted = {k: str(v) for k, v in labels.items()}
        for metric in self._metrics:
            if isinstance(metric, kind) and metric.name == name and metric.labels == wanted:
                return metric
        created = factory() if factory is not None else kind(name, wanted)  # type: ignore[call-arg]
        self.add_metric(created)
        return created

    def counter(self, name: str, **labels: str) -> CounterMetric:
        return self.get_or_create(CounterMetric, name, labels)

    def timer(self, name: str, **labels: str) -> TimerMetric:
        return self.get_or_create(TimerMetric, name, labels)

    # -----------------------------
    # Consulta
    # -----------------------------
    @property
    def metrics(self) -> List[Metric]:
        return list(self._metrics)

    @property
    def bundles(self) -> List[MetricBundle]:
        return list(self._bundles)

    def find_metric(self, selector: Selector) -> List[Metric]:
        return [m for m in self._metrics if selector.matches(m.name, m.labels)]

    def find_bundle(self, selector: Selector) -> List[MetricBundle]:
        return [b for b in self._bundles if selector.matches(b.name, b.labels)]

    def reset(self) -> None:
        for metric in self._metrics:
            metric.reset()
        for bundle in self._bundles:
            bundle.reset()


MetricCatalog = MetricSystem
