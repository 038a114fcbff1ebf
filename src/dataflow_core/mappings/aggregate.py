# src/dataflow_core/mappings/aggregate.py
"""
Mapping "aggregate": agrupamento por dimensões com agregações nomeadas.

Formato das agregações: `{"<coluna de saída>": "<função>(<coluna>)"}`, por
exemplo `{"total": "sum(amount)", "orders": "count(*)"}`. Funções aceitas:
sum, min, max, mean/avg, count, nunique, first, last.

O `filter` opcional é uma expressão `DataFrame.query` aplicada ao
resultado agregado (semântica de HAVING).

Sem dimensões, a agregação é global e produz sempre exatamente uma linha,
mesmo com input vazio: `count` e `nunique` valem 0 e as demais funções
ficam nulas, como em SQL.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from dataflow_core.core.model.identifiers import DEFAULT_OUTPUT, MappingOutputIdentifier
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.mapping import BaseMapping, MappingHints


_EXPRESSION = re.compile(r"^\s*(\w+)\s*\(\s*(\*|[\w.]+)\s*\)\s*$")

_FUNCTIONS = {
    "sum": "sum",
    "min": "min",
    "max": "max",
    "mean": "mean",
    "avg": "mean",
    "count": "count",
    "nunique": "nunique",
    "first": "first",
    "last": "last",
}


def parse_aggregation(expression: str) -> Tuple[str, str]:
    """`"sum(amount)"` → `("amount", "sum")`; `"count(*)"` → `("*", "size")`."""
    match = _EXPRESSION.match(expression)
    if match is None:
        raise ValueError(f"Unsupported aggregation expression: {expression!r}")
    function, column = match.group(1).lower(), match.group(2)
    if function not in _FUNCTIONS:
        raise ValueError(f"Unsupported aggregation function '{function}' in {expression!r}")
    if column == "*":
        if function != "count":
            raise ValueError(f"Only count(*) may use '*', got {expression!r}")
        return "*", "size"
    return column, _FUNCTIONS[function]


@dataclass(eq=False, repr=False)
class AggregateMapping(BaseMapping):
    properties: InstanceProperties
    input: MappingOutputIdentifier
    dimensions: List[str] = field(default_factory=list)
    aggregations: Dict[str, str] = field(default_factory=dict)
    filter: Optional[str] = None
    hints: MappingHints = field(default_factory=MappingHints)

    def __post_init__(self) -> None:
        self.input = MappingOutputIdentifier.parse(self.input)
        if not self.aggregations:
            raise ValueError(f"Mapping '{self.properties.name}' declares no aggregations")
        # valida as expressões na construção
        self._parsed = {name: parse_aggregation(expr) for name, expr in self.aggregations.items()}

    def inputs(self) -> List[MappingOutputIdentifier]:
        return [self.input]

    def execute(self, executor: Any, inputs: Dict[MappingOutputIdentifier, Any]) -> Dict[str, Any]:
        df = inputs[self.input]
        if not self.dimensions and df.empty:
            return {DEFAULT_OUTPUT: self._apply_filter(self._empty_global(df))}
        if self.dimensions:
            grouped = df.groupby(list(self.dimensions), sort=True, dropna=False)
        else:
            grouped = df.assign(_all=0).groupby("_all")

        named = {
            name: pd.NamedAgg(column=column, aggfunc=function)
            for name, (column, function) in self._parsed.items()
            if column != "*"
        }
        sizes = grouped.size()
        result = grouped.agg(**named) if named else pd.DataFrame(index=sizes.index)
        for name, (column, _) in self._parsed.items():
            if column == "*":
                result[name] = sizes
        result = result[list(self._parsed)].reset_index(drop=not self.dimensions)
        return {DEFAULT_OUTPUT: self._apply_filter(result)}

    def _empty_global(self, df: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c, _ in self._parsed.values() if c != "*" and c not in df.columns]
        if missing:
            raise KeyError(f"Columns {missing} not found in input '{self.input}'")
        row = {
            name: 0 if column == "*" or function in ("count", "nunique") else None
            for name, (column, function) in self._parsed.items()
        }
        return pd.DataFrame([row], columns=list(self._parsed))

    def _apply_filter(self, result: pd.DataFrame) -> pd.DataFrame:
        if not self.filter:
            return result
        return result.query(self.filter).reset_index(drop=True)
