# src/dataflow_core/core/model/job.py
"""
Jobs e parâmetros de job.

Um Job agrupa uma lista de targets, parâmetros tipados e variáveis de
environment, e pode estender outros jobs (parents).

Política de merge (v1):
    - parâmetros → união por nome; o job filho sobrescreve o parent
    - environment → união por chave; o job filho sobrescreve o parent
    - targets → união preservando ordem (parents primeiro, depois o filho)
    - metrics → board do filho, ou o do último parent que declarar um

Invariantes:
    - Após o merge, nomes de parâmetros, chaves de environment e targets
      são únicos
    - O merge é puramente funcional (nenhum job é mutado)

Tipos de parâmetro suportados: string, integer, float, boolean, date,
timestamp. `granularity` arredonda para baixo o valor efetivo: múltiplo
inteiro para integer/float, duração ISO 8601 (ex.: "PT1H", "P1D") para
timestamp, número de dias para date.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from dataflow_core.core.exceptions import InvalidParameterError
from dataflow_core.core.metric.board import MetricBoard
from dataflow_core.core.model.identifiers import JobIdentifier, TargetIdentifier
from dataflow_core.core.model.instance import Instance, InstanceProperties


PARAMETER_TYPES = ("string", "integer", "float", "boolean", "date", "timestamp")

_TRUE = {"true", "1", "yes", "y", "on"}
_FALSE = {"false", "0", "no", "n", "off"}


def _parse_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


@dataclass(frozen=True)
class JobParameter:
    """Parâmetro tipado de um job."""

    name: str
    type: str = "string"
    default: Any = None
    granularity: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.type not in PARAMETER_TYPES:
            raise ValueError(
                f"Unsupported parameter type '{self.type}' for '{self.name}', "
                f"expected one of {list(PARAMETER_TYPES)}"
            )

    def parse(self, value: Any) -> Any:
        """Converte `value` para o tipo do parâmetro e aplica a granularidade."""
        try:
            parsed = self._parse_raw(value)
            return self._apply_granularity(parsed)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(
                f"Invalid value {value!r} for parameter '{self.name}' of type {self.type}",
                details={"parameter": self.name, "type": self.type, "value": str(value)},
            ) from exc

    def _parse_raw(self, value: Any) -> Any:
        if self.type == "string":
            return str(value)
        if self.type == "integer":
            if isinstance(value, bool):
                raise ValueError("boolean is not an integer")
            return int(str(value).strip())
        if self.type == "float":
            return float(value)
        if self.type == "boolean":
            return _parse_boolean(value)
        if self.type == "date":
            if isinstance(value, date) and not isinstance(value, datetime):
                return value
            return pd.Timestamp(value).date()
        ts = pd.Timestamp(value)
        if ts is pd.NaT:
            raise ValueError("timestamp is NaT")
        return ts

    def _apply_granularity(self, value: Any) -> Any:
        if not self.granularity:
            return value
        if self.type == "integer":
            step = int(self.granularity)
            return (value // step) * step
        if self.type == "float":
            step = float(self.granularity)
            return (value // step) * step
        if self.type == "timestamp":
            nanos = pd.Timedelta(self.granularity).value
            return pd.Timestamp((value.value // nanos) * nanos, tz=value.tz)
        if self.type == "date":
            days = pd.Timedelta(self.granularity).days or 1
            ordinal = value.toordinal()
            return date.fromordinal(ordinal - ((ordinal - 1) % days))
        return value


@dataclass
class Job(Instance):
    """
    Job declarado no projeto.

    Campos:
        - properties: metadados comuns (nome, labels, projeto)
        - parameters: lista ordenada de parâmetros tipados
        - environment: variáveis disponíveis para os targets durante a run
        - targets: targets executados pelo job
        - parents: jobs estendidos por este job
        - metrics: board publicado ao final de cada run
    """

    category = "job"

    properties: InstanceProperties
    parameters: List[JobParameter] = field(default_factory=list)
    environment: Dict[str, str] = field(default_factory=dict)
    targets: List[TargetIdentifier] = field(default_factory=list)
    parents: List[JobIdentifier] = field(default_factory=list)
    metrics: Optional[MetricBoard] = None

    def __post_init__(self) -> None:
        self.targets = [TargetIdentifier.parse(t) for t in self.targets]
        self.parents = [JobIdentifier.parse(p) for p in self.parents]

    @property
    def identifier(self) -> JobIdentifier:
        return JobIdentifier(self.properties.name, self.properties.project)

    @property
    def parameter_names(self) -> List[str]:
        return [p.name for p in self.parameters]

    def get_parameter(self, name: str) -> JobParameter:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        raise InvalidParameterError(
            f"Job '{self.identifier}' has no parameter '{name}'",
            details={"job": str(self.identifier), "parameter": name},
        )

    # -----------------------------
    # Argumentos
    # -----------------------------
    def arguments(self, args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Resolve os argumentos efetivos de uma run.

        Raises:
            InvalidParameterError: argumento desconhecido, ausente sem default,
                ou não conversível para o tipo declarado.
        """
        args = dict(args or {})
        unknown = [name for name in args if name not in self.parameter_names]
        if unknown:
            raise InvalidParameterError(
                f"Unknown parameters for job '{self.identifier}': {', '.join(unknown)}",
                details={"job": str(self.identifier), "unknown": unknown},
            )

        result: Dict[str, Any] = {}
        for parameter in self.parameters:
            if parameter.name in args:
                result[parameter.name] = parameter.parse(args[parameter.name])
            elif parameter.default is not None:
                result[parameter.name] = parameter.parse(parameter.default)
            else:
                raise InvalidParameterError(
                    f"Missing value for parameter '{parameter.name}' of job '{self.identifier}'",
                    details={"job": str(self.identifier), "parameter": parameter.name},
                )
        return result

    def run_environment(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Environment da run: environment do job sobrescrito pelos argumentos."""
        env: Dict[str, Any] = dict(self.environment)
        env.update(arguments)
        return env

    # -----------------------------
    # Merge
    # -----------------------------
    @staticmethod
    def merge(job: "Job", parents: Sequence["Job"]) -> "Job":
        """
        Combina um job com seus parents (já resolvidos).

        A ordem de `parents` é relevante: parents posteriores sobrescrevem os
        anteriores e o próprio job sobrescreve todos.
        """
        parameters: Dict[str, JobParameter] = {}
        environment: Dict[str, str] = {}
        targets: List[TargetIdentifier] = []
        metrics: Optional[MetricBoard] = None

        for source in list(parents) + [job]:
            for parameter in source.parameters:
                parameters[parameter.name] = parameter
            environment.update(source.environment)
            for target in source.targets:
                if target not in targets:
                    targets.append(target)
            if source.metrics is not None:
                metrics = source.metrics

        return replace(
            job,
            parameters=list(parameters.values()),
            environment=environment,
            targets=targets,
            parents=list(job.parents),
            metrics=metrics,
        )


def parse_assignments(values: Iterable[str]) -> Dict[str, str]:
    """Converte `["p1=v1", "p2=v2"]` em `{"p1": "v1", "p2": "v2"}`."""
    result: Dict[str, str] = {}
    for item in values:
        if "=" not in item:
            raise InvalidParameterError(
                f"Argument '{item}' is not of the form name=value",
                details={"argument": item},
            )
        key, value = item.split("=", 1)
        result[key.strip()] = value
    return result
