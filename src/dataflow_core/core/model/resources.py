# src/dataflow_core/core/model/resources.py
"""
Identificadores de recursos físicos.

Este módulo define o `ResourceIdentifier`, o endereço tipado e comparável de
um recurso físico (arquivo, diretório, tabela, partição) produzido ou
consumido por um target durante uma fase do ciclo de vida.

ResourceIdentifiers são a base da ordenação de targets: o Scheduler cria uma
aresta A → B sempre que um recurso fornecido por A contém um recurso
requerido por B.

Variantes de matching:
    - SimpleResourceIdentifier    → igualdade exata do nome
    - GlobbingResourceIdentifier  → glob de caminhos sobre o nome (`*` e `?`
      não atravessam `/`, `[...]` e alternativas `{a,b}`)
    - RegexResourceIdentifier     → expressão regular sobre o nome

Invariantes:
    - `contains` exige categoria idêntica
    - Um recurso contém outro apenas se todas as chaves da *sua* partição
      existem com o mesmo valor na partição do outro (o container pode ser
      mais grosso)
    - Identificadores são imutáveis; `with_partition` produz uma cópia

Limites explícitos:
    - Não verifica existência física do recurso (ver `ResourceOracle`)
    - Não realiza I/O
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from functools import lru_cache
from itertools import combinations
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple


_GLOB_WILDCARD = re.compile(r"[*?\[{]")


def expand_braces(pattern: str) -> List[str]:
    """
    Expande alternativas `{a,b}` (aninháveis) de um padrão glob.

    `data/{2016,2017}/x` → [`data/2016/x`, `data/2017/x`]. Chaves sem par
    são mantidas literalmente.
    """
    depth = 0
    start = 0
    cuts: List[int] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "{":
            if depth == 0:
                start, cuts = i, []
            depth += 1
        elif c == "," and depth == 1:
            cuts.append(i)
        elif c == "}" and depth:
            depth -= 1
            if depth == 0:
                head, tail = pattern[:start], pattern[i + 1:]
                bounds = [start] + cuts + [i]
                expanded: List[str] = []
                for lo, hi in zip(bounds, bounds[1:]):
                    expanded.extend(expand_braces(head + pattern[lo + 1:hi] + tail))
                return expanded
        i += 1
    return [pattern]


def _class_end(pattern: str, start: int) -> int:
    """Posição do `]` que fecha a classe aberta em `start` (um `]` inicial é literal)."""
    first = start + 1
    if pattern[first:first + 1] in ("!", "^"):
        first += 1
    return pattern.find("]", first + 1)


def _translate_glob(pattern: str) -> str:
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if c == "*":
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[" and _class_end(pattern, i) != -1:
            end = _class_end(pattern, i)
            body = pattern[i + 1:end]
            negate = body[0] in "!^"
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\").replace("[", "\\[")
            out.append(("[^" if negate else "[") + body + "]")
            i = end + 1
            continue
        else:
            out.append(re.escape(c))
        i += 1
    return "".join(out)


@lru_cache(maxsize=None)
def _glob_regex(pattern: str) -> "re.Pattern[str]":
    alternatives = [_translate_glob(p) for p in expand_braces(pattern)]
    return re.compile("|".join(f"(?:{a})" for a in alternatives), flags=re.DOTALL)


@dataclass(frozen=True, eq=False)
class ResourceIdentifier:
    """
    Endereço tipado de um recurso físico, possivelmente particionado.

    Campos:
        - category: tipo do recurso (ex.: "file", "hiveTable", "jdbcTable")
        - name: nome ou padrão do recurso
        - partition: mapa ordenado chave → valor da partição

    Igualdade e hash consideram a variante, a categoria, o nome e o conjunto
    de pares da partição (independente de ordem).
    """

    category: str
    name: str
    partition: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "partition",
            {str(k): str(v) for k, v in dict(self.partition or {}).items()},
        )

    # -----------------------------
    # Identidade
    # -----------------------------
    def _key(self) -> Tuple[Any, ...]:
        return (
            type(self).__name__,
            self.category,
            self.name,
            frozenset(self.partition.items()),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceIdentifier):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        if not self.partition:
            return f"{self.category}:{self.name}"
        parts = ",".join(f"{k}={v}" for k, v in self.partition.items())
        return f"{self.category}:{self.name}[{parts}]"

    @property
    def is_empty(self) -> bool:
        return not self.name

    @property
    def non_empty(self) -> bool:
        return bool(self.name)

    # -----------------------------
    # Operações
    # -----------------------------
    def with_partition(self, partition: Mapping[str, str]) -> "ResourceIdentifier":
        """Retorna uma cópia deste recurso com outra partição."""
        return replace(self, partition=dict(partition))

    def explode_partitions(self) -> List["ResourceIdentifier"]:
        """
        Cria um identificador para cada subconjunto das chaves de partição.

        Para n chaves são produzidos 2^n identificadores, incluindo o de
        partição vazia. Cada variante mantém apenas as chaves do subconjunto,
        na ordem original. A ordem da lista é determinística: por tamanho do
        subconjunto e, dentro do mesmo tamanho, pela ordem das chaves.

        Isso permite que um target que fornece um recurso em partições finas
        também seja associado a requisitos mais grossos.
        """
        keys = list(self.partition.keys())
        result: List[ResourceIdentifier] = []
        for size in range(len(keys) + 1):
            for subset in combinations(keys, size):
                result.append(
                    self.with_partition({k: self.partition[k] for k in subset})
                )
        return result

    def contains(self, other: "ResourceIdentifier") -> bool:
        """
        Retorna True se este recurso é igual ao outro ou se descreve um
        recurso que efetivamente contém o outro.
        """
        return (
            self.category == other.category
            and self._contains_name(other)
            and self._contains_partition(other)
        )

    def _contains_name(self, other: "ResourceIdentifier") -> bool:
        return self.name == other.name

    def _contains_partition(self, other: "ResourceIdentifier") -> bool:
        return all(
            k in other.partition and other.partition[k] == v
            for k, v in self.partition.items()
        )


@dataclass(frozen=True, eq=False)
class SimpleResourceIdentifier(ResourceIdentifier):
    """Variante mais simples: match exato do nome do recurso."""


@dataclass(frozen=True, eq=False)
class GlobbingResourceIdentifier(ResourceIdentifier):
    """
    Variante com matching por globbing de caminhos.

    `*` casa qualquer sequência sem `/`, `?` um caractere diferente de `/`,
    `[...]` uma classe (`[!...]` negada) e `{a,b}` qualquer das alternativas.

    Globbing só faz sentido para recursos baseados em arquivos; para outros
    tipos use `SimpleResourceIdentifier` ou `RegexResourceIdentifier`.
    """

    @property
    def has_wildcard(self) -> bool:
        return bool(_GLOB_WILDCARD.search(self.name))

    def _contains_name(self, other: ResourceIdentifier) -> bool:
        if self.name == other.name:
            return True
        if self.has_wildcard:
            return _glob_regex(self.name).fullmatch(other.name) is not None
        return False


@dataclass(frozen=True, eq=False)
class RegexResourceIdentifier(ResourceIdentifier):
    """Variante com matching por expressão regular (útil para nomes de tabela)."""

    def _contains_name(self, other: ResourceIdentifier) -> bool:
        if self.name == other.name:
            return True
        return re.fullmatch(self.name, other.name, flags=re.DOTALL) is not None


# ---------------------------------------------------------------------
# Fábricas
# ---------------------------------------------------------------------

def _fq_table(table: str, database: Optional[str]) -> str:
    return f"{database}.{table}" if database else table


def _stringify(partition: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    return {k: str(v) for k, v in (partition or {}).items()}


def of_file(path: Any) -> GlobbingResourceIdentifier:
    return GlobbingResourceIdentifier("file", str(path))


def of_local(path: Any) -> GlobbingResourceIdentifier:
    if isinstance(path, Path):
        return GlobbingResourceIdentifier("local", path.absolute().as_uri())
    return GlobbingResourceIdentifier("local", str(path))


def of_hive_database(database: str) -> RegexResourceIdentifier:
    return RegexResourceIdentifier("hiveDatabase", database)


def of_hive_table(table: str, database: Optional[str] = None) -> RegexResourceIdentifier:
    return RegexResourceIdentifier("hiveTable", _fq_table(table, database))


def of_hive_partition(
    table: str,
    database: Optional[str],
    partition: Mapping[str, Any],
) -> RegexResourceIdentifier:
    return RegexResourceIdentifier(
        "hiveTablePartition", _fq_table(table, database), _stringify(partition)
    )


def of_jdbc_database(database: str) -> RegexResourceIdentifier:
    return RegexResourceIdentifier("jdbcDatabase", database)


def of_jdbc_table(table: str, database: Optional[str] = None) -> RegexResourceIdentifier:
    return RegexResourceIdentifier("jdbcTable", _fq_table(table, database))


def of_jdbc_table_partition(
    table: str,
    database: Optional[str],
    partition: Mapping[str, Any],
) -> RegexResourceIdentifier:
    return RegexResourceIdentifier(
        "jdbcTable", _fq_table(table, database), _stringify(partition)
    )


def of_url(url: str) -> RegexResourceIdentifier:
    return RegexResourceIdentifier("url", url)
