# src/dataflow_core/core/model/identifiers.py
"""
Identificadores de entidades do projeto.

Formato textual: `[project/]name`. Para outputs de mappings:
`[project/]name[:output]`, com output padrão `main`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


DEFAULT_OUTPUT = "main"


@dataclass(frozen=True)
class Identifier:
    name: str
    project: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("identifier name must be a non-empty string")

    @classmethod
    def parse(cls, value: "str | Identifier") -> "Identifier":
        if isinstance(value, Identifier):
            return cls(value.name, value.project)
        text = str(value).strip()
        if "/" in text:
            project, name = text.split("/", 1)
            return cls(name, project or None)
        return cls(text)

    def __str__(self) -> str:
        if self.project:
            return f"{self.project}/{self.name}"
        return self.name


@dataclass(frozen=True)
class TargetIdentifier(Identifier):
    pass


@dataclass(frozen=True)
class MappingIdentifier(Identifier):
    pass


@dataclass(frozen=True)
class RelationIdentifier(Identifier):
    pass


@dataclass(frozen=True)
class JobIdentifier(Identifier):
    pass


@dataclass(frozen=True)
class MappingOutputIdentifier:
    """Referência a um output nomeado de um mapping (step id + output)."""

    mapping: MappingIdentifier
    output: str = DEFAULT_OUTPUT

    @classmethod
    def parse(cls, value: "str | MappingOutputIdentifier") -> "MappingOutputIdentifier":
        if isinstance(value, MappingOutputIdentifier):
            return value
        text = str(value).strip()
        output = DEFAULT_OUTPUT
        if ":" in text:
            text, output = text.rsplit(":", 1)
        return cls(MappingIdentifier.parse(text), output or DEFAULT_OUTPUT)

    @property
    def name(self) -> str:
        return self.mapping.name

    @property
    def project(self) -> Optional[str]:
        return self.mapping.project

    def __str__(self) -> str:
        return f"{self.mapping}:{self.output}"
