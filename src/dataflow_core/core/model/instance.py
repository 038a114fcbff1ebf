# src/dataflow_core/core/model/instance.py
"""
Propriedades comuns de entidades do projeto.

Targets, mappings, relations e jobs compartilham um mesmo conjunto de
metadados (nome, kind, labels, projeto). Em vez de compor esses metadados
por camadas de herança, cada entidade embute por valor uma única estrutura
`InstanceProperties` e expõe apenas a interface estreita de leitura abaixo.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class InstanceProperties:
    """Metadados imutáveis de uma entidade do projeto."""

    name: str
    kind: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    project: Optional[str] = None
    namespace: Optional[str] = None
    description: Optional[str] = None

    def metadata(self, *, category: str) -> Dict[str, Any]:
        return {
            "namespace": self.namespace,
            "project": self.project,
            "name": self.name,
            "category": category,
            "kind": self.kind,
            "labels": dict(self.labels),
        }


class Instance:
    """Interface de leitura sobre `InstanceProperties` (mixin)."""

    category: str = ""
    properties: InstanceProperties

    @property
    def name(self) -> str:
        return self.properties.name

    @property
    def kind(self) -> str:
        return self.properties.kind

    @property
    def labels(self) -> Dict[str, str]:
        return dict(self.properties.labels)

    @property
    def project(self) -> Optional[str]:
        return self.properties.project

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.properties.metadata(category=self.category)
