# src/dataflow_core/core/model/target.py
"""
Contrato canônico de Target.

Um Target é a unidade de trabalho declarada do projeto: ele expõe, por fase,
os recursos físicos que fornece e os que requer, e implementa exatamente uma
operação por fase do ciclo de vida.

Responsabilidades de um Target:
    - declarar `provides(phase)` e `requires(phase)` de forma determinística
    - executar a operação de cada fase usando apenas o Executor recebido
    - falhar com exceção (nunca silenciosamente) quando a operação não conclui

Princípios fundamentais:
    - Targets não conhecem o Scheduler nem o Runner
    - Targets não controlam a ordem de execução: ela é derivada dos recursos
    - Conformidade é garantida por duck typing (@runtime_checkable)

Invariantes:
    - Targets são imutáveis após instanciados
    - Existe uma instância por escopo de execução

Limites explícitos:
    - Não contém lógica de planejamento
    - Não define políticas de retry ou rollback
"""

from __future__ import annotations

from typing import Any, Protocol, Set, runtime_checkable

from dataflow_core.core.execution.phase import Phase
from dataflow_core.core.model.identifiers import TargetIdentifier
from dataflow_core.core.model.instance import Instance, InstanceProperties
from dataflow_core.core.model.resources import ResourceIdentifier


@runtime_checkable
class Target(Protocol):
    """
    Contrato mínimo que todo Target deve satisfazer.

    Atributos obrigatórios:
        - identifier: identificador único e estável do target
        - enabled: targets desabilitados só executam quando selecionados
          explicitamente

    Operações:
        - provides(phase) / requires(phase) → conjuntos de ResourceIdentifier
        - create / migrate / build / truncate / destroy (executor)
    """
    identifier: TargetIdentifier
    enabled: bool

    def provides(self, phase: Phase) -> Set[ResourceIdentifier]:
        ...

    def requires(self, phase: Phase) -> Set[ResourceIdentifier]:
        ...

    def create(self, executor: Any) -> None:
        ...

    def migrate(self, executor: Any) -> None:
        ...

    def build(self, executor: Any) -> None:
        ...

    def truncate(self, executor: Any) -> None:
        ...

    def destroy(self, executor: Any) -> None:
        ...


class BaseTarget(Instance):
    """
    Implementação base de Target.

    Fornece conjuntos vazios de recursos e operações sem efeito para todas as
    fases; targets concretos sobrescrevem apenas o que precisam.
    """

    category = "target"
    enabled: bool = True
    context: Any = None

    def __init__(self, properties: InstanceProperties, *, enabled: bool = True) -> None:
        self.properties = properties
        self.enabled = enabled

    def bind(self, context: Any) -> None:
        """Associa o target ao projeto que o resolve (chamado por `Project.add_target`)."""
        self.context = context

    @property
    def identifier(self) -> TargetIdentifier:
        return TargetIdentifier(self.properties.name, self.properties.project)

    def provides(self, phase: Phase) -> Set[ResourceIdentifier]:
        return set()

    def requires(self, phase: Phase) -> Set[ResourceIdentifier]:
        return set()

    def create(self, executor: Any) -> None:
        pass

    def migrate(self, executor: Any) -> None:
        pass

    def build(self, executor: Any) -> None:
        pass

    def truncate(self, executor: Any) -> None:
        pass

    def destroy(self, executor: Any) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.identifier})"
