# src/dataflow_core/core/execution/scheduler.py
"""
Scheduler (planner) de targets por recursos físicos.

Este módulo deriva a ordem de execução dos targets a partir dos recursos
que cada target declara fornecer (`provides`) e requerer (`requires`) numa
fase, e expande a fase solicitada no seu lifecycle.

Regra de aresta (por fase):
    A → B  sse algum recurso de `A.provides(phase)` (com partições
           explodidas) contém algum recurso de `B.requires(phase)`

Decisões arquiteturais:
    - Auto-arestas (A → A) são ignoradas
    - Ordenação por variação determinística do algoritmo de Kahn: entre
      targets prontos, vence a ordem de declaração
    - Ciclos levantam `CyclicDependencyError` nomeando todos os targets
      envolvidos (componentes fortemente conexos não triviais, Tarjan)
    - A validação de requisitos ocorre antes de qualquer plano ser
      produzido; recursos não fornecidos podem ser aceitos por um
      `ResourceOracle` da categoria
    - O plano de lifecycle é "fase-major": todos os targets da fase 1,
      depois todos da fase 2, e assim por diante

Invariantes:
    - Nenhum target aparece antes de um provedor seu na mesma fase
    - A mesma entrada sempre produz o mesmo plano
    - Fases de CLEAN nunca incluem fases de DEFAULT

Limites explícitos:
    - Não executa targets (ver `runner`)
    - Não decide políticas de retry/rollback
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from dataflow_core.core.exceptions import CyclicDependencyError, MissingResourceError
from dataflow_core.core.execution.context import RunContext
from dataflow_core.core.execution.oracle import ResourceOracle, default_oracles
from dataflow_core.core.execution.phase import Lifecycle, Phase
from dataflow_core.core.model.resources import ResourceIdentifier


@dataclass(frozen=True)
class PlanEntry:
    """Par (target, fase) de um plano de execução."""

    target: Any
    phase: Phase

    def __str__(self) -> str:
        return f"({self.target.identifier}, {self.phase})"


def _provided(target: Any, phase: Phase) -> List[ResourceIdentifier]:
    exploded: List[ResourceIdentifier] = []
    for resource in sorted(target.provides(phase), key=str):
        exploded.extend(resource.explode_partitions())
    return exploded


def _provides_for(provided: Sequence[ResourceIdentifier], requirement: ResourceIdentifier) -> bool:
    return any(p.contains(requirement) for p in provided)


def dependency_edges(targets: Sequence[Any], phase: Phase) -> Dict[int, Set[int]]:
    """Arestas `provedor → consumidor` entre índices de `targets` para a fase."""
    provided = [_provided(t, phase) for t in targets]
    required = [sorted(t.requires(phase), key=str) for t in targets]

    outgoing: Dict[int, Set[int]] = {i: set() for i in range(len(targets))}
    for consumer, requirements in enumerate(required):
        for provider, resources in enumerate(provided):
            if provider == consumer or not resources:
                continue
            if any(_provides_for(resources, r) for r in requirements):
                outgoing[provider].add(consumer)
    return outgoing


def _strongly_connected(outgoing: Dict[int, Set[int]]) -> List[List[int]]:
    """Componentes fortemente conexos (Tarjan, iterativo)."""
    index: Dict[int, int] = {}
    low: Dict[int, int] = {}
    on_stack: Set[int] = set()
    stack: List[int] = []
    components: List[List[int]] = []
    counter = 0

    for root in sorted(outgoing):
        if root in index:
            continue
        work: List[Tuple[int, Iterable[int]]] = [(root, iter(sorted(outgoing[root])))]
        index[root] = low[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        while work:
            node, children = work[-1]
            advanced = False
            for child in children:
                if child not in index:
                    index[child] = low[child] = counter
                    counter += 1
                    stack.append(child)
                    on_stack.add(child)
                    work.append((child, iter(sorted(outgoing[child]))))
                    advanced = True
                    break
                if child in on_stack:
                    low[node] = min(low[node], index[child])
            if advanced:
                continue
            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])
            if low[node] == index[node]:
                component: List[int] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(sorted(component))
    return components


def plan_phase(targets: Iterable[Any], phase: Any) -> List[Any]:
    """
    Ordena topologicamente os targets para uma única fase.

    Raises:
        CyclicDependencyError: se as arestas da fase formarem um ciclo.
    """
    phase = Phase.of_string(phase)
    target_list = list(targets)
    outgoing = dependency_edges(target_list, phase)

    incoming_count = {i: 0 for i in range(len(target_list))}
    for provider, consumers in outgoing.items():
        for consumer in consumers:
            incoming_count[consumer] += 1

    ready: List[int] = [i for i, c in incoming_count.items() if c == 0]
    order: List[int] = []
    while ready:
        current = ready.pop(0)  # menor índice de declaração
        order.append(current)
        for consumer in sorted(outgoing[current]):
            incoming_count[consumer] -= 1
            if incoming_count[consumer] == 0:
                ready.append(consumer)
                ready.sort()

    if len(order) != len(target_list):
        cyclic = [c for c in _strongly_connected(outgoing) if len(c) > 1]
        names = [str(target_list[i].identifier) for c in cyclic for i in c]
        names = [str(t.identifier) for t in target_list if str(t.identifier) in names]
        raise CyclicDependencyError(
            f"Cyclic dependency between targets in phase {phase}: {', '.join(names)}",
            details={"phase": phase.value, "targets": names},
            hint="Check the provides/requires declarations of the listed targets.",
        )
    return [target_list[i] for i in order]


def plan_lifecycle(targets: Iterable[Any], phase: Any) -> List[PlanEntry]:
    """Plano completo para a fase solicitada: todas as fases do seu grupo até ela."""
    target_list = list(targets)
    plan: List[PlanEntry] = []
    for p in Lifecycle.of_phase(phase):
        plan.extend(PlanEntry(t, p) for t in plan_phase(target_list, p))
    return plan


def validate_requirements(
    targets: Iterable[Any],
    phase: Any,
    *,
    oracles: Optional[Mapping[str, ResourceOracle]] = None,
    ctx: Optional[RunContext] = None,
) -> None:
    """
    Verifica que todo recurso requerido é fornecido ou já existe.

    Um requisito de `T` numa fase do grupo é satisfeito quando:
        - algum outro target selecionado o fornece em alguma fase do grupo, ou
        - o oráculo registrado para a categoria reporta que ele existe.

    Categorias sem oráculo não são verificáveis: o requisito é aceito e um
    warning é registrado no RunContext (se houver).

    Raises:
        MissingResourceError: com a lista de pares (target, recurso) faltantes.
    """
    target_list = list(targets)
    oracles = default_oracles() if oracles is None else oracles
    phases = Lifecycle.of_phase(phase)

    provided: Dict[int, List[ResourceIdentifier]] = {}
    for i, t in enumerate(target_list):
        provided[i] = [r for p in phases for r in _provided(t, p)]

    missing: List[Dict[str, str]] = []
    for i, target in enumerate(target_list):
        seen: Set[ResourceIdentifier] = set()
        for p in phases:
            for requirement in sorted(target.requires(p), key=str):
                if requirement in seen:
                    continue
                seen.add(requirement)
                if any(_provides_for(provided[j], requirement) for j in provided if j != i):
                    continue
                oracle = oracles.get(requirement.category)
                if oracle is None:
                    if ctx is not None:
                        ctx.add_warning(
                            step_id=str(target.identifier),
                            message=f"cannot verify existence of {requirement}",
                        )
                    continue
                if not oracle.exists(requirement):
                    missing.append({"target": str(target.identifier), "resource": str(requirement)})

    if missing:
        listing = ", ".join(f"{m['target']} -> {m['resource']}" for m in missing)
        raise MissingResourceError(
            f"Required resources are neither provided nor existing: {listing}",
            details={"missing": missing},
            hint="Select the targets that provide these resources or create them.",
        )


def select_targets(project: Any, names: Optional[Sequence[Any]] = None, *, all_targets: bool = False) -> List[Any]:
    """
    Seleciona targets do projeto.

    - nomes explícitos → exatamente esses targets, mesmo desabilitados
    - `all_targets=True` → todos, inclusive desabilitados
    - caso contrário → apenas os habilitados
    """
    if names:
        return [project.get_target(n) for n in names]
    if all_targets:
        return list(project.targets)
    return [t for t in project.targets if t.enabled]
