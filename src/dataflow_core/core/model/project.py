# src/dataflow_core/core/model/project.py
"""
Projeto: coleção nomeada de mappings, relations, targets e jobs.

O `Project` é o contexto de resolução usado por todo o runtime: o Executor
resolve dependências de mappings através dele, o Scheduler obtém targets e
o Runner obtém jobs (já combinados com seus parents).

Responsabilidades do módulo:
    - Registrar entidades preservando a ordem de declaração
    - Instanciar entidades a partir do kind, via tabelas de registro
    - Resolver identificadores em entidades, com erros explícitos

Decisões arquiteturais:
    - Projetos são montados em Python; não há formato de arquivo de projeto
    - A ordem de declaração é preservada separadamente do armazenamento,
      pois o Scheduler a usa como critério de desempate
    - Identificadores qualificados por outro projeto não são resolvidos
      (não há importação entre projetos)
    - Jobs são combinados com seus parents no momento da resolução

Invariantes:
    - Nomes são únicos por família de entidade
    - `get_*` nunca retorna None: ou resolve, ou levanta `NoSuch*Error`
    - Herança de jobs é acíclica

Limites explícitos:
    - Não executa targets nem mappings
    - Não planeja execução
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from dataflow_core.core.exceptions import (
    CyclicDependencyError,
    NoSuchJobError,
    NoSuchRelationError,
    NoSuchStepError,
    NoSuchTargetError,
)
from dataflow_core.core.model.identifiers import (
    JobIdentifier,
    MappingIdentifier,
    RelationIdentifier,
    TargetIdentifier,
)
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.job import Job


class DuplicateEntityError(ValueError):
    """
    Exceção levantada quando duas entidades da mesma família compartilham nome.

    Decisões arquiteturais:
        - A duplicidade é tratada como erro fatal de montagem do projeto
        - Nenhuma entidade é sobrescrita silenciosamente
    """


class _Table:
    """Tabela nomeada de entidades com ordem de declaração preservada."""

    def __init__(self, family: str) -> None:
        self.family = family
        self._items: Dict[str, Any] = {}

    def add(self, name: str, item: Any) -> None:
        if name in self._items:
            raise DuplicateEntityError(f"Duplicate {self.family}: {name}")
        self._items[name] = item

    def get(self, name: str) -> Optional[Any]:
        return self._items.get(name)

    def names(self) -> List[str]:
        return list(self._items)

    def values(self) -> List[Any]:
        return list(self._items.values())


class Project:
    """
    Projeto de dataflow e contexto de resolução de identificadores.

    Uso:
        project = Project("sales")
        project.create_relation("memory", "orders", records=[...])
        project.create_mapping("read", "orders_raw", relation="orders")
        project.create_target("relation", "orders_out",
                              mapping="orders_raw", relation="orders_copy")
    """

    def __init__(
        self,
        name: str,
        *,
        version: Optional[str] = None,
        description: Optional[str] = None,
        environment: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("project name must be a non-empty string")
        self.name = name
        self.version = version
        self.description = description
        self.environment: Dict[str, Any] = dict(environment or {})
        self._mappings = _Table("mapping")
        self._relations = _Table("relation")
        self._targets = _Table("target")
        self._jobs = _Table("job")

    # -----------------------------
    # Registro
    # -----------------------------
    def add_mapping(self, mapping: Any) -> Any:
        self._mappings.add(mapping.name, mapping)
        return mapping

    def add_relation(self, relation: Any) -> Any:
        self._relations.add(relation.name, relation)
        return relation

    def add_target(self, target: Any) -> Any:
        self._targets.add(target.name, target)
        bind = getattr(target, "bind", None)
        if callable(bind):
            bind(self)
        return target

    def add_job(self, job: Job) -> Job:
        self._jobs.add(job.name, job)
        return job

    def properties(
        self,
        name: str,
        kind: str = "",
        *,
        labels: Optional[Dict[str, str]] = None,
        description: Optional[str] = None,
    ) -> InstanceProperties:
        """`InstanceProperties` de uma entidade pertencente a este projeto."""
        return InstanceProperties(
            name=name,
            kind=kind,
            labels=dict(labels or {}),
            project=self.name,
            description=description,
        )

    def create_mapping(self, kind: str, name: str, *, labels: Optional[Dict[str, str]] = None, **kwargs: Any) -> Any:
        from dataflow_core.kinds import MAPPING_KINDS

        mapping = MAPPING_KINDS.create(kind, properties=self.properties(name, kind, labels=labels), **kwargs)
        return self.add_mapping(mapping)

    def create_relation(self, kind: str, name: str, *, labels: Optional[Dict[str, str]] = None, **kwargs: Any) -> Any:
        from dataflow_core.kinds import RELATION_KINDS

        relation = RELATION_KINDS.create(kind, properties=self.properties(name, kind, labels=labels), **kwargs)
        return self.add_relation(relation)

    def create_target(self, kind: str, name: str, *, labels: Optional[Dict[str, str]] = None, **kwargs: Any) -> Any:
        from dataflow_core.kinds import TARGET_KINDS

        target = TARGET_KINDS.create(kind, properties=self.properties(name, kind, labels=labels), **kwargs)
        return self.add_target(target)

    def create_job(self, name: str, *, labels: Optional[Dict[str, str]] = None, **kwargs: Any) -> Job:
        job = Job(properties=self.properties(name, "job", labels=labels), **kwargs)
        return self.add_job(job)

    # -----------------------------
    # Listagem (ordem de declaração)
    # -----------------------------
    @property
    def mappings(self) -> List[Any]:
        return self._mappings.values()

    @property
    def relations(self) -> List[Any]:
        return self._relations.values()

    @property
    def targets(self) -> List[Any]:
        return self._targets.values()

    @property
    def jobs(self) -> List[Job]:
        return self._jobs.values()

    # -----------------------------
    # Resolução
    # -----------------------------
    def _owns(self, project: Optional[str]) -> bool:
        return project is None or project == self.name

    def get_mapping(self, identifier: Any) -> Any:
        mid = MappingIdentifier.parse(identifier)
        mapping = self._mappings.get(mid.name) if self._owns(mid.project) else None
        if mapping is None:
            raise NoSuchStepError(
                f"Mapping '{mid}' not found in project '{self.name}'",
                details={"mapping": str(mid), "project": self.name},
                hint="Check the mapping name and the inputs that reference it.",
            )
        return mapping

    def get_relation(self, identifier: Any) -> Any:
        rid = RelationIdentifier.parse(identifier)
        relation = self._relations.get(rid.name) if self._owns(rid.project) else None
        if relation is None:
            raise NoSuchRelationError(
                f"Relation '{rid}' not found in project '{self.name}'",
                details={"relation": str(rid), "project": self.name},
            )
        return relation

    def get_target(self, identifier: Any) -> Any:
        tid = TargetIdentifier.parse(identifier)
        target = self._targets.get(tid.name) if self._owns(tid.project) else None
        if target is None:
            raise NoSuchTargetError(
                f"Target '{tid}' not found in project '{self.name}'",
                details={"target": str(tid), "project": self.name},
            )
        return target

    def get_job(self, identifier: Any) -> Job:
        """Retorna o job combinado com todos os seus parents (recursivamente)."""
        return self._resolve_job(JobIdentifier.parse(identifier), [])

    def _resolve_job(self, jid: JobIdentifier, stack: Sequence[str]) -> Job:
        job = self._jobs.get(jid.name) if self._owns(jid.project) else None
        if job is None:
            raise NoSuchJobError(
                f"Job '{jid}' not found in project '{self.name}'",
                details={"job": str(jid), "project": self.name},
            )
        if job.name in stack:
            chain = list(stack) + [job.name]
            raise CyclicDependencyError(
                f"Job inheritance cycle: {' -> '.join(chain)}",
                details={"jobs": chain},
            )
        if not job.parents:
            return job
        parents = [self._resolve_job(p, list(stack) + [job.name]) for p in job.parents]
        return Job.merge(job, parents)

    def __repr__(self) -> str:
        return f"Project({self.name!r})"
