# tests/targets/test_relation_target.py
"""
Testes do target "relation" (materializa um mapping numa relation).

Os testes asseguram que:
- os recursos fornecidos/requeridos variam por fase conforme o contrato
- cada fase delega à operação correspondente da relation
- BUILD instancia o mapping via Executor e escreve o resultado

Decisões arquiteturais:
    - Relations em memória, para isolar o target de I/O
"""

import pytest

from dataflow_core.core.execution.executor import Executor
from dataflow_core.core.execution.phase import Phase
from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.project import Project
from dataflow_core.core.model.resources import SimpleResourceIdentifier
from dataflow_core.targets import RelationTarget


@pytest.fixture
def sales(orders_df):
    project = Project("sales")
    project.create_relation("memory", "orders", records=orders_df)
    project.create_relation("memory", "orders_by_year", partitions=["year"])
    project.create_mapping("read", "orders_raw", relation="orders")
    project.create_mapping("distinct", "orders_unique", input="orders_raw")
    project.create_target("relation", "orders_out", relation="orders_by_year", mapping="orders_unique")
    project.create_target("relation", "orders_2021", relation="orders_by_year", mapping="orders_unique",
                          partition={"year": 2021}, mode="append")
    return project


def _memory(name, **partition):
    return SimpleResourceIdentifier("memory", name, partition)


def test_resources_per_phase(sales):
    """
    CREATE/DESTROY usam os recursos da relation; BUILD/TRUNCATE os da partição.

    Invariantes:
        - BUILD requer os recursos dos mappings de leitura upstream
        - MIGRATE não declara recursos
    """
    target = sales.get_target("orders_2021")

    assert target.provides(Phase.CREATE) == {_memory("orders_by_year")}
    assert target.provides(Phase.BUILD) == {_memory("orders_by_year", year="2021")}
    assert target.provides(Phase.TRUNCATE) == {_memory("orders_by_year", year="2021")}
    assert target.provides(Phase.MIGRATE) == set()
    assert target.requires(Phase.BUILD) == {_memory("orders")}
    assert target.requires(Phase.CREATE) == set()


def test_lifecycle_operations(sales):
    executor = Executor(sales)
    target = sales.get_target("orders_out")
    relation = sales.get_relation("orders_by_year")

    target.create(executor)
    assert relation.exists(executor)

    target.build(executor)
    assert len(relation.read(executor)) == 4
    assert executor.run_context.events_for("sales/orders_out")[-1]["rows"] == 4

    target.truncate(executor)
    assert relation.read(executor).empty

    target.destroy(executor)
    assert not relation.exists(executor)


def test_partitioned_build_appends(sales):
    executor = Executor(sales)
    target = sales.get_target("orders_2021")

    target.build(executor)
    target.build(executor)

    df = sales.get_relation("orders_by_year").read(executor, [{"year": "2021"}])
    assert len(df) == 8


def test_target_without_mapping_builds_nothing(sales):
    target = sales.create_target("relation", "orders_table", relation="orders_by_year")

    target.build(Executor(sales))

    assert target.requires(Phase.BUILD) == set()
    assert not sales.get_relation("orders_by_year").exists(None)


def test_unbound_target():
    target = RelationTarget(properties=InstanceProperties(name="loose"), relation="orders")

    with pytest.raises(RuntimeError):
        target.provides(Phase.CREATE)


def test_invalid_mode(sales):
    with pytest.raises(ValueError):
        sales.create_target("relation", "bad", relation="orders", mode="merge")
