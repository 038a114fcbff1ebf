# tests/targets/test_null_target.py
"""
Testes do target "null" (nó de ordenação sem efeitos).
"""

from dataflow_core.core.execution.phase import Phase
from dataflow_core.core.execution.scheduler import plan_phase
from dataflow_core.core.model.project import Project
from dataflow_core.core.model.resources import of_hive_table


def test_declared_phases_only():
    project = Project("sales")
    table = of_hive_table("orders", "sales")
    target = project.create_target("null", "barrier", provided=[table], phases=["build"])

    assert target.provides(Phase.BUILD) == {table}
    assert target.provides(Phase.CREATE) == set()
    assert target.requires(Phase.BUILD) == set()


def test_orders_other_targets():
    project = Project("sales")
    table = of_hive_table("orders", "sales")
    consumer = project.create_target("null", "consumer", required=[table])
    producer = project.create_target("null", "producer", provided=[table])

    assert plan_phase([consumer, producer], Phase.BUILD) == [producer, consumer]
