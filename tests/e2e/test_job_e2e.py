# tests/e2e/test_job_e2e.py
"""
Teste end-to-end: job com relations de arquivo, do BUILD ao DESTROY.

Cenário:
    - `orders_src` (memory) contém os pedidos brutos
    - `orders_landing` copia os pedidos para CSV particionado por ano
    - `customer_totals` lê o landing, agrega por cliente e grava em CSV

O job declara os targets fora de ordem; a ordem de BUILD é derivada apenas
dos recursos (o landing fornece o diretório que o agregado requer).

Invariantes verificados:
    - O plano é fase-major e respeita as dependências de recursos
    - Os arquivos produzidos contêm os dados esperados
    - O histórico registra as runs de BUILD e DESTROY
    - DESTROY remove os diretórios criados

Limites explícitos:
    - Filesystem apenas sob `tmp_path`
"""

import pandas as pd
import pytest

from dataflow_core.core.config.settings import RuntimeSettings
from dataflow_core.core.exceptions import MissingResourceError
from dataflow_core.core.execution.runner import Runner
from dataflow_core.core.execution.types import Status
from dataflow_core.core.metric.board import CollectingSink, DynamicMetricSelection, MetricBoard
from dataflow_core.core.metric.catalog import Selector
from dataflow_core.core.model.project import Project


def _project(tmp_path, orders_df):
    project = Project("sales")
    project.create_relation("memory", "orders_src", records=orders_df)
    project.create_relation("file", "orders_landing", location=tmp_path / "landing", partitions=["year"])
    project.create_relation("file", "customer_totals", location=tmp_path / "totals")

    project.create_mapping("read", "orders_raw", relation="orders_src")
    project.create_mapping("read", "landed", relation="orders_landing")
    project.create_mapping("distinct", "landed_unique", input="landed")
    project.create_mapping(
        "aggregate", "totals", input="landed_unique",
        dimensions=["customer"],
        aggregations={"total": "sum(amount)", "orders": "count(*)"},
    )

    project.create_target("relation", "customer_totals", relation="customer_totals", mapping="totals")
    project.create_target("relation", "orders_landing", relation="orders_landing", mapping="orders_raw")

    project.create_job(
        "daily",
        targets=["customer_totals", "orders_landing"],
        metrics=MetricBoard(
            labels={"job": "daily"},
            selections=[
                DynamicMetricSelection(
                    "rows_built",
                    Selector(name="target_runs", labels={"phase": "build", "status": "success"}),
                    relabel=lambda labels: {"target": labels["target"]},
                )
            ],
        ),
    )
    return project


def test_build_then_destroy(tmp_path, orders_df):
    project = _project(tmp_path, orders_df)
    sink = CollectingSink()
    runner = Runner(project, settings=RuntimeSettings(history_path=tmp_path / "runs.json"), sinks=[sink])

    result = runner.run_job("daily", "build")

    assert result.status is Status.SUCCESS
    assert result.executed == [
        "sales/customer_totals:create",
        "sales/orders_landing:create",
        "sales/customer_totals:migrate",
        "sales/orders_landing:migrate",
        "sales/orders_landing:build",
        "sales/customer_totals:build",
    ]

    assert sorted(p.name for p in (tmp_path / "landing").iterdir()) == ["year=2020", "year=2021"]
    totals = pd.read_csv(tmp_path / "totals" / "part-00000.csv")
    assert totals.to_dict("records") == [
        {"customer": "ana", "total": 15.0, "orders": 2},
        {"customer": "bob", "total": 20.0, "orders": 1},
        {"customer": "carl", "total": 7.5, "orders": 1},
    ]
    assert [m["labels"]["target"] for m in sink.snapshots[0]] == ["sales/orders_landing", "sales/customer_totals"]

    cleaned = runner.run_job("daily", "destroy")

    assert cleaned.executed[-2:] == ["sales/customer_totals:destroy", "sales/orders_landing:destroy"]
    assert not (tmp_path / "landing").exists()
    assert not (tmp_path / "totals").exists()
    assert len(sink.snapshots) == 2
    assert [r.status for r in runner.history.list_runs("sales/daily")] == [Status.SUCCESS, Status.SUCCESS]


def test_missing_upstream_fails_before_any_operation(tmp_path, orders_df):
    """
    Sem o target de landing selecionado, o agregado requer um diretório
    inexistente: a run falha no planejamento e nada é criado.
    """
    project = _project(tmp_path, orders_df)
    project.create_job("totals_only", targets=["customer_totals"])
    runner = Runner(project)

    with pytest.raises(MissingResourceError):
        runner.run_job("totals_only")

    assert not (tmp_path / "totals").exists()
    (record,) = runner.history.list_runs("sales/totals_only")
    assert record.error["type"] == "MISSING_RESOURCE"
