# tests/relations/test_file_relation.py
"""
Testes da relation "file" (CSV sob um diretório, com partições `key=value`).

Os testes asseguram que:
- o layout físico segue `<location>/<k>=<v>/part-NNNNN.csv`
- os modos de escrita overwrite, append e error_if_exists são respeitados
- leituras filtram partições e devolvem as colunas de partição
- os recursos fornecidos contêm os recursos de cada partição
- o ciclo de vida (create, truncate, destroy) atua apenas sob a location

Decisões arquiteturais:
    - Toda escrita acontece sob `tmp_path`
"""

import pandas as pd
import pytest

from dataflow_core.core.model.instance import InstanceProperties
from dataflow_core.core.model.resources import of_file
from dataflow_core.relations import FileRelation


def _relation(location, **kwargs):
    return FileRelation(properties=InstanceProperties(name="orders", kind="file"), location=location, **kwargs)


def test_unpartitioned_write_and_read(tmp_path, orders_df):
    relation = _relation(tmp_path / "orders")

    relation.write(None, orders_df)

    assert (tmp_path / "orders" / "part-00000.csv").exists()
    df = relation.read(None)
    assert df["order_id"].tolist() == [1, 2, 3, 3, 4]


def test_write_modes(tmp_path, orders_df):
    """
    overwrite substitui, append acrescenta um novo arquivo, error_if_exists falha.
    """
    relation = _relation(tmp_path / "orders")
    relation.write(None, orders_df)
    relation.write(None, orders_df, mode="append")

    assert len(relation.read(None)) == 10

    relation.write(None, orders_df.head(1), mode="overwrite")
    assert len(relation.read(None)) == 1

    with pytest.raises(FileExistsError):
        relation.write(None, orders_df, mode="error_if_exists")
    with pytest.raises(ValueError):
        relation.write(None, orders_df, mode="upsert")


def test_unpartitioned_write_rejects_partition(tmp_path, orders_df):
    relation = _relation(tmp_path / "orders")

    with pytest.raises(ValueError, match="year"):
        relation.write(None, orders_df, partition={"year": "2020"})

    assert not (tmp_path / "orders").exists()


def test_dynamic_partitioned_write(tmp_path, orders_df):
    relation = _relation(tmp_path / "orders", partitions=["year"])

    relation.write(None, orders_df)

    assert (tmp_path / "orders" / "year=2020" / "part-00000.csv").exists()
    assert (tmp_path / "orders" / "year=2021" / "part-00000.csv").exists()
    stored = pd.read_csv(tmp_path / "orders" / "year=2020" / "part-00000.csv")
    assert "year" not in stored.columns

    df = relation.read(None, [{"year": "2021"}])
    assert df["order_id"].tolist() == [3, 3, 4]
    assert set(df["year"]) == {"2021"}


def test_static_partition_write(tmp_path, orders_df):
    relation = _relation(tmp_path / "orders", partitions=["year"])

    relation.write(None, orders_df, partition={"year": 2030})

    assert len(relation.read(None, [{"year": "2030"}])) == 5
    with pytest.raises(ValueError):
        relation.write(None, orders_df, partition={"month": "01"})


def test_resources(tmp_path):
    relation = _relation(tmp_path / "orders", partitions=["year"])

    (provided,) = relation.provides()
    (partition,) = relation.resources({"year": 2020})

    assert provided == of_file(tmp_path / "orders")
    assert partition.partition == {"year": "2020"}
    assert provided.contains(partition)
    with pytest.raises(ValueError):
        relation.resources({"month": "01"})


def test_lifecycle(tmp_path, orders_df):
    relation = _relation(tmp_path / "orders", partitions=["year"], columns=["order_id"])
    assert not relation.exists(None)

    relation.create(None)
    assert relation.exists(None)
    assert list(relation.read(None).columns) == ["order_id", "year"]

    relation.write(None, orders_df)
    relation.truncate(None, [{"year": "2020"}])
    assert relation.read(None)["year"].unique().tolist() == ["2021"]

    relation.destroy(None)
    assert not (tmp_path / "orders").exists()
