# tests/core/model/test_identifiers.py
"""
Testes de parsing dos identificadores de entidades (`[project/]name[:output]`).
"""

import pytest

from dataflow_core.core.model.identifiers import (
    MappingIdentifier,
    MappingOutputIdentifier,
    TargetIdentifier,
)


def test_parse_plain_and_qualified_names():
    assert TargetIdentifier.parse("orders") == TargetIdentifier("orders")
    assert TargetIdentifier.parse("sales/orders") == TargetIdentifier("orders", "sales")
    assert str(TargetIdentifier("orders", "sales")) == "sales/orders"


def test_output_defaults_to_main():
    moi = MappingOutputIdentifier.parse("sales/orders_raw")

    assert moi.mapping == MappingIdentifier("orders_raw", "sales")
    assert moi.output == "main"
    assert str(moi) == "sales/orders_raw:main"


def test_explicit_output():
    moi = MappingOutputIdentifier.parse("split:errors")

    assert moi.name == "split"
    assert moi.project is None
    assert moi.output == "errors"


def test_parse_is_idempotent():
    moi = MappingOutputIdentifier.parse("a:b")

    assert MappingOutputIdentifier.parse(moi) is moi
    assert TargetIdentifier.parse(TargetIdentifier("t")) == TargetIdentifier("t")


def test_empty_name_is_rejected():
    with pytest.raises(ValueError):
        TargetIdentifier.parse("   ")
