# tests/core/execution/test_engine.py
"""
Testes do adapter de compute engine sobre pandas + joblib.
"""

import pandas as pd
import pytest

from dataflow_core.core.execution.engine import PandasEngine


@pytest.fixture
def frame():
    return pd.DataFrame({"a": [1, 2, 3]})


def test_checkpoint_roundtrips_through_joblib(tmp_path, frame):
    engine = PandasEngine(checkpoint_dir=tmp_path)

    restored = engine.checkpoint(frame, scope="s1", name="m:main")

    pd.testing.assert_frame_equal(restored, frame)
    assert engine.checkpoint_path(scope="s1", name="m:main").exists()
    assert engine.checkpoint_path(scope="s1", name="m:main").name == "m_main.joblib"


def test_persist_levels(tmp_path, frame):
    engine = PandasEngine(checkpoint_dir=tmp_path)

    in_memory = engine.persist(frame, "MEMORY_ONLY", scope="s1", name="m")
    on_disk = engine.persist(frame, "DISK_ONLY", scope="s1", name="n")

    assert in_memory is not frame
    pd.testing.assert_frame_equal(on_disk, frame)
    assert engine.materialized("s1") == 3


def test_broadcast_marks_copy(frame, tmp_path):
    marked = PandasEngine(checkpoint_dir=tmp_path).broadcast(frame, scope="s", name="m")

    assert marked.attrs["broadcast"] is True
    assert "broadcast" not in frame.attrs


def test_non_frame_artifacts_are_rejected(tmp_path):
    with pytest.raises(TypeError):
        PandasEngine(checkpoint_dir=tmp_path).persist([1, 2], "MEMORY_ONLY", scope="s", name="m")


def test_release_is_scoped(tmp_path, frame):
    engine = PandasEngine(checkpoint_dir=tmp_path)
    engine.checkpoint(frame, scope="s1", name="m")
    engine.checkpoint(frame, scope="s2", name="m")

    engine.release("s1")

    assert engine.materialized("s1") == 0
    assert engine.materialized("s2") == 1
    assert not (tmp_path / "s1").exists()


def test_shutdown_removes_owned_temp_dir(frame):
    engine = PandasEngine()
    engine.checkpoint(frame, scope="s", name="m")
    directory = engine.checkpoint_dir

    engine.shutdown()

    assert not directory.exists()
