# tests/core/config/test_settings.py
"""
Testes da visão tipada da configuração (`RuntimeSettings`).
"""

from pathlib import Path

import pytest

from dataflow_core.core.config import ConfigError, RuntimeSettings, compute_config_hash


def test_from_config_reads_every_knob():
    settings = RuntimeSettings.from_config(
        {
            "executor": {"isolated": False},
            "scheduler": {"validate_requirements": False},
            "engine": {"checkpoint_dir": "/tmp/ckpt"},
            "history": {"path": "/tmp/runs.json"},
        }
    )

    assert settings.isolated is False
    assert settings.validate_requirements is False
    assert settings.checkpoint_dir == Path("/tmp/ckpt")
    assert settings.history_path == Path("/tmp/runs.json")


def test_defaults_when_sections_are_missing():
    settings = RuntimeSettings.from_config({})

    assert settings.isolated is True
    assert settings.validate_requirements is True
    assert settings.checkpoint_dir is None
    assert settings.history_path is None


def test_load_uses_packaged_defaults(dummy_config):
    settings = RuntimeSettings.load()

    assert settings == RuntimeSettings()
    assert settings.config_hash == compute_config_hash(dummy_config)


def test_non_boolean_flag_is_rejected():
    with pytest.raises(ConfigError):
        RuntimeSettings.from_config({"executor": {"isolated": "no"}})


def test_section_must_be_mapping():
    with pytest.raises(ConfigError):
        RuntimeSettings.from_config({"history": "runs.json"})
