"""Tests for configuration loading and environment overrides."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from qos_monitor.config.models import AppConfig, EnvSettings, MongoConfig
from qos_monitor.server.cli import load_config


def test_app_config_defaults():
    cfg = AppConfig()
    assert cfg.mongodb == MongoConfig()
    assert cfg.mongodb.rules_collection == "qos_rules"
    assert cfg.default_sample_window == 10
    assert cfg.enabled_profiles == {}


def test_app_config_load_json(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "mongodb": {"connection_string": "mongodb://db1/?replicaSet=rs0", "database": "qos"},
                "default_sample_window": 25,
            }
        )
    )
    cfg = AppConfig.load(path)
    assert cfg.mongodb.connection_string == "mongodb://db1/?replicaSet=rs0"
    assert cfg.mongodb.database == "qos"
    assert cfg.default_sample_window == 25


def test_app_config_rejects_bad_window(tmp_path: Path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"default_sample_window": 0}))
    with pytest.raises(ValidationError):
        AppConfig.load(path)


def test_env_settings_override_file(tmp_path: Path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"mongodb": {"database": "from_file"}}))
    monkeypatch.setenv("QOS_MONITOR_MONGODB_DATABASE", "from_env")
    monkeypatch.setenv("QOS_MONITOR_MONGODB_URI", "mongodb://env-host:27017")
    cfg = load_config(str(path), EnvSettings())
    assert cfg.mongodb.database == "from_env"
    assert cfg.mongodb.connection_string == "mongodb://env-host:27017"


def test_env_settings_config_path(tmp_path: Path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"mongodb": {"database": "via_env_path"}}))
    monkeypatch.setenv("QOS_MONITOR_CONFIG_PATH", str(path))
    cfg = load_config(None, EnvSettings())
    assert cfg.mongodb.database == "via_env_path"


def test_no_overrides_returns_same_config():
    cfg = AppConfig()
    assert EnvSettings(mongodb_uri=None, mongodb_database=None).apply(cfg) is cfg
