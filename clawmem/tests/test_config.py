"""Tests for config loading -- file sections, legacy keys and env overrides."""

import json
import os
import pytest
from unittest.mock import patch


ENV_KEYS = [
    "CLAWMEM_WORKER_URL",
    "CLAWMEM_AUTO_CAPTURE",
    "CLAWMEM_AUTO_RECALL",
    "CLAWMEM_DEDUP_CAPACITY",
    "CLAWMEM_FINGERPRINT_LENGTH",
    "CLAWMEM_HOOK_PORT",
    "CLAWMEM_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_defaults(self):
        from clawmem.common.config import ClawMemConfig
        cfg = ClawMemConfig()
        assert cfg.worker.url == "http://127.0.0.1:37778"
        assert cfg.capture.max_per_turn == 3
        assert cfg.capture.min_length == 20
        assert cfg.capture.max_length == 2000
        assert cfg.capture.dedup_capacity == 200
        assert cfg.capture.fingerprint_length == 100
        assert cfg.capture.summary_length == 500
        assert cfg.capture.default_importance == 5
        assert cfg.recall.min_prompt_length == 10
        assert cfg.recall.context_types == []

    def test_missing_file_gives_defaults(self, tmp_path):
        from clawmem.common.config import load_config
        with patch("clawmem.common.config.CONFIG_PATH", tmp_path / "missing.json"):
            cfg = load_config()
        assert cfg.capture.enabled is True
        assert cfg.recall.enabled is True


class TestLoadConfig:
    def test_sections(self, tmp_path):
        from clawmem.common.config import load_config
        config_data = {
            "worker": {"url": "http://worker:9000", "request_timeout": 3.0},
            "capture": {"max_per_turn": 2, "dedup_capacity": 50},
            "recall": {"limit": 8, "context_types": ["decision", "bugfix"]},
            "server": {"port": 40000},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps(config_data))

        with patch("clawmem.common.config.CONFIG_PATH", config_file):
            cfg = load_config()

        assert cfg.worker.url == "http://worker:9000"
        assert cfg.worker.request_timeout == 3.0
        assert cfg.capture.max_per_turn == 2
        assert cfg.capture.dedup_capacity == 50
        assert cfg.recall.limit == 8
        assert cfg.recall.context_types == ["decision", "bugfix"]
        assert cfg.server.port == 40000
        assert cfg.log_level == "DEBUG"

    def test_legacy_plugin_keys(self, tmp_path):
        from clawmem.common.config import load_config
        config_data = {
            "workerUrl": "http://legacy:37778",
            "autoCapture": False,
            "autoRecall": False,
            "maxContextTokens": 1200,
            "captureTypes": ["preference"],
        }
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps(config_data))

        with patch("clawmem.common.config.CONFIG_PATH", config_file):
            cfg = load_config()

        assert cfg.worker.url == "http://legacy:37778"
        assert cfg.capture.enabled is False
        assert cfg.recall.enabled is False
        assert cfg.recall.max_context_tokens == 1200
        assert cfg.recall.context_types == ["preference"]

    def test_broken_file_falls_back(self, tmp_path):
        from clawmem.common.config import load_config
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")

        with patch("clawmem.common.config.CONFIG_PATH", config_file):
            cfg = load_config()

        assert cfg.worker.url == "http://127.0.0.1:37778"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        from clawmem.common.config import load_config
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"worker": {"url": "http://file:1"}}))
        monkeypatch.setenv("CLAWMEM_WORKER_URL", "http://env:2")
        monkeypatch.setenv("CLAWMEM_AUTO_CAPTURE", "false")
        monkeypatch.setenv("CLAWMEM_DEDUP_CAPACITY", "10")
        monkeypatch.setenv("CLAWMEM_FINGERPRINT_LENGTH", "64")
        monkeypatch.setenv("CLAWMEM_HOOK_PORT", "41000")

        with patch("clawmem.common.config.CONFIG_PATH", config_file):
            cfg = load_config()

        assert cfg.worker.url == "http://env:2"
        assert cfg.capture.enabled is False
        assert cfg.capture.dedup_capacity == 10
        assert cfg.capture.fingerprint_length == 64
        assert cfg.server.port == 41000


class TestSaveConfig:
    def test_round_trip_and_permissions(self, tmp_path):
        from clawmem.common.config import ClawMemConfig, load_config, save_config
        config_file = tmp_path / "config.json"
        cfg = ClawMemConfig()
        cfg.recall.context_types = ["decision"]
        cfg.capture.max_per_turn = 4

        with patch("clawmem.common.config.CONFIG_DIR", tmp_path), \
             patch("clawmem.common.config.CONFIG_PATH", config_file):
            save_config(cfg)
            loaded = load_config()

        assert loaded.recall.context_types == ["decision"]
        assert loaded.capture.max_per_turn == 4
        assert oct(os.stat(config_file).st_mode & 0o777) == "0o600"

    def test_save_creates_config_dir(self, tmp_path):
        from clawmem.common.config import ClawMemConfig, save_config
        config_dir = tmp_path / "nested" / ".clawmem"
        config_file = config_dir / "config.json"

        with patch("clawmem.common.config.CONFIG_DIR", config_dir), \
             patch("clawmem.common.config.CONFIG_PATH", config_file):
            save_config(ClawMemConfig())

        assert config_file.exists()


class TestEnsureDirectories:
    def test_creates_config_dir(self, tmp_path):
        from clawmem.common.config import ensure_directories
        config_dir = tmp_path / ".clawmem"

        with patch("clawmem.common.config.CONFIG_DIR", config_dir):
            ensure_directories()
            ensure_directories()

        assert config_dir.is_dir()
