"""Tests for configuration loading, env overrides and secret handling."""

import json
import os
import stat
from unittest.mock import patch


class TestRouterConfig:
    def test_router_defaults(self):
        from lifelog.common.config import RouterConfig

        cfg = RouterConfig()

        assert cfg.top_k == 10
        assert cfg.degraded_top_k == 50
        assert cfg.max_sources == 10
        assert cfg.context_max_chars == 8000
        assert cfg.timeout_seconds == 10.0
        assert cfg.aggregation_fields["health"] == ["value", "steps"]

    def test_store_defaults(self):
        from lifelog.common.config import StoreConfig

        cfg = StoreConfig()

        assert cfg.user_field == "userId"
        assert cfg.date_field == "createdAt"
        assert cfg.collections["voice"] == "voiceNotes"


class TestLoadConfig:
    def test_load_config_from_file(self, tmp_path):
        from lifelog.common.config import load_config

        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "store": {"project": "demo", "collections": {"voice": "voice_v2"}},
            "vector_index": {"index_name": "personal"},
            "router": {"top_k": 7, "aggregation_fields": {"voice": ["seconds"]}},
        }))

        with patch("lifelog.common.config.CONFIG_PATH", config_file), \
             patch.dict(os.environ, {}, clear=True):
            cfg = load_config()

        assert cfg.store.project == "demo"
        assert cfg.store.collections["voice"] == "voice_v2"
        assert cfg.store.collections["health"] == "healthData"
        assert cfg.vector_index.index_name == "personal"
        assert cfg.router.top_k == 7
        assert cfg.router.aggregation_fields["voice"] == ["seconds"]
        assert cfg.router.aggregation_fields["health"] == ["value", "steps"]

    def test_legacy_pinecone_section(self, tmp_path):
        from lifelog.common.config import load_config

        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"pinecone": {"api_key": "pc-file", "index_name": "old"}}))

        with patch("lifelog.common.config.CONFIG_PATH", config_file), \
             patch.dict(os.environ, {}, clear=True):
            cfg = load_config()

        assert cfg.vector_index.api_key == "pc-file"
        assert cfg.vector_index.index_name == "old"

    def test_malformed_file_falls_back_to_defaults(self, tmp_path):
        from lifelog.common.config import load_config

        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")

        with patch("lifelog.common.config.CONFIG_PATH", config_file), \
             patch.dict(os.environ, {}, clear=True):
            cfg = load_config()

        assert cfg.router.top_k == 10

    def test_env_var_overrides(self, tmp_path):
        from lifelog.common.config import load_config

        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"router": {"top_k": 7}}))

        env = {
            "PINECONE_API_KEY": "pc-env",
            "FIRESTORE_PROJECT": "env-project",
            "LIFELOG_TOP_K": "20",
            "LIFELOG_QUERY_TIMEOUT": "2.5",
        }
        with patch("lifelog.common.config.CONFIG_PATH", config_file), \
             patch.dict(os.environ, env, clear=True):
            cfg = load_config()

        assert cfg.vector_index.api_key == "pc-env"
        assert cfg.store.project == "env-project"
        assert cfg.router.top_k == 20
        assert cfg.router.timeout_seconds == 2.5
        assert "vector_index.api_key" in cfg._env_sourced_keys


class TestSaveConfig:
    def test_save_config_omits_env_keys(self, tmp_path):
        from lifelog.common.config import load_config, save_config

        config_file = tmp_path / "config.json"
        config_file.write_text("{}")

        with patch("lifelog.common.config.CONFIG_PATH", config_file), \
             patch("lifelog.common.config.CONFIG_DIR", tmp_path), \
             patch.dict(os.environ, {"PINECONE_API_KEY": "pc-secret"}, clear=True):
            cfg = load_config()
            save_config(cfg)

        saved = json.loads(config_file.read_text())
        assert saved["vector_index"]["api_key"] == ""
        assert stat.S_IMODE(config_file.stat().st_mode) == 0o600

    def test_save_config_keeps_file_keys(self, tmp_path):
        from lifelog.common.config import LifelogConfig, save_config

        config_file = tmp_path / "config.json"
        cfg = LifelogConfig()
        cfg.vector_index.api_key = "pc-file"

        with patch("lifelog.common.config.CONFIG_PATH", config_file), \
             patch("lifelog.common.config.CONFIG_DIR", tmp_path):
            save_config(cfg)

        saved = json.loads(config_file.read_text())
        assert saved["vector_index"]["api_key"] == "pc-file"
        assert saved["router"]["max_sources"] == 10
