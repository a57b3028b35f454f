"""Tests für das Konfigurationssystem."""

import pytest
from pydantic import ValidationError

from config.defaults import (
    ALL_COLLECTIONS,
    SUGGESTED_ACTIONS,
    default_engine_config,
    default_workload_thresholds,
)
from config.manager import ConfigManager
from config.schema import (
    ConflictConfig,
    EngineConfig,
    GroupBalanceConfig,
    LoggingConfig,
    StoreBackend,
    WorkloadThresholds,
)


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_thresholds(self):
        t = default_workload_thresholds()
        assert (t.overloaded_hours, t.overloaded_students) == (30, 50)
        assert (t.high_hours, t.high_students) == (20, 30)
        assert (t.medium_hours, t.medium_students) == (10, 15)
        assert t.underutilized_hours == 5

    def test_default_engine_config(self):
        config = default_engine_config()
        assert config.conflicts.buffer_minutes == 30
        assert config.group_balance.low_ratio == 0.30
        assert config.group_balance.critical_ratio == 0.20
        assert config.impact.workload_reduction_per_finding == 15
        assert config.store.backend == StoreBackend.JSON
        assert config.logging.level == "INFO"

    def test_default_equals_empty_config(self):
        assert EngineConfig() == default_engine_config()

    def test_collections(self):
        assert "optimization_plans" in ALL_COLLECTIONS
        assert len(ALL_COLLECTIONS) == len(set(ALL_COLLECTIONS))

    def test_suggested_actions_complete(self):
        for key in ("overloaded_tutor", "underutilized_tutor", "unbalanced_group_low",
                    "unbalanced_group_full", "resource_conflict"):
            assert len(SUGGESTED_ACTIONS[key]) == 3


# ─── VALIDIERUNG ──────────────────────────────────────────────────────────────

class TestValidation:
    def test_thresholds_must_ascend(self):
        with pytest.raises(ValidationError):
            WorkloadThresholds(high_hours=40)

    def test_student_thresholds_must_ascend(self):
        with pytest.raises(ValidationError):
            WorkloadThresholds(medium_students=40)

    def test_negative_buffer_rejected(self):
        with pytest.raises(ValidationError):
            ConflictConfig(buffer_minutes=-5)

    def test_critical_above_low_rejected(self):
        with pytest.raises(ValidationError):
            GroupBalanceConfig(low_ratio=0.2, critical_ratio=0.3)

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="laut")


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path):
        mgr = ConfigManager()
        config = default_engine_config()
        config.conflicts.buffer_minutes = 45
        config.organization_name = "Nachhilfe Nord"
        path = tmp_path / "engine_config.yaml"

        mgr.save(config, path)
        loaded = mgr.load(path)
        assert loaded == config

    def test_saved_yaml_has_comments(self, tmp_path):
        path = tmp_path / "engine_config.yaml"
        ConfigManager().save(default_engine_config(), path)
        text = path.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "─── Konflikte ───" in text
        assert "# Minuten" in text

    def test_load_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "fehlt.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path):
        path = tmp_path / "engine_config.yaml"
        path.write_text("conflicts:\n  buffer_minutes: -1\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(path)

    def test_partial_file_uses_defaults(self, tmp_path):
        path = tmp_path / "engine_config.yaml"
        path.write_text("store:\n  backend: memory\n", encoding="utf-8")
        config = ConfigManager().load(path)
        assert config.store.backend == StoreBackend.MEMORY
        assert config.workload.high_hours == 20

    def test_load_or_default(self, tmp_path):
        assert ConfigManager().load_or_default(tmp_path / "fehlt.yaml") == default_engine_config()

    def test_first_run_check(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        mgr = ConfigManager()
        assert mgr.first_run_check()
        mgr.save(default_engine_config())
        assert not mgr.first_run_check()

    def test_print_rich_runs(self):
        ConfigManager().print_rich(default_engine_config())
