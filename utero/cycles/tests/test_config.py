"""Tests for cycle_config.yaml loading and validation."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from utero.cycles.config_loader import (
    PHASE_KEYS,
    ConfigValidationError,
    CycleConfig,
    _validate_and_build,
    load_cycle_config,
    reload_cycle_config,
)


class TestConfigLoading:
    def test_load_default_config(self, cycle_config: CycleConfig) -> None:
        assert cycle_config.version == "1.0"
        assert cycle_config.default_cycle_length == 28
        assert cycle_config.default_period_length == 5
        assert cycle_config.luteal_phase_days == 14
        assert cycle_config.fertile_window_days == 6
        assert cycle_config.calendar_grid_days == 42

    def test_all_phases_present(self, cycle_config: CycleConfig) -> None:
        assert set(cycle_config.phases) == set(PHASE_KEYS)
        assert cycle_config.phase("menstruation").name == "Menstruation"

    def test_unknown_phase_raises(self, cycle_config: CycleConfig) -> None:
        with pytest.raises(KeyError):
            cycle_config.phase("pms")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_cycle_config(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("defaults: [unclosed")
        with pytest.raises(ConfigValidationError, match="YAML parse error"):
            load_cycle_config(path)


class TestValidation:
    def _phases(self) -> dict:
        return {key: {"name": key.title(), "description": ""} for key in PHASE_KEYS}

    def test_numeric_defaults_applied(self) -> None:
        config = _validate_and_build({"phases": self._phases()})
        assert config.default_cycle_length == 28
        assert config.calendar_grid_days == 42

    def test_collects_all_errors(self) -> None:
        raw = {
            "defaults": {"cycle_length_days": "abc", "period_length_days": 0},
            "calendar": {"grid_days": 40},
            "phases": {},
        }
        with pytest.raises(ConfigValidationError) as exc_info:
            _validate_and_build(raw)
        message = str(exc_info.value)
        assert "cycle_length_days must be an integer" in message
        assert "period_length_days = 0" in message
        assert "whole number of weeks" in message
        assert "phases.no_data" in message


class TestReload:
    def test_reload_replaces_singleton(self, tmp_path: Path) -> None:
        path = tmp_path / "cycle_config.yaml"
        bundled = Path(__file__).parents[1] / "cycle_config.yaml"
        path.write_text(
            bundled.read_text().replace('version: "1.0"', 'version: "1.1"')
        )
        try:
            config = reload_cycle_config(path)
            assert config.version == "1.1"
        finally:
            reload_cycle_config()

    def test_invalid_reload_keeps_old_config(self, tmp_path: Path) -> None:
        path = tmp_path / "cycle_config.yaml"
        path.write_text(textwrap.dedent("""\
            version: "9.9"
            phases: {}
        """))
        before = reload_cycle_config()
        with pytest.raises(ConfigValidationError):
            reload_cycle_config(path)
        from utero.cycles.config_loader import get_cycle_config

        assert get_cycle_config() is before
