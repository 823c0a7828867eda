"""Load, validate, and hot-reload the prediction engine configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  It is
loaded once and cached.  Call ``reload_cycle_config()`` to re-read it from
disk without restarting the service.

Usage::

    from utero.cycles.config_loader import get_cycle_config

    config = get_cycle_config()
    config.default_cycle_length       # 28
    config.phase("luteal").name       # 'Luteal Phase'
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger("utero.cycles.config")

_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"

# Phase keys every config must define, in rule order.
PHASE_KEYS = (
    "no_data",
    "follicular",
    "fertile",
    "ovulation",
    "luteal",
    "menstruation",
)


@dataclass(frozen=True)
class PhaseText:
    """Display name and description for one cycle phase."""

    name: str
    description: str


@dataclass(frozen=True)
class CycleConfig:
    """Validated prediction engine settings.

    Attributes:
        version:               Config schema version string.
        default_cycle_length:  Cycle length used with fewer than two cycles.
        default_period_length: Period length used with no history.
        luteal_phase_days:     Ovulation happens this many days before the
                               predicted period start.
        fertile_window_days:   Window length ending on ovulation day.
        calendar_grid_days:    Number of days in a rendered month grid.
        phases:                Phase key → display text.
    """

    version: str
    default_cycle_length: int
    default_period_length: int
    luteal_phase_days: int
    fertile_window_days: int
    calendar_grid_days: int
    phases: dict[str, PhaseText] = field(default_factory=dict)

    def phase(self, key: str) -> PhaseText:
        """Return the display text for a phase key.

        Raises:
            KeyError: If the key is not configured.
        """
        return self.phases[key]


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError:     If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Missing numeric settings fall back to the built-in defaults; phase texts
    are required.  All problems are collected before raising.

    Raises:
        ConfigValidationError: If any value is missing or invalid.
    """
    errors: list[str] = []

    def _positive_int(section: dict, key: str, default: int, where: str) -> int:
        value = section.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{where}.{key} must be an integer, got {value!r}")
            return default
        if number < 1:
            errors.append(f"{where}.{key} = {number} must be at least 1")
        return number

    version = str(raw.get("version", "1.0"))

    defaults_raw = raw.get("defaults") or {}
    ov_raw = raw.get("ovulation") or {}
    cal_raw = raw.get("calendar") or {}

    default_cycle = _positive_int(defaults_raw, "cycle_length_days", 28, "defaults")
    default_period = _positive_int(defaults_raw, "period_length_days", 5, "defaults")
    luteal = _positive_int(ov_raw, "luteal_phase_days", 14, "ovulation")
    fertile = _positive_int(ov_raw, "fertile_window_days", 6, "ovulation")
    grid = _positive_int(cal_raw, "grid_days", 42, "calendar")

    if grid % 7 != 0:
        errors.append(f"calendar.grid_days = {grid} must be a whole number of weeks")

    phases_raw = raw.get("phases") or {}
    phases: dict[str, PhaseText] = {}
    for key in PHASE_KEYS:
        entry = phases_raw.get(key)
        if not isinstance(entry, dict):
            errors.append(f"phases.{key} is missing or not a mapping")
            continue
        name = entry.get("name")
        if not name:
            errors.append(f"phases.{key}.name is required")
            continue
        phases[key] = PhaseText(name=str(name), description=str(entry.get("description", "")))

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CycleConfig(
        version=version,
        default_cycle_length=default_cycle,
        default_period_length=default_period,
        luteal_phase_days=luteal,
        fertile_window_days=fertile,
        calendar_grid_days=grid,
        phases=phases,
    )


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the cycle config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    config = _validate_and_build(_load_yaml(target))
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Return the global CycleConfig, loading it on first call.  Thread-safe."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Reload the config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_cycle_config(path)
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded cycle config: %s → %s", old_version, new_config.version)
    return new_config
