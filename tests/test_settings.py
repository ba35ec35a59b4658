from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from floorcore.exceptions import ConfigurationError
from floorcore.settings import GridSettings, KernelSettings, LoggingSettings, ToleranceSettings, ViewLimits, get_settings

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config" / "floorcore.yaml"


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    monkeypatch.delenv("FLOORCORE_CONFIG", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_without_config():
    settings = KernelSettings.load()
    assert settings.tolerances.connect_mm == 5.0
    assert settings.tolerances.snap_threshold_mm == 50.0
    assert settings.walls.thickness_mm == 150.0
    assert settings.openings.window_sill_mm == 900.0
    assert settings.view.max_zoom == 5.0


def test_example_config_matches_defaults():
    assert KernelSettings.load(REPO_CONFIG) == KernelSettings()


def test_load_from_yaml(tmp_path):
    config = tmp_path / "kernel.yaml"
    config.write_text("tolerances:\n  connect_mm: 8\ngrid:\n  unit: CM\nlogging:\n  level: debug\n", encoding="utf-8")
    settings = KernelSettings.load(config)
    assert settings.tolerances.connect_mm == 8.0
    assert settings.grid.unit == "cm"
    assert settings.logging.level == "DEBUG"


def test_env_variable_selects_config(tmp_path, monkeypatch):
    config = tmp_path / "env.yaml"
    config.write_text("walls:\n  height_mm: 2700\n", encoding="utf-8")
    monkeypatch.setenv("FLOORCORE_CONFIG", str(config))
    assert get_settings().walls.height_mm == 2700.0


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError) as excinfo:
        KernelSettings.load(tmp_path / "nope.yaml")
    assert excinfo.value.details["path"].endswith("nope.yaml")


@pytest.mark.parametrize(
    "content",
    [
        "tolerances:\n  connect_mm: -1\n",
        "view:\n  min_zoom: 3\n  max_zoom: 2\n",
        "- just\n- a list\n",
        "tolerances: [unclosed\n",
    ],
)
def test_invalid_config(tmp_path, content):
    config = tmp_path / "bad.yaml"
    config.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        KernelSettings.load(config)


def test_gap_tolerance_must_cover_min_segment():
    with pytest.raises(ValidationError):
        ToleranceSettings(gap_mm=2.0, min_segment_mm=5.0)


def test_tolerances_for_zoom():
    fixed = ToleranceSettings()
    assert fixed.for_zoom(0.25) is fixed

    scaled = ToleranceSettings(scale_with_zoom=True).for_zoom(0.5)
    assert scaled.snap_threshold_mm == 100.0
    assert scaled.gap_mm == 60.0
    assert scaled.connect_mm == 5.0

    with pytest.raises(ConfigurationError):
        ToleranceSettings(scale_with_zoom=True).for_zoom(0)


def test_grid_and_view_validation():
    with pytest.raises(ValidationError):
        GridSettings(unit="yard")
    with pytest.raises(ValidationError):
        ViewLimits(min_zoom=1.0, max_zoom=1.0)
    assert LoggingSettings(level=None).level == "INFO"
