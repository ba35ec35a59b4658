from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from floorcore.exceptions import ConfigurationError
from floorcore.geometry import contract

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


class ToleranceSettings(BaseModel):
    # Tolerances (mm / deg)
    connect_mm: float = Field(contract.CONNECT_TOLERANCE_MM, gt=0.0)
    merge_point_mm: float = Field(contract.MERGE_POINT_TOLERANCE_MM, gt=0.0)
    merge_angle_deg: float = Field(contract.MERGE_ANGLE_TOLERANCE_DEG, ge=0.0, le=45.0)
    min_segment_mm: float = Field(contract.MIN_SEGMENT_LENGTH_MM, ge=0.0)
    gap_mm: float = Field(contract.GAP_TOLERANCE_MM, ge=0.0)
    snap_threshold_mm: float = Field(contract.OPENING_SNAP_THRESHOLD_MM, ge=0.0)
    wall_relative_threshold_mm: float = Field(contract.WALL_RELATIVE_THRESHOLD_MM, ge=0.0)

    # Snap threshold and gap tolerance are screen budgets when enabled
    scale_with_zoom: bool = False

    @model_validator(mode="after")
    def _check_gap_vs_segment(self) -> "ToleranceSettings":
        if self.gap_mm and self.gap_mm < self.min_segment_mm:
            raise ValueError(
                f"Gap tolerance ({self.gap_mm}mm) must be >= minimum segment length ({self.min_segment_mm}mm)"
            )
        return self

    def for_zoom(self, zoom: float) -> "ToleranceSettings":
        """Return tolerances with the interaction thresholds converted for ``zoom``.

        Only the opening snap threshold and the gap tolerance scale; endpoint,
        angle and segment tolerances describe the model, not the screen.
        """
        if not self.scale_with_zoom:
            return self
        if zoom <= 0:
            raise ConfigurationError("zoom must be positive", {"zoom": str(zoom)})
        return self.model_copy(
            update={
                "snap_threshold_mm": self.snap_threshold_mm / zoom,
                "gap_mm": max(self.gap_mm / zoom, self.min_segment_mm),
            }
        )


class WallDefaults(BaseModel):
    thickness_mm: float = Field(contract.DEFAULT_WALL_THICKNESS_MM, gt=0.0)
    height_mm: float = Field(contract.DEFAULT_WALL_HEIGHT_MM, gt=0.0)


class OpeningDefaults(BaseModel):
    door_height_mm: float = Field(contract.DOOR_HEIGHT_MM, gt=0.0)
    door_sill_mm: float = Field(contract.DOOR_SILL_MM, ge=0.0)
    window_height_mm: float = Field(contract.WINDOW_HEIGHT_MM, gt=0.0)
    window_sill_mm: float = Field(contract.WINDOW_SILL_MM, ge=0.0)


class GridSettings(BaseModel):
    size_mm: float = Field(contract.DEFAULT_GRID_SIZE_MM, ge=0.0)
    snap: bool = True
    unit: str = "mm"

    @field_validator("unit")
    @classmethod
    def _known_unit(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"mm", "cm", "m", "inch"}:
            raise ValueError(f"Unknown grid unit: {value}")
        return normalized


class ViewLimits(BaseModel):
    min_zoom: float = Field(contract.MIN_ZOOM, gt=0.0)
    max_zoom: float = Field(contract.MAX_ZOOM, gt=0.0)

    @model_validator(mode="after")
    def _ordered(self) -> "ViewLimits":
        if self.min_zoom >= self.max_zoom:
            raise ValueError(f"min_zoom ({self.min_zoom}) must be less than max_zoom ({self.max_zoom})")
        return self


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = False
    log_file: Path | None = None

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> str:  # noqa: D401
        if value is None:
            return "INFO"
        return str(value).upper()


class KernelSettings(BaseModel):
    tolerances: ToleranceSettings = Field(default_factory=ToleranceSettings)
    walls: WallDefaults = Field(default_factory=WallDefaults)
    openings: OpeningDefaults = Field(default_factory=OpeningDefaults)
    grid: GridSettings = Field(default_factory=GridSettings)
    view: ViewLimits = Field(default_factory=ViewLimits)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "KernelSettings":
        """Load settings from YAML configuration file.

        Args:
            path: Optional path to configuration file. If not provided, uses
                FLOORCORE_CONFIG environment variable. Without either, the
                built-in defaults are returned.

        Returns:
            KernelSettings instance with loaded configuration.

        Raises:
            ConfigurationError: If an explicit configuration file does not exist
                or its content is invalid.
        """
        env_path = os.getenv("FLOORCORE_CONFIG")
        config_path = path or (Path(env_path) if env_path else None)
        if config_path is None:
            return cls()
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)},
            )
        with config_path.open("r", encoding="utf-8") as fp:
            try:
                payload = yaml.safe_load(fp) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML: {exc}", {"path": str(config_path)}) from exc
        try:
            return cls(**payload)
        except (ValidationError, TypeError) as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}", {"path": str(config_path)}) from exc


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> KernelSettings:
    return KernelSettings.load(Path(path) if path else None)


__all__ = [
    "KernelSettings",
    "ToleranceSettings",
    "WallDefaults",
    "OpeningDefaults",
    "GridSettings",
    "ViewLimits",
    "LoggingSettings",
    "get_settings",
]
