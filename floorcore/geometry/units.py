"""Display units for lengths stored in millimetres."""

from __future__ import annotations

from enum import Enum

from floorcore.exceptions import ConfigurationError


class Unit(str, Enum):
    MM = "mm"
    CM = "cm"
    M = "m"
    INCH = "inch"


_MM_PER_UNIT = {
    Unit.MM: 1.0,
    Unit.CM: 10.0,
    Unit.M: 1000.0,
    Unit.INCH: 25.4,
}

_DISPLAY_NAMES = {
    Unit.MM: "Millimeters",
    Unit.CM: "Centimeters",
    Unit.M: "Meters",
    Unit.INCH: "Inches",
}

# Grid spacing in mm that reads naturally in each unit (10 inches ~ 254mm)
_DEFAULT_GRID_MM = {
    Unit.MM: 100.0,
    Unit.CM: 100.0,
    Unit.M: 1000.0,
    Unit.INCH: 254.0,
}


def parse_unit(unit: Unit | str) -> Unit:
    try:
        return Unit(unit)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown unit: {unit}", {"unit": str(unit)}) from exc


def convert_from_mm(value_mm: float, unit: Unit | str) -> float:
    return value_mm / _MM_PER_UNIT[parse_unit(unit)]


def convert_to_mm(value: float, unit: Unit | str) -> float:
    return value * _MM_PER_UNIT[parse_unit(unit)]


def format_with_unit(value_mm: float, unit: Unit | str, decimals: int = 1) -> str:
    unit = parse_unit(unit)
    return f"{convert_from_mm(value_mm, unit):.{decimals}f}{unit.value}"


def unit_display_name(unit: Unit | str) -> str:
    return _DISPLAY_NAMES[parse_unit(unit)]


def default_grid_size(unit: Unit | str) -> float:
    return _DEFAULT_GRID_MM[parse_unit(unit)]
