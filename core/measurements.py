"""
core/measurements.py
────────────────────────────────────────────────────────────────────────
Height / weight encoding for the last questionnaire step.

    Metric   → height "170"    weight "70"    (cm, kg)
    Imperial → height "5'8\""  weight "150"   (ft/in, lb)

Picker ranges mirror the wheels shown on the measurements screen.
"""

from __future__ import annotations

from enum import Enum


class UnitSystem(str, Enum):
    metric = "Metric"
    imperial = "Imperial"


HEIGHT_CM_RANGE = range(100, 221)
HEIGHT_FEET_RANGE = range(4, 8)
HEIGHT_INCHES_RANGE = range(0, 12)
WEIGHT_KG_RANGE = range(40, 151)
WEIGHT_LB_RANGE = range(80, 331)

DEFAULT_HEIGHT_CM = 170
DEFAULT_HEIGHT_FT_IN = (5, 8)
DEFAULT_WEIGHT_KG = 70
DEFAULT_WEIGHT_LB = 150


def encode_height(
    unit_system: UnitSystem,
    cm: int | None = None,
    feet: int | None = None,
    inches: int | None = None,
) -> str:
    if unit_system is UnitSystem.metric:
        return str(DEFAULT_HEIGHT_CM if cm is None else cm)
    ft = DEFAULT_HEIGHT_FT_IN[0] if feet is None else feet
    inch = DEFAULT_HEIGHT_FT_IN[1] if inches is None else inches
    return f"{ft}'{inch}\""


def encode_weight(unit_system: UnitSystem, value: int | None = None) -> str:
    if value is None:
        value = DEFAULT_WEIGHT_KG if unit_system is UnitSystem.metric else DEFAULT_WEIGHT_LB
    return str(value)


def weight_range(unit_system: UnitSystem) -> range:
    return WEIGHT_KG_RANGE if unit_system is UnitSystem.metric else WEIGHT_LB_RANGE
