from __future__ import annotations

import math
from typing import Any, Mapping

from cable_core.calculator import ARRANGEMENTS, SystemConfig

# Field keys as entered in the System form / CLI flags.
FIELD_LABELS = {
    "voltage_kv": "Voltage (L-L) [kV]",
    "power_mva": "Apparent power [MVA]",
    "power_factor": "Power factor",
    "length_km": "Cable length [km]",
}


class InputParseError(ValueError):
    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def _to_size(value: Any) -> int | None:
    num = _to_float(value)
    if num is None or not num.is_integer():
        return None
    return int(num)


def validate_system_fields(data: Mapping[str, Any]) -> list[str]:
    """
    Range checks only: voltage > 0, power > 0, 0 < pf <= 1, length > 0.
    Values may be raw text from input widgets.
    """
    errors: list[str] = []

    for field, label in FIELD_LABELS.items():
        if _to_float(data.get(field)) is None:
            errors.append(f"{label} must be a number")

    voltage = _to_float(data.get("voltage_kv"))
    if voltage is not None and voltage <= 0:
        errors.append("Voltage must be > 0")

    power = _to_float(data.get("power_mva"))
    if power is not None and power <= 0:
        errors.append("Apparent power must be > 0")

    pf = _to_float(data.get("power_factor"))
    if pf is not None and (pf <= 0 or pf > 1):
        errors.append("Power factor must be in (0, 1]")

    length = _to_float(data.get("length_km"))
    if length is not None and length <= 0:
        errors.append("Cable length must be > 0")

    if data.get("arrangement") not in ARRANGEMENTS:
        errors.append("Arrangement must be one of " + ", ".join(ARRANGEMENTS))

    size = _to_size(data.get("size_mm2"))
    if size is None or size <= 0:
        errors.append("Conductor size must be a positive integer")

    return errors


def parse_system_config(data: Mapping[str, Any]) -> SystemConfig:
    errors = validate_system_fields(data)
    if errors:
        raise InputParseError(errors)
    return SystemConfig(
        voltage_kv=float(_to_float(data["voltage_kv"])),
        power_mva=float(_to_float(data["power_mva"])),
        power_factor=float(_to_float(data["power_factor"])),
        length_km=float(_to_float(data["length_km"])),
        arrangement=str(data["arrangement"]),
        size_mm2=int(_to_size(data["size_mm2"])),
    )
