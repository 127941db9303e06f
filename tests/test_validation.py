from __future__ import annotations

import pytest

from app.validation import InputParseError, parse_system_config, validate_system_fields
from cable_core.calculator import FLAT_SPACED, SystemConfig


def _fields(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "voltage_kv": "33.0",
        "power_mva": "10.0",
        "power_factor": "0.95",
        "length_km": "1.0",
        "arrangement": FLAT_SPACED,
        "size_mm2": 240,
    }
    data.update(overrides)
    return data


def test_parse_text_fields() -> None:
    cfg = parse_system_config(_fields(voltage_kv=" 11 ", length_km="2.5", size_mm2="300"))
    assert cfg == SystemConfig(
        voltage_kv=11.0,
        power_mva=10.0,
        power_factor=0.95,
        length_km=2.5,
        arrangement=FLAT_SPACED,
        size_mm2=300,
    )


def test_unity_power_factor_accepted() -> None:
    assert validate_system_fields(_fields(power_factor="1")) == []


def test_non_numeric_fields_reported() -> None:
    errors = validate_system_fields(_fields(voltage_kv="abc", power_mva="", length_km="inf"))
    joined = "\n".join(errors)
    assert "Voltage (L-L) [kV] must be a number" in joined
    assert "Apparent power [MVA] must be a number" in joined
    assert "Cable length [km] must be a number" in joined


def test_range_checks() -> None:
    errors = validate_system_fields(
        _fields(voltage_kv="0", power_mva="-5", power_factor="1.2", length_km="0")
    )
    assert "Voltage must be > 0" in errors
    assert "Apparent power must be > 0" in errors
    assert "Power factor must be in (0, 1]" in errors
    assert "Cable length must be > 0" in errors

    assert "Power factor must be in (0, 1]" in validate_system_fields(_fields(power_factor="0"))


def test_arrangement_and_size_checks() -> None:
    errors = validate_system_fields(_fields(arrangement="DIAGONAL", size_mm2="12.5"))
    joined = "\n".join(errors)
    assert "Arrangement must be one of" in joined
    assert "Conductor size must be a positive integer" in joined


def test_parse_raises_input_parse_error_with_messages() -> None:
    with pytest.raises(InputParseError) as excinfo:
        parse_system_config(_fields(power_factor="x"))
    assert excinfo.value.errors == ["Power factor must be a number"]
    assert isinstance(excinfo.value, ValueError)
