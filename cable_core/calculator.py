from __future__ import annotations

import math
from dataclasses import dataclass

from .catalog import CableRecord

TREFOIL_TOUCHING = "TREFOIL_TOUCHING"
FLAT_TOUCHING = "FLAT_TOUCHING"
FLAT_SPACED = "FLAT_SPACED"

ARRANGEMENTS = (TREFOIL_TOUCHING, FLAT_TOUCHING, FLAT_SPACED)

ARRANGEMENT_LABELS = {
    TREFOIL_TOUCHING: "Trefoil Touching",
    FLAT_TOUCHING: "Flat Touching",
    FLAT_SPACED: "Flat Spaced",
}

SQRT3 = math.sqrt(3.0)


@dataclass(frozen=True)
class SystemConfig:
    voltage_kv: float = 33.0
    power_mva: float = 10.0
    power_factor: float = 0.95
    length_km: float = 1.0
    arrangement: str = TREFOIL_TOUCHING
    size_mm2: int = 240


@dataclass(frozen=True)
class CalcResult:
    r_ohm: float = 0.0
    x_ohm: float = 0.0
    z_ohm: float = 0.0
    current_a: float = 0.0
    du_v: float = 0.0
    du_pct: float = 0.0
    p_mw: float = 0.0
    q_mvar: float = 0.0
    losses_kw: float = 0.0
    diel_loss_kw: float = 0.0
    losses_pct: float = 0.0
    charging_a: float = 0.0


def sin_phi(cos_phi: float) -> float:
    if not isinstance(cos_phi, (int, float)) or isinstance(cos_phi, bool):
        raise TypeError("cos_phi must be a number")
    cos_val = float(cos_phi)
    if math.isnan(cos_val) or math.isinf(cos_val):
        raise ValueError("cos_phi must be finite")
    if cos_val < 0.0 or cos_val > 1.0:
        raise ValueError("cos_phi must be in [0, 1]")
    # clamp: 1 - pf*pf can round slightly below zero
    return math.sqrt(max(0.0, 1.0 - cos_val * cos_val))


def impedance_per_km(cable: CableRecord, arrangement: str) -> tuple[float, float]:
    """
    Returns (R, X) in Ohm/km for the conductor arrangement.

    Flat spaced falls back to the flat touching AC resistance when its own
    value is absent.
    """
    if arrangement == TREFOIL_TOUCHING:
        return (
            cable.ac_resistance_trefoil_touching_ohm_per_km,
            cable.reactance_trefoil_touching_ohm_per_km,
        )
    if arrangement == FLAT_TOUCHING:
        return (
            cable.ac_resistance_flat_touching_ohm_per_km,
            cable.reactance_flat_touching_ohm_per_km,
        )
    if arrangement == FLAT_SPACED:
        r_per_km = cable.ac_resistance_flat_spaced_ohm_per_km
        if r_per_km is None:
            r_per_km = cable.ac_resistance_flat_touching_ohm_per_km
        return r_per_km, cable.reactance_flat_spaced_ohm_per_km
    raise ValueError(f"Unsupported arrangement: {arrangement}")


def _require_positive(name: str, value: float) -> float:
    val = float(value)
    if math.isnan(val) or math.isinf(val):
        raise ValueError(f"{name} must be finite")
    if val <= 0.0:
        raise ValueError(f"{name} must be > 0")
    return val


def calculate(config: SystemConfig, cable: CableRecord) -> CalcResult:
    """
    Three-phase results for one cable run.

    A record with size_mm2 == 0 means "no cable selected" and yields the
    all-zero CalcResult.
    """
    if cable.size_mm2 == 0:
        return CalcResult()

    voltage_kv = _require_positive("voltage_kv", config.voltage_kv)
    power_mva = _require_positive("power_mva", config.power_mva)
    pf = _require_positive("power_factor", config.power_factor)
    length_km = float(config.length_km)
    if length_km < 0.0:
        raise ValueError("length_km must be >= 0")

    r_per_km, x_per_km = impedance_per_km(cable, config.arrangement)
    r = r_per_km * length_km
    x = x_per_km * length_km
    z = math.sqrt(r * r + x * x)

    u_ll_v = voltage_kv * 1000.0
    u_ph_v = u_ll_v / SQRT3
    current = (power_mva * 1e6) / (SQRT3 * u_ll_v)

    sin_val = sin_phi(pf)
    du_ph_v = current * (r * pf + x * sin_val)

    p_mw = power_mva * pf
    losses_kw = 3.0 * current * current * r / 1000.0

    return CalcResult(
        r_ohm=r,
        x_ohm=x,
        z_ohm=z,
        current_a=current,
        du_v=du_ph_v * SQRT3,
        du_pct=100.0 * du_ph_v / u_ph_v,
        p_mw=p_mw,
        q_mvar=power_mva * sin_val,
        losses_kw=losses_kw,
        diel_loss_kw=cable.dielectric_loss_w_per_km * length_km * 3.0 / 1000.0,
        # resistive loss only, dielectric loss is reported separately
        losses_pct=100.0 * losses_kw / (p_mw * 1e3),
        charging_a=cable.charging_current_a_per_km * length_km,
    )
