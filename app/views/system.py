from __future__ import annotations

import streamlit as st

from app.db import CableSource
from app.validation import FIELD_LABELS, InputParseError, parse_system_config
from cable_core.calculator import ARRANGEMENT_LABELS, ARRANGEMENTS, CalcResult, SystemConfig, calculate

DEFAULT_SIZE_MM2 = 240

_DEFAULT_FIELDS = {
    "voltage_kv": "33.0",
    "power_mva": "10.0",
    "power_factor": "0.95",
    "length_km": "1.0",
}


def _fmt(value: float, dp: int = 4) -> str:
    return f"{value:.{dp}f}"


def _row(label: str, value: str, unit: str = "") -> None:
    cols = st.columns([3, 2, 1])
    cols[0].caption(label)
    cols[1].markdown(f"**{value}**")
    cols[2].caption(unit)


def render_outputs(config: SystemConfig, res: CalcResult) -> None:
    st.subheader("Calculated Outputs")
    st.markdown(
        f"**{config.size_mm2} mm² - {ARRANGEMENT_LABELS[config.arrangement]}**, "
        f"length {_fmt(config.length_km, 3)} km"
    )

    st.markdown("**Impedance**")
    _row("R (total)", _fmt(res.r_ohm), "Ω")
    _row("X (total)", _fmt(res.x_ohm), "Ω")
    _row("Z (total)", _fmt(res.z_ohm), "Ω")

    st.markdown("**Load**")
    _row("Apparent power", _fmt(config.power_mva, 3), "MVA")
    _row("Active power", _fmt(res.p_mw, 3), "MW")
    _row("Reactive power", _fmt(res.q_mvar, 3), "Mvar")
    _row("Full-load current", _fmt(res.current_a, 1), "A")

    st.markdown("**Voltage Drop**")
    _row("ΔU (L-L)", _fmt(res.du_v, 1), "V")
    _row("ΔU", _fmt(res.du_pct, 2), "%")

    st.markdown("**Losses**")
    _row("Resistive", _fmt(res.losses_kw, 2), "kW")
    _row("Dielectric", _fmt(res.diel_loss_kw, 2), "kW (3-phase)")
    _row("Total power loss", _fmt(res.losses_pct, 2), "%")

    st.markdown("**Capacitive**")
    _row("Charging current", _fmt(res.charging_a, 3), "A/phase")

    st.caption("NOTE: indicative results only.")


def render(source: CableSource, state: dict) -> None:
    st.header("System")

    for key, value in _DEFAULT_FIELDS.items():
        state.setdefault(f"sys_{key}", value)

    sizes = source.sizes
    if not sizes:
        st.warning("No conductor sizes available.")
        return
    default_idx = sizes.index(DEFAULT_SIZE_MM2) if DEFAULT_SIZE_MM2 in sizes else 0

    input_col, output_col = st.columns([2, 3])
    with input_col:
        with st.form("system_form"):
            st.subheader("System Parameters")
            for key, label in FIELD_LABELS.items():
                st.text_input(label, key=f"sys_{key}")
            arrangement = st.radio(
                "Arrangement",
                ARRANGEMENTS,
                format_func=lambda a: ARRANGEMENT_LABELS[a],
            )
            size_mm2 = st.selectbox(
                "Conductor size",
                sizes,
                index=default_idx,
                format_func=lambda s: f"{s} mm²",
            )
            submitted = st.form_submit_button("Calculate")

        if submitted:
            data = {key: state[f"sys_{key}"] for key in FIELD_LABELS}
            data["arrangement"] = arrangement
            data["size_mm2"] = size_mm2
            try:
                config = parse_system_config(data)
                record = source.record_by_size(config.size_mm2)
                state["last_calc"] = (config, calculate(config, record))
                state["calc_errors"] = []
            except InputParseError as exc:
                # previous results stay on screen until input is fixed
                state["calc_errors"] = exc.errors

        for msg in state.get("calc_errors") or []:
            st.error(f"[!] {msg}")

    with output_col:
        last = state.get("last_calc")
        if last is None:
            st.info("Press Calculate to compute results.")
        else:
            render_outputs(*last)
