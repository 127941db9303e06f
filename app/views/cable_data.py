from __future__ import annotations

import streamlit as st

from app.db import CableSource, records_frame


def render(source: CableSource, state: dict) -> None:
    st.header("33 kV XLPE Cable Electrical Data")
    st.caption(source.source_label())

    if not source.records:
        st.info("No cable data available.")
        return

    df = records_frame(source.records)
    st.dataframe(df, width="stretch", hide_index=True)
    st.caption("AC values at 90°C / 50 Hz. Empty flat spaced R: no measured value.")
