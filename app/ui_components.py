from __future__ import annotations

import streamlit as st

from app.db import SOURCE_DB, CableSource


def _status_style(kind: str) -> tuple[str, str]:
    """
    Returns (bg_color, fg_color) for a status pill.
    Colors are chosen to be readable in both Streamlit light/dark themes.
    """
    if kind == SOURCE_DB:
        return "#1f7a3a", "white"
    return "#b91c1c", "white"


def source_chip(source: CableSource) -> None:
    """Compact DB status pill: "<path> OK" or "unavailable" with the error as tooltip."""
    bg, fg = _status_style(source.kind)
    if source.kind == SOURCE_DB:
        text = f"DB: {source.db_path} OK"
        title = source.db_path
    else:
        text = "DB: unavailable"
        title = (source.error or "").replace('"', "'")

    st.markdown(
        f"""
        <span title="{title}" style="
          display:inline-block;
          padding:0.15rem 0.55rem;
          border-radius:999px;
          background:{bg};
          color:{fg};
          font-weight:600;
          font-size:0.85rem;
          line-height:1.4;
          white-space:nowrap;
        ">{text}</span>
        """,
        unsafe_allow_html=True,
    )
