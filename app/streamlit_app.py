from __future__ import annotations

import sys
from pathlib import Path
import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import db  # noqa: E402
from app.ui_components import source_chip  # noqa: E402
from app.views import cable_data, system  # noqa: E402
from cable_core.store import DEFAULT_DB_PATH  # noqa: E402

APP_VERSION = "0.1.2"


def _init_state() -> None:
    state = st.session_state
    state.setdefault("db_path", DEFAULT_DB_PATH)
    state.setdefault("last_calc", None)
    state.setdefault("calc_errors", [])


def main() -> None:
    st.set_page_config(page_title="Cable Design Tool", layout="wide")
    _init_state()
    state = st.session_state

    with st.sidebar:
        st.title("Cable Design Tool")
        st.text_input("DB path", key="db_path")

    source = None
    try:
        source = db.open_cable_source(state["db_path"])
    except Exception as exc:  # pragma: no cover - UI error path
        st.error(f"Failed to load cable data: {exc}")
        return

    try:
        with st.sidebar:
            source_chip(source)
            if source.error:
                st.error(source.error)
            page = st.radio("Navigation", ["System", "Cable Data"])
            st.caption(f"CableDesign v{APP_VERSION}")

        pages = {
            "System": system,
            "Cable Data": cable_data,
        }
        pages[page].render(source, state)
    finally:
        if source is not None:
            source.close()


if __name__ == "__main__":
    main()
