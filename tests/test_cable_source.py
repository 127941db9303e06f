from __future__ import annotations

import math
import sqlite3
from pathlib import Path

import pytest

from app.db import (
    CABLE_TABLE_COLUMNS,
    CableSource,
    SOURCE_DB,
    SOURCE_STATIC,
    open_cable_source,
    records_frame,
    static_source,
)
from cable_core.catalog import catalog_records, catalog_sizes
from cable_core.store import ParameterStore, StoreClosedError


def test_open_source_uses_store(tmp_path: Path) -> None:
    source = open_cable_source(tmp_path / "cable_design.db")
    try:
        assert source.kind == SOURCE_DB
        assert not source.read_only
        assert source.error is None
        assert source.sizes == catalog_sizes()
        assert source.record_by_size(240).reactance_trefoil_touching_ohm_per_km == pytest.approx(0.124)
    finally:
        source.close()
    assert not source.store.is_open


def test_open_failure_falls_back_to_static_catalog(tmp_path: Path) -> None:
    # a directory cannot be opened as a database file
    source = open_cable_source(tmp_path)
    try:
        assert source.kind == SOURCE_STATIC
        assert source.read_only
        assert source.error and source.error.startswith("DB error:")
        assert source.records == catalog_records()
        assert source.sizes == catalog_sizes()
        assert source.record_by_size(240).size_mm2 == 240
        assert "built-in fallback" in source.source_label()
    finally:
        source.close()


def test_store_without_data_falls_back_to_static_catalog(tmp_path: Path) -> None:
    db_path = tmp_path / "empty.db"
    ParameterStore.open(db_path, seed_records=()).close()

    source = open_cable_source(db_path)
    assert source.kind == SOURCE_STATIC
    assert source.sizes == catalog_sizes()
    assert "no cable data" in (source.error or "")


@pytest.mark.parametrize("use_db", [True, False])
def test_lookup_miss_returns_empty_record(tmp_path: Path, use_db: bool) -> None:
    source = open_cable_source(tmp_path / "c.db") if use_db else static_source("unused.db")
    try:
        rec = source.record_by_size(999)
        assert rec.size_mm2 == 0
        assert rec.is_empty
    finally:
        source.close()


def test_records_frame_shape_and_absent_values() -> None:
    df = records_frame(catalog_records())
    assert list(df.columns) == [header for _, header in CABLE_TABLE_COLUMNS]
    assert len(df) == 14
    assert df["Size (mm²)"].tolist() == catalog_sizes()
    assert df["AC R flat spaced (Ω/km)"].isna().all()
    row_240 = df[df["Size (mm²)"] == 240].iloc[0]
    assert row_240["AC R trefoil (Ω/km)"] == pytest.approx(0.0976)
    assert not math.isnan(row_240["Dielectric loss (W/km)"])


def test_records_frame_empty() -> None:
    df = records_frame([])
    assert df.empty
    assert len(df.columns) == len(CABLE_TABLE_COLUMNS)


def _seeded_db(tmp_path: Path) -> Path:
    db_path = tmp_path / "c.db"
    ParameterStore.open(db_path).close()
    return db_path


@pytest.mark.parametrize(
    "update_sql",
    [
        "UPDATE cable_electrical_data SET dielectric_loss_w_per_km = NULL WHERE id = 1",
        "UPDATE cable_electrical_data SET reactance_flat_touching_ohm_per_km = -0.5 WHERE id = 1",
    ],
)
def test_unreadable_store_rows_fall_back_to_static_catalog(tmp_path: Path, update_sql: str) -> None:
    db_path = _seeded_db(tmp_path)
    con = sqlite3.connect(db_path)
    try:
        con.execute(update_sql)
        con.commit()
    finally:
        con.close()

    source = open_cable_source(db_path)
    assert source.kind == SOURCE_STATIC
    assert source.read_only
    assert source.error and source.error.startswith("DB error:")
    assert source.records == catalog_records()
    assert source.record_by_size(50).dielectric_loss_w_per_km == pytest.approx(60.5)


def test_run_calc_falls_back_on_unreadable_store_rows(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    from tools.run_calc import main

    db_path = _seeded_db(tmp_path)
    con = sqlite3.connect(db_path)
    try:
        con.execute("UPDATE cable_electrical_data SET dielectric_loss_w_per_km = NULL WHERE id = 1")
        con.commit()
    finally:
        con.close()

    assert main(["--db", str(db_path)]) == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines()[0] == "OK"
    assert "built-in fallback" in captured.out
    assert "DB error:" in captured.err


def test_closed_db_source_does_not_answer_from_static_catalog(tmp_path: Path) -> None:
    source = open_cable_source(tmp_path / "c.db")
    assert source.kind == SOURCE_DB
    source.close()
    with pytest.raises(StoreClosedError):
        source.record_by_size(240)


def test_static_source_answers_only_from_its_records() -> None:
    records = [r for r in catalog_records() if r.size_mm2 != 240]
    source = CableSource(db_path="unused.db", records=records, sizes=[r.size_mm2 for r in records])
    assert source.record_by_size(240).is_empty
    assert source.record_by_size(300).size_mm2 == 300
