from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterable

from .catalog import COEFFICIENT_FIELDS, OPTIONAL_FIELD, CableRecord, catalog_records

log = logging.getLogger(__name__)

DEFAULT_DB_PATH = "cable_design.db"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS cable_size (
  id       INTEGER PRIMARY KEY AUTOINCREMENT,
  size_mm2 INTEGER NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS cable_electrical_data (
  id                                        INTEGER PRIMARY KEY AUTOINCREMENT,
  cable_size_id                             INTEGER NOT NULL,
  max_dc_resistance_20c_ohm_per_km          REAL,
  ac_resistance_trefoil_touching_ohm_per_km REAL,
  ac_resistance_flat_touching_ohm_per_km    REAL,
  ac_resistance_flat_spaced_ohm_per_km      REAL,
  reactance_trefoil_touching_ohm_per_km     REAL,
  reactance_flat_touching_ohm_per_km        REAL,
  reactance_flat_spaced_ohm_per_km          REAL,
  insulation_resistance_20c_mohm_km         REAL,
  capacitance_uf_per_km                     REAL,
  charging_current_a_per_km                 REAL,
  dielectric_loss_w_per_km                  REAL,
  max_dielectric_stress_kv_per_mm           REAL,
  screen_dc_resistance_20c_ohm_per_km       REAL,
  zero_seq_resistance_ohm_per_km            REAL,
  zero_seq_reactance_ohm_per_km             REAL,
  FOREIGN KEY (cable_size_id) REFERENCES cable_size(id) ON DELETE CASCADE
);
"""

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "cable_size": {"id", "size_mm2"},
    "cable_electrical_data": {"id", "cable_size_id", *COEFFICIENT_FIELDS},
}

_SELECT_RECORDS = (
    "SELECT s.size_mm2, "
    + ", ".join(f"e.{col}" for col in COEFFICIENT_FIELDS)
    + " FROM cable_electrical_data e JOIN cable_size s ON s.id = e.cable_size_id"
)

_INSERT_ELECTRICAL = (
    "INSERT INTO cable_electrical_data (cable_size_id, "
    + ", ".join(COEFFICIENT_FIELDS)
    + ") VALUES ("
    + ", ".join("?" for _ in range(len(COEFFICIENT_FIELDS) + 1))
    + ")"
)


class StoreError(Exception):
    pass


class StoreOpenError(StoreError):
    """Storage could not be created or opened; callers fall back to the static catalog."""


class SchemaError(StoreOpenError):
    pass


class SeedError(StoreOpenError):
    """The one-time seed failed and was rolled back; the store is left empty."""


class StoreClosedError(StoreError):
    pass


def _record_from_row(row: sqlite3.Row) -> CableRecord:
    values: dict[str, float | None] = {}
    for col in COEFFICIENT_FIELDS:
        value = row[col]
        if value is None and col != OPTIONAL_FIELD:
            raise StoreError(f"NULL {col} for size_mm2={row['size_mm2']}")
        values[col] = float(value) if value is not None else None
    return CableRecord(size_mm2=int(row["size_mm2"]), **values)


def _row_values(record: CableRecord) -> list[float | None]:
    # absent flat-spaced R is stored as NULL, never as the numeric sentinel
    return [getattr(record, col) for col in COEFFICIENT_FIELDS]


class ParameterStore:
    """
    SQLite-backed cable parameter store.

    open() creates the schema on first use and seeds it from the static
    catalog exactly once. The table is read-only afterwards.
    """

    def __init__(self, conn: sqlite3.Connection, location: str) -> None:
        self._conn: sqlite3.Connection | None = conn
        self.location = location

    @classmethod
    def open(
        cls,
        location: str | Path = DEFAULT_DB_PATH,
        *,
        seed_records: Iterable[CableRecord] | None = None,
    ) -> ParameterStore:
        location = str(location)
        try:
            conn = sqlite3.connect(location, isolation_level=None, timeout=5.0)
        except sqlite3.Error as exc:
            raise StoreOpenError(f"Cannot open {location}: {exc}") from exc

        try:
            conn.row_factory = sqlite3.Row
            try:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA foreign_keys = ON;")
            except sqlite3.Error as exc:
                raise StoreOpenError(f"Cannot open {location}: {exc}") from exc
            _create_schema(conn)
            records = catalog_records() if seed_records is None else list(seed_records)
            seeded = _seed_if_empty(conn, records)
        except Exception:
            conn.close()
            raise

        if seeded:
            log.info("Seeded %d cable records into %s", seeded, location)
        log.debug("Opened parameter store %s", location)
        return cls(conn, location)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreClosedError(f"Parameter store is closed: {self.location}")
        return self._conn

    def all_records(self) -> list[CableRecord]:
        conn = self._require_conn()
        rows = conn.execute(_SELECT_RECORDS + " ORDER BY s.size_mm2 ASC").fetchall()
        return [_record_from_row(r) for r in rows]

    def record_by_size(self, size_mm2: int) -> CableRecord | None:
        conn = self._require_conn()
        row = conn.execute(
            _SELECT_RECORDS + " WHERE s.size_mm2 = ?",
            (int(size_mm2),),
        ).fetchone()
        return _record_from_row(row) if row else None

    def available_sizes(self) -> list[int]:
        conn = self._require_conn()
        rows = conn.execute(
            """
            SELECT DISTINCT s.size_mm2
            FROM cable_size s
            JOIN cable_electrical_data e ON e.cable_size_id = s.id
            ORDER BY s.size_mm2 ASC
            """
        ).fetchall()
        return [int(r[0]) for r in rows]

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            log.debug("Closed parameter store %s", self.location)

    def __enter__(self) -> ParameterStore:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _create_schema(conn: sqlite3.Connection) -> None:
    try:
        conn.executescript(SCHEMA_SQL)
    except sqlite3.Error as exc:
        raise SchemaError(f"Schema creation failed: {exc}") from exc

    # CREATE TABLE IF NOT EXISTS keeps whatever shape an older file already has
    for table, cols in REQUIRED_COLUMNS.items():
        actual = {str(r[1]) for r in conn.execute(f"PRAGMA table_info({table})").fetchall()}
        missing = sorted(cols - actual)
        if missing:
            raise SchemaError(f"Table {table} is missing columns: {', '.join(missing)}")


def _seed_if_empty(conn: sqlite3.Connection, records: list[CableRecord]) -> int:
    """
    Inserts the seed records in one transaction if cable_size is empty.

    The row count is read under BEGIN IMMEDIATE so a concurrent opener waits
    for the write lock and then sees the committed rows.
    Returns the number of records inserted (0 when already seeded).
    """
    try:
        conn.execute("BEGIN IMMEDIATE")
    except sqlite3.Error as exc:
        raise SeedError(f"Cannot start seed transaction: {exc}") from exc

    try:
        n = int(conn.execute("SELECT COUNT(*) FROM cable_size").fetchone()[0])
        if n > 0:
            conn.rollback()
            return 0
        for record in records:
            cur = conn.execute(
                "INSERT INTO cable_size (size_mm2) VALUES (?)",
                (record.size_mm2,),
            )
            conn.execute(_INSERT_ELECTRICAL, (cur.lastrowid, *_row_values(record)))
        conn.commit()
        return len(records)
    except sqlite3.Error as exc:
        conn.rollback()
        raise SeedError(f"Seeding failed, nothing committed: {exc}") from exc
