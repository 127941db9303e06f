from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import pandas as pd

from cable_core.catalog import CableRecord, catalog_records, empty_record
from cable_core.store import ParameterStore, StoreError, StoreOpenError

log = logging.getLogger(__name__)

SOURCE_DB = "DB"
SOURCE_STATIC = "STATIC"

# (field, header) pairs for the Cable Data table, units in the header.
CABLE_TABLE_COLUMNS: list[tuple[str, str]] = [
    ("size_mm2", "Size (mm²)"),
    ("max_dc_resistance_20c_ohm_per_km", "DC R 20°C (Ω/km)"),
    ("ac_resistance_trefoil_touching_ohm_per_km", "AC R trefoil (Ω/km)"),
    ("ac_resistance_flat_touching_ohm_per_km", "AC R flat touching (Ω/km)"),
    ("ac_resistance_flat_spaced_ohm_per_km", "AC R flat spaced (Ω/km)"),
    ("reactance_trefoil_touching_ohm_per_km", "X trefoil (Ω/km)"),
    ("reactance_flat_touching_ohm_per_km", "X flat touching (Ω/km)"),
    ("reactance_flat_spaced_ohm_per_km", "X flat spaced (Ω/km)"),
    ("insulation_resistance_20c_mohm_km", "Insulation R (MΩ·km)"),
    ("capacitance_uf_per_km", "C (µF/km)"),
    ("charging_current_a_per_km", "Ic (A/km)"),
    ("dielectric_loss_w_per_km", "Dielectric loss (W/km)"),
    ("max_dielectric_stress_kv_per_mm", "Max stress (kV/mm)"),
    ("screen_dc_resistance_20c_ohm_per_km", "Screen R (Ω/km)"),
    ("zero_seq_resistance_ohm_per_km", "Z0 R (Ω/km)"),
    ("zero_seq_reactance_ohm_per_km", "Z0 X (Ω/km)"),
]


@dataclass
class CableSource:
    """
    Records the UI and CLI work from: the parameter store when it opened,
    otherwise the built-in catalog (read-only, nothing persisted).
    """

    db_path: str
    records: list[CableRecord]
    sizes: list[int]
    store: ParameterStore | None = None
    error: str | None = None
    _by_size: dict[int, CableRecord] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._by_size = {r.size_mm2: r for r in self.records}

    @property
    def kind(self) -> str:
        return SOURCE_DB if self.store is not None else SOURCE_STATIC

    @property
    def read_only(self) -> bool:
        return self.store is None

    def source_label(self) -> str:
        if self.store is not None:
            return f"Source: {self.db_path}"
        return "Source: built-in fallback (DB unavailable)"

    def record_by_size(self, size_mm2: int) -> CableRecord:
        """Lookup miss returns the empty record ("no cable selected")."""
        if self.store is not None:
            # a closed store raises StoreClosedError, never a static-catalog answer
            record = self.store.record_by_size(size_mm2)
        else:
            record = self._by_size.get(size_mm2)
        return record if record is not None else empty_record()

    def close(self) -> None:
        if self.store is not None:
            self.store.close()


def static_source(db_path: str | Path, error: str | None = None) -> CableSource:
    records = catalog_records()
    return CableSource(
        db_path=str(db_path),
        records=records,
        sizes=[r.size_mm2 for r in records],
        error=error,
    )


def open_cable_source(db_path: str | Path) -> CableSource:
    try:
        store = ParameterStore.open(db_path)
    except StoreOpenError as exc:
        log.warning("Parameter store unavailable, using built-in catalog: %s", exc)
        return static_source(db_path, error=f"DB error: {exc}")

    try:
        records = store.all_records()
        sizes = store.available_sizes()
    except (StoreError, ValueError) as exc:
        # unreadable rows: same read-only fallback as a failed open
        store.close()
        log.warning("Parameter store %s has unreadable data, using built-in catalog: %s", db_path, exc)
        return static_source(db_path, error=f"DB error: {exc}")

    if not records:
        store.close()
        log.warning("Parameter store %s holds no cable data, using built-in catalog", db_path)
        return static_source(db_path, error=f"DB error: no cable data in {db_path}")

    return CableSource(db_path=str(db_path), records=records, sizes=sizes, store=store)


def records_frame(records: Iterable[CableRecord]) -> pd.DataFrame:
    rows = [[getattr(r, name) for name, _ in CABLE_TABLE_COLUMNS] for r in records]
    df = pd.DataFrame(rows, columns=[header for _, header in CABLE_TABLE_COLUMNS])
    # absent values stay missing (NaN); the size column stays integer
    numeric = df.columns[1:]
    df[numeric] = df[numeric].astype(float)
    return df
