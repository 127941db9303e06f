"""
cable_core: cable parameter store and calculation engine.

- static catalog of 33 kV XLPE conductor parameters (seed + fallback)
- SQLite parameter store, seeded once from the catalog
- three-phase impedance / voltage drop / loss calculation
"""

from .calculator import CalcResult, SystemConfig, calculate
from .catalog import CableRecord, catalog_records, catalog_sizes, empty_record, find_by_size
from .store import (
    DEFAULT_DB_PATH,
    ParameterStore,
    SchemaError,
    SeedError,
    StoreClosedError,
    StoreError,
    StoreOpenError,
)

__all__ = [
    "DEFAULT_DB_PATH",
    "CableRecord",
    "CalcResult",
    "ParameterStore",
    "SchemaError",
    "SeedError",
    "StoreClosedError",
    "StoreError",
    "StoreOpenError",
    "SystemConfig",
    "calculate",
    "catalog_records",
    "catalog_sizes",
    "empty_record",
    "find_by_size",
]
