from __future__ import annotations

import math
from dataclasses import dataclass, fields

# Legacy flat-file marker for "no measured value"; never a physical reading.
ABSENT_SENTINEL = -1.0


@dataclass(frozen=True)
class CableRecord:
    size_mm2: int

    max_dc_resistance_20c_ohm_per_km: float = 0.0
    ac_resistance_trefoil_touching_ohm_per_km: float = 0.0
    ac_resistance_flat_touching_ohm_per_km: float = 0.0
    ac_resistance_flat_spaced_ohm_per_km: float | None = None
    reactance_trefoil_touching_ohm_per_km: float = 0.0
    reactance_flat_touching_ohm_per_km: float = 0.0
    reactance_flat_spaced_ohm_per_km: float = 0.0
    insulation_resistance_20c_mohm_km: float = 0.0
    capacitance_uf_per_km: float = 0.0
    charging_current_a_per_km: float = 0.0
    dielectric_loss_w_per_km: float = 0.0
    max_dielectric_stress_kv_per_mm: float = 0.0
    screen_dc_resistance_20c_ohm_per_km: float = 0.0
    zero_seq_resistance_ohm_per_km: float = 0.0
    zero_seq_reactance_ohm_per_km: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.size_mm2, int) or isinstance(self.size_mm2, bool):
            raise TypeError("size_mm2 must be an integer")
        if self.size_mm2 < 0:
            raise ValueError("size_mm2 must be >= 0")

        # negative flat-spaced R (ABSENT_SENTINEL) means "not measured"
        spaced = self.ac_resistance_flat_spaced_ohm_per_km
        if spaced is not None and float(spaced) < 0.0:
            object.__setattr__(self, "ac_resistance_flat_spaced_ohm_per_km", None)

        for name in COEFFICIENT_FIELDS:
            value = getattr(self, name)
            if value is None:
                if name == OPTIONAL_FIELD:
                    continue
                raise ValueError(f"{name} is required (size_mm2={self.size_mm2})")
            value = float(value)
            if math.isnan(value) or math.isinf(value):
                raise ValueError(f"{name} must be finite (size_mm2={self.size_mm2})")
            if value < 0.0:
                raise ValueError(f"{name} must be >= 0 (size_mm2={self.size_mm2})")
            object.__setattr__(self, name, value)

    @classmethod
    def empty(cls) -> CableRecord:
        """Record meaning "no cable selected": size 0, every coefficient zero."""
        return cls(size_mm2=0, ac_resistance_flat_spaced_ohm_per_km=0.0)

    @property
    def is_empty(self) -> bool:
        return self.size_mm2 == 0

    def coefficients(self) -> dict[str, float | None]:
        return {name: getattr(self, name) for name in COEFFICIENT_FIELDS}


OPTIONAL_FIELD = "ac_resistance_flat_spaced_ohm_per_km"
COEFFICIENT_FIELDS: tuple[str, ...] = tuple(
    f.name for f in fields(CableRecord) if f.name != "size_mm2"
)

# 33 kV XLPE, copper conductor. Column order follows CableRecord.
CABLE_CATALOG: tuple[CableRecord, ...] = (
    CableRecord(50, 0.387, 0.494, 0.494, None, 0.163, 0.178, 0.224, 18000, 0.133, 0.796, 60.5, 4.05, 0.372, 0.759, 0.0999),
    CableRecord(70, 0.268, 0.342, 0.342, None, 0.154, 0.169, 0.215, 16000, 0.148, 0.883, 67.1, 3.82, 0.263, 0.531, 0.0919),
    CableRecord(95, 0.193, 0.247, 0.247, None, 0.143, 0.158, 0.204, 15000, 0.165, 0.984, 74.8, 3.61, 0.263, 0.457, 0.0817),
    CableRecord(120, 0.153, 0.195, 0.195, None, 0.137, 0.153, 0.198, 14000, 0.179, 1.07, 81.1, 3.48, 0.263, 0.416, 0.0767),
    CableRecord(150, 0.124, 0.159, 0.159, None, 0.133, 0.148, 0.194, 13000, 0.191, 1.14, 86.8, 3.38, 0.264, 0.369, 0.0731),
    CableRecord(185, 0.0991, 0.127, 0.127, None, 0.129, 0.144, 0.190, 12000, 0.205, 1.23, 93.2, 3.29, 0.264, 0.364, 0.0693),
    CableRecord(240, 0.0754, 0.0976, 0.0972, None, 0.124, 0.139, 0.185, 11000, 0.227, 1.35, 103.0, 3.17, 0.263, 0.340, 0.0645),
    CableRecord(300, 0.0601, 0.0786, 0.0779, None, 0.120, 0.135, 0.181, 9800, 0.247, 1.48, 112.0, 3.09, 0.264, 0.325, 0.0612),
    CableRecord(400, 0.0470, 0.0625, 0.0616, None, 0.115, 0.130, 0.176, 8900, 0.272, 1.62, 123.0, 3.00, 0.263, 0.312, 0.0564),
    CableRecord(500, 0.0366, 0.0499, 0.0487, None, 0.111, 0.126, 0.172, 8100, 0.297, 1.77, 135.0, 2.93, 0.263, 0.302, 0.0531),
    CableRecord(630, 0.0283, 0.0403, 0.0387, None, 0.108, 0.123, 0.169, 7300, 0.329, 1.96, 149.0, 2.86, 0.263, 0.294, 0.0504),
    CableRecord(800, 0.0221, 0.0336, 0.0315, None, 0.102, 0.117, 0.163, 6300, 0.381, 2.27, 173.0, 2.78, 0.263, 0.289, 0.0452),
    CableRecord(1000, 0.0182, 0.0245, 0.0240, None, 0.100, 0.115, 0.161, 5600, 0.427, 2.55, 194.0, 2.72, 0.263, 0.282, 0.0441),
    CableRecord(1200, 0.0150, 0.0207, 0.0201, None, 0.0984, 0.114, 0.159, 5200, 0.461, 2.75, 209.0, 2.68, 0.263, 0.279, 0.0426),
)


def catalog_records() -> list[CableRecord]:
    return sorted(CABLE_CATALOG, key=lambda r: r.size_mm2)


def catalog_sizes() -> list[int]:
    return [r.size_mm2 for r in catalog_records()]


def find_by_size(size_mm2: int) -> CableRecord | None:
    for record in CABLE_CATALOG:
        if record.size_mm2 == size_mm2:
            return record
    return None


def empty_record() -> CableRecord:
    return CableRecord.empty()
