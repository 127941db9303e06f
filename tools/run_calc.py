#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Allow running as "python tools/run_calc.py" (so repo root is importable)
sys.path.insert(0, str(ROOT))

from app.db import open_cable_source, static_source  # noqa: E402
from app.validation import InputParseError, parse_system_config  # noqa: E402
from cable_core.calculator import ARRANGEMENT_LABELS, ARRANGEMENTS, calculate  # noqa: E402
from cable_core.store import DEFAULT_DB_PATH  # noqa: E402

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        description="Cable impedance, voltage drop and losses for one 33 kV XLPE cable run."
    )
    ap.add_argument("--db", default=DEFAULT_DB_PATH, help=f"Path to SQLite DB (default: {DEFAULT_DB_PATH}).")
    ap.add_argument("--no-db", action="store_true", help="Use the built-in cable catalog, do not open the DB.")
    ap.add_argument("--voltage-kv", default="33.0", help="Line-to-line voltage, kV (default: 33).")
    ap.add_argument("--power-mva", default="10.0", help="Apparent power, MVA (default: 10).")
    ap.add_argument("--pf", default="0.95", help="Power factor (default: 0.95).")
    ap.add_argument("--length-km", default="1.0", help="Cable length, km (default: 1).")
    ap.add_argument(
        "--arrangement",
        choices=ARRANGEMENTS,
        default=ARRANGEMENTS[0],
        help="Conductor arrangement (default: TREFOIL_TOUCHING).",
    )
    ap.add_argument("--size-mm2", default="240", help="Conductor size, mm² (default: 240).")
    ap.add_argument("--list-sizes", action="store_true", help="Print available conductor sizes and exit.")
    ap.add_argument("--verbose", action="store_true", help="Log store activity to stderr.")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    source = static_source(args.db) if args.no_db else open_cable_source(args.db)
    try:
        if source.error:
            print(f"[run_calc] {source.error}; using built-in catalog", file=sys.stderr)

        if args.list_sizes:
            print("sizes_mm2:", " ".join(str(s) for s in source.sizes))
            return 0

        try:
            config = parse_system_config(
                {
                    "voltage_kv": args.voltage_kv,
                    "power_mva": args.power_mva,
                    "power_factor": args.pf,
                    "length_km": args.length_km,
                    "arrangement": args.arrangement,
                    "size_mm2": args.size_mm2,
                }
            )
        except InputParseError as exc:
            for msg in exc.errors:
                print(f"[run_calc] {msg}", file=sys.stderr)
            return 2

        record = source.record_by_size(config.size_mm2)
        if record.is_empty:
            print(f"[run_calc] size not found: {config.size_mm2} mm2", file=sys.stderr)
        res = calculate(config, record)

        print("OK")
        print("source:", source.source_label())
        print("cable:", f"{config.size_mm2} mm2", ARRANGEMENT_LABELS[config.arrangement])
        print("length_km:", config.length_km)
        print("r_ohm:", round(res.r_ohm, 6))
        print("x_ohm:", round(res.x_ohm, 6))
        print("z_ohm:", round(res.z_ohm, 6))
        print("current_a:", round(res.current_a, 3))
        print("p_mw:", round(res.p_mw, 6))
        print("q_mvar:", round(res.q_mvar, 6))
        print("du_v:", round(res.du_v, 3))
        print("du_pct:", round(res.du_pct, 4))
        print("losses_kw:", round(res.losses_kw, 4))
        print("diel_loss_kw:", round(res.diel_loss_kw, 4))
        print("losses_pct:", round(res.losses_pct, 4))
        print("charging_a:", round(res.charging_a, 4))
        return 0
    finally:
        source.close()


if __name__ == "__main__":
    raise SystemExit(main())
