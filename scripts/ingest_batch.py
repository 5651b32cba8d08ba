# scripts/ingest_batch.py
"""
Batch ingestion: CSV of dealer cars -> JSON lines of car contexts.

Expected columns: make, model, year, rapid_api_trim_id
Optional: vin, trim, color, mileage, template, notes, certified_pre_owned
"""
from __future__ import annotations
import argparse, json, logging, os, sys
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

sys.path.append(os.path.dirname(os.path.dirname(__file__)))  # מאפשר import של services/*

from dotenv import load_dotenv

from services.errors import IngestionError
from services.pipeline.ingestion import IngestionService

logger = logging.getLogger("ingest_batch")

REQUIRED_COLUMNS = ["make", "model", "year", "rapid_api_trim_id"]
OPTIONAL_COLUMNS = ["vin", "trim", "color", "mileage", "template", "notes", "certified_pre_owned"]


def _cell(row: pd.Series, col: str) -> Optional[Any]:
    v = row.get(col)
    if v is None or (not isinstance(v, str) and pd.isna(v)):
        return None
    # numpy scalars -> python
    return v.item() if hasattr(v, "item") else v


def row_to_input(row: pd.Series) -> Dict[str, Any]:
    return {
        "vin": _cell(row, "vin"),
        "identity": {
            "make": _cell(row, "make"),
            "model": _cell(row, "model"),
            "year": _cell(row, "year"),
            "trim": _cell(row, "trim"),
        },
        "color": _cell(row, "color"),
        "mileage": _cell(row, "mileage"),
        "rapid_api_trim_id": _cell(row, "rapid_api_trim_id"),
        "template": _cell(row, "template"),
        "notes": _cell(row, "notes"),
        "certified_pre_owned": _cell(row, "certified_pre_owned") or False,
    }


def load_inputs(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise SystemExit(f"Missing columns in {path}: {missing}")
    for c in OPTIONAL_COLUMNS:
        if c not in df.columns:
            df[c] = None
    return df


def run_batch(df: pd.DataFrame, service: IngestionService, out_path: Path) -> pd.DataFrame:
    """Writes one JSON line per successful car; returns a status table (one row per input)."""
    status = []
    with open(out_path, "w", encoding="utf-8") as f:
        for idx, row in df.iterrows():
            try:
                ctx = service.build_car_context(row_to_input(row))
            except IngestionError as e:
                # שורה אחת שנכשלה לא עוצרת את כל הקובץ
                logger.error("row %s failed: %s", idx, e)
                status.append({"row": idx, "ok": False, "error": str(e), "certifications": 0})
                continue
            f.write(json.dumps(ctx.to_dict(), ensure_ascii=False) + "\n")
            status.append({"row": idx, "ok": True, "error": None,
                           "certifications": len(ctx.certifications)})
    return pd.DataFrame(status, columns=["row", "ok", "error", "certifications"])


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="AutoSense: batch car context ingestion")
    parser.add_argument("inputs", type=Path, help="CSV of dealer cars")
    parser.add_argument("--out", type=Path, default=Path("car_contexts.jsonl"))
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    df = load_inputs(args.inputs)
    print(f"Loaded {len(df)} cars from {args.inputs}")

    summary = run_batch(df, IngestionService(), args.out)
    ok = int(summary["ok"].sum()) if not summary.empty else 0
    print(f"\n{ok}/{len(summary)} contexts written to {args.out}")
    if ok < len(summary):
        print(summary[~summary["ok"]].to_string(index=False))
    return 0 if ok == len(summary) else 1


if __name__ == "__main__":
    sys.exit(main())
