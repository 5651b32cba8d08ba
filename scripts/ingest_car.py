# scripts/ingest_car.py
from __future__ import annotations
import argparse, json, logging, os, sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))  # מאפשר import של services/*

from dotenv import load_dotenv

from services.errors import IngestionError
from services.pipeline.ingestion import build_car_context


def _args_to_input(args: argparse.Namespace) -> dict:
    return {
        "vin": args.vin,
        "identity": {"make": args.make, "model": args.model, "year": args.year, "trim": args.trim},
        "color": args.color,
        "mileage": args.mileage,
        "rapid_api_trim_id": args.trim_id,
        "template": args.template,
        "notes": args.notes,
        "certified_pre_owned": args.cpo,
    }


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="AutoSense: build a car context for one dealer car")
    parser.add_argument("--make", type=str, required=True)
    parser.add_argument("--model", type=str, required=True)
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--trim-id", type=int, required=True, help="RapidAPI trim id")
    parser.add_argument("--trim", type=str, default=None, help="dealer trim hint")
    parser.add_argument("--vin", type=str, default=None)
    parser.add_argument("--color", type=str, default=None)
    parser.add_argument("--mileage", type=float, default=None)
    parser.add_argument("--template", type=str, default="Cinematic")
    parser.add_argument("--notes", type=str, default=None)
    parser.add_argument("--cpo", action="store_true", help="certified pre-owned")
    parser.add_argument("--json", action="store_true", help="print the full context as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        context = build_car_context(_args_to_input(args))
    except IngestionError as e:
        print(f"\nINGESTION FAILED: {e.message}", file=sys.stderr)
        for err in e.errors:
            print(f"  - {err}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(context.to_dict(), ensure_ascii=False, indent=2))
        return 0

    ident = context.identity
    perf = context.normalized_specs.performance
    print("\nINGESTION SUCCESSFUL")
    print("-" * 50)
    print(f"Identity: {ident.year} {ident.make} {ident.model} {ident.trim}")
    print(f"Specs: HP={perf.hp}, Torque={perf.torque_nm}nm, Drivetrain={context.normalized_specs.drivetrain}")
    print(f"\nBadges found ({len(context.certifications)}):")
    for b in context.certifications:
        print(f"  - [{b.retrieval_method}] {b.label} ({b.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
