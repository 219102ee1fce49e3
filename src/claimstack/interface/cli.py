"""CLI commands for seeding the claims database and resolving claims."""

import argparse
import json
import sys
from pathlib import Path

from ..adapters.sqlite_fact_provider import SqliteFactProvider
from ..config.runtime import get_settings
from ..domain.errors import ClaimsError
from ..logging_config import configure_logging
from ..models.dataset import FactDataset
from ..wiring import build_matrix_assembler, build_resolution_service

# Default path to the demo dataset (project root / data / sample_claims.json)
_DEFAULT_DATASET_PATH = Path(__file__).resolve().parent.parent.parent.parent / "data" / "sample_claims.json"


def load_dataset_from_file(path: Path) -> FactDataset:
    """Load a dataset from a JSON file. Exits on missing file or invalid schema."""
    if not path.exists():
        print(f"Error: dataset file not found: {path}", file=sys.stderr)
        print("Create data/sample_claims.json or pass --file <path>.", file=sys.stderr)
        sys.exit(1)
    try:
        return FactDataset.from_json_file(path)
    except ValueError as e:
        print(f"Error: invalid dataset {path}: {e}", file=sys.stderr)
        sys.exit(1)


def seed_database(file_path: Path | None = None) -> dict[str, int]:
    """Load a JSON dataset and upsert it into the configured SQLite database."""
    settings = get_settings()
    path = file_path if file_path is not None else _DEFAULT_DATASET_PATH
    dataset = load_dataset_from_file(path)
    provider = SqliteFactProvider(settings.claims_db_path, timeout_seconds=settings.sqlite_timeout_seconds)
    return provider.load_dataset(dataset)


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2))


def _run(args, parser) -> None:
    settings = get_settings()
    if args.command == "init-db":
        SqliteFactProvider(settings.claims_db_path, timeout_seconds=settings.sqlite_timeout_seconds)
        _print_json({"db_path": settings.claims_db_path, "initialized": True})
    elif args.command == "seed":
        counts = seed_database(args.file)
        _print_json({"db_path": settings.claims_db_path, "loaded": counts})
    elif args.command == "resolve":
        svc = build_resolution_service(settings)
        claims, trace = svc.resolve_with_trace(args.product_id, args.country_code)
        out = {
            "product_id": args.product_id,
            "country_code": args.country_code,
            "claims": [c.model_dump(mode="json") for c in claims],
        }
        if args.trace:
            out["trace"] = trace
        _print_json(out)
    elif args.command == "matrix":
        assembler = build_matrix_assembler(settings)
        if args.brand:
            result = assembler.resolve_brand_matrix(args.brand, args.country_code, row_limit=args.rows)
        else:
            result = assembler.resolve_matrix(args.product, args.country_code, row_limit=args.rows)
        out = result.model_dump(mode="json")
        for row in out["cells"].values():
            for cell in row.values():
                cell.pop("effective_claim", None)
        out["truncated"] = result.truncated
        _print_json(out)
    elif args.command == "summary":
        svc = build_resolution_service(settings)
        _print_json(svc.summarize(args.product_id, args.country_code).model_dump(mode="json"))
    else:
        parser.print_help()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve product claims per market")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create the SQLite claims schema if missing")

    seed_parser = subparsers.add_parser("seed", help="Load a JSON dataset into the claims database")
    seed_parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help=f"Path to JSON dataset (default: {_DEFAULT_DATASET_PATH})",
    )

    resolve_parser = subparsers.add_parser("resolve", help="Effective claims for one product in one country")
    resolve_parser.add_argument("product_id", help="Product identifier")
    resolve_parser.add_argument("country_code", help="Market code, e.g. GB")
    resolve_parser.add_argument("--trace", action="store_true", help="Include warnings and dedupe decisions")

    matrix_parser = subparsers.add_parser("matrix", help="Claim-text x product matrix for one country")
    matrix_parser.add_argument("country_code", help="Market code, e.g. GB")
    target = matrix_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--product", action="append", default=None, help="Product id (repeatable)")
    target.add_argument("--brand", type=str, default=None, help="Use every product of this brand")
    matrix_parser.add_argument("--rows", type=int, default=None, help="Row limit (clamped to the hard cap)")

    summary_parser = subparsers.add_parser("summary", help="Grouped plain-text claims summary")
    summary_parser.add_argument("product_id", help="Product identifier")
    summary_parser.add_argument("country_code", help="Market code, e.g. GB")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(get_settings().log_level)
    try:
        _run(args, parser)
    except (ClaimsError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
