from __future__ import annotations

import argparse
import json
import sys
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from .config import DEFAULT_TOTAL_PLACES, LOG_LEVEL
from .engine import generate
from .errors import SeatManifestError
from .identifiers import generate_place_ids
from .manifest import compare_manifests
from .models import IdPattern
from .places import parse_place_id
from .storage import load_manifest, load_request, save_json


def _emit(data, output: Optional[str]) -> None:
    if output:
        save_json(data, output)
        print(f"Wrote {output}")
    else:
        print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_generate(args: argparse.Namespace) -> int:
    req = load_request(args.input)
    result = generate(req)
    _emit(result.to_dict(), args.output)
    for w in result.warnings:
        print(f"warning: {w.message}", file=sys.stderr)
    return 0


def cmd_diff(args: argparse.Namespace) -> int:
    diff = compare_manifests(load_manifest(args.old), load_manifest(args.new))
    print(json.dumps(diff.to_dict(), indent=2))
    # diff(1) convention: 1 when the inputs differ
    return 1 if diff.changed else 0


def cmd_parse(args: argparse.Namespace) -> int:
    for place_id in args.place_ids:
        print(json.dumps(parse_place_id(place_id).to_dict()))
    return 0


def cmd_ids(args: argparse.Namespace) -> int:
    cfg = {}
    if args.pattern == IdPattern.grid.value:
        cfg = {"sections": args.sections, "rows_per_section": args.rows_per_section, "seats_per_row": args.seats_per_row}
    for place_id in generate_place_ids(prefix=args.prefix, count=args.count, pattern=args.pattern, pattern_config=cfg):
        print(place_id)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="seat_manifest", description="Venue seat-manifest generator (CLI).")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate", help="Generate a manifest from a request JSON file")
    p_gen.add_argument("--input", required=True, help="Path to the generate request JSON")
    p_gen.add_argument("--output", help="Write the result here instead of stdout")
    p_gen.set_defaults(func=cmd_generate)

    p_diff = sub.add_parser("diff", help="Compare two manifest JSON files")
    p_diff.add_argument("old")
    p_diff.add_argument("new")
    p_diff.set_defaults(func=cmd_diff)

    p_parse = sub.add_parser("parse", help="Guess section/seat tokens inside place identifiers")
    p_parse.add_argument("place_ids", nargs="+")
    p_parse.set_defaults(func=cmd_parse)

    p_ids = sub.add_parser("ids", help="Print generated place identifiers")
    p_ids.add_argument("--count", type=int, default=DEFAULT_TOTAL_PLACES)
    p_ids.add_argument("--prefix", default="")
    p_ids.add_argument("--pattern", choices=[e.value for e in IdPattern if e != IdPattern.custom], default="sequential")
    p_ids.add_argument("--sections", type=int, default=1, help="Grid pattern only")
    p_ids.add_argument("--rows-per-section", type=int, default=10, help="Grid pattern only")
    p_ids.add_argument("--seats-per-row", type=int, default=20, help="Grid pattern only")
    p_ids.set_defaults(func=cmd_ids)

    return p


LOG_FORMAT = " | ".join(
    (
        "<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>",
        "<lvl>{level:<8}</>",
        "<c>{name}:{function}:{line}</>",
        "{message}",
    )
)


def _configure_logging() -> None:
    # replaces loguru's default stderr sink
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=LOG_LEVEL)


def main(argv: Optional[list[str]] = None) -> int:
    _configure_logging()

    p = build_parser()
    args = p.parse_args(argv)
    try:
        return int(args.func(args))
    except (SeatManifestError, ValidationError) as e:
        print(f"Error: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
