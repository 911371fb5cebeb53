#!/usr/bin/env python3
"""
RemedyPilot CLI

Commands:
    remedypilot evaluate situation.json --domain eviction-defense --jurisdiction TN
    remedypilot jurisdictions [--domain criminal-relief]
    remedypilot [--packs-dir DIR] validate-packs [--lenient]
    remedypilot serve [--host HOST] [--port PORT]
"""
from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Optional

import yaml

from . import config
from .engine import PolicyProvider, coerce_domain, evaluate
from .exceptions import (
    PolicyLoadError,
    PolicyValidationError,
    PolicyVersionMismatch,
    RemedyPilotError,
)
from .logs import configure_logging
from .packs import PolicyPackLoader, discover_packs


def _read_situation(source: str):
    if source == "-":
        return yaml.safe_load(sys.stdin)
    with open(source, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _print_error(error: RemedyPilotError) -> None:
    print(json.dumps({"error": error.to_dict()}, indent=2, default=str), file=sys.stderr)


# =============================================================================
# Commands
# =============================================================================

def cmd_evaluate(args: argparse.Namespace) -> int:
    """Evaluate one situation file and print the verdict as JSON."""
    try:
        raw = _read_situation(args.file)
    except (OSError, yaml.YAMLError) as e:
        print(f"Could not read situation from {args.file}: {e}", file=sys.stderr)
        return 2

    provider = PolicyProvider(packs_dir=args.packs_dir)
    try:
        verdict = evaluate(
            raw,
            domain=args.domain,
            jurisdiction=args.jurisdiction,
            provider=provider,
            as_of=args.as_of,
        )
    except RemedyPilotError as e:
        _print_error(e)
        return 2

    payload = verdict.to_dict()
    if args.hash:
        payload["verdictHash"] = verdict.fingerprint()
    print(json.dumps(payload, indent=2 if args.pretty else None))
    return 0


def cmd_jurisdictions(args: argparse.Namespace) -> int:
    """List registered jurisdiction packs."""
    provider = PolicyProvider(packs_dir=args.packs_dir)
    try:
        wanted = coerce_domain(args.domain) if args.domain else None
        keys = [k for k in provider.registered_keys() if wanted is None or k[0] is wanted]
    except RemedyPilotError as e:
        _print_error(e)
        return 2

    print(f"{'Domain':<20} {'Code':<6}")
    print("-" * 26)
    for domain, code in keys:
        print(f"{domain.value:<20} {code:<6}")
    print("-" * 26)
    print(f"{len(keys)} packs")
    return 0


def cmd_validate_packs(args: argparse.Namespace) -> int:
    """Validate every pack and report detailed errors."""
    registry = discover_packs(args.packs_dir)
    loader = PolicyPackLoader(strict_version=not args.lenient)

    valid = []
    invalid = []

    for (domain, code), path in sorted(registry.items(), key=lambda item: str(item[1])):
        print(f"\n{'=' * 60}")
        print(f"Validating: {domain.value}/{path.name}")
        print("=" * 60)

        try:
            policy = loader.load(path)
        except PolicyValidationError as e:
            print("  [ERROR] Validation failed")
            print(f"\n  Message: {e.message}")
            errors = e.details.get("errors")
            if isinstance(errors, list):
                print(f"\n  Errors ({len(errors)} total):")
                for i, err in enumerate(errors[:20], 1):
                    loc = " -> ".join(str(x) for x in err.get("loc", []))
                    print(f"\n    {i}. Location: {loc}")
                    print(f"       Message: {err.get('msg', 'Unknown')}")
                    print(f"       Type: {err.get('type', '')}")
                if len(errors) > 20:
                    print(f"\n    ... and {len(errors) - 20} more errors")
            elif errors:
                print(f"\n  Error details: {errors}")
            invalid.append((path, e.message))
            continue
        except (PolicyLoadError, PolicyVersionMismatch) as e:
            print(f"  [ERROR] {e.message}")
            invalid.append((path, e.message))
            continue

        if policy.key != (domain, code):
            message = f"declares {policy.domain.value}/{policy.code}, expected {domain.value}/{code}"
            print(f"  [ERROR] Pack {message}")
            invalid.append((path, message))
            continue

        print(f"  [OK] {policy.name} version {policy.version}")
        print(f"       {len(policy.classification_rules)} classification rules, "
              f"{len(policy.categories)} categories, {len(policy.blocking_rules)} blocking rules")
        valid.append(path)

    print(f"\n{'=' * 60}")
    print(f"SUMMARY: {len(valid)} valid, {len(invalid)} invalid")
    print("=" * 60)
    for path, message in invalid:
        print(f"  - {path}: {message}")

    if not registry:
        print(f"No packs found under {args.packs_dir}")
        return 1
    return 1 if invalid else 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP service."""
    import uvicorn

    uvicorn.run("remedypilot.api.main:app", host=args.host, port=args.port)
    return 0


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="RemedyPilot legal situation evaluation CLI",
        prog="remedypilot",
    )
    parser.add_argument(
        "--packs-dir",
        type=Path,
        default=config.RP_PACKS_DIR,
        help="Directory of <domain>/<code>.yaml jurisdiction packs",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for messages written to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Evaluate command
    eval_parser = subparsers.add_parser("evaluate", help="Evaluate a situation file (JSON or YAML)")
    eval_parser.add_argument("file", help="Situation file, or - for stdin")
    eval_parser.add_argument("--domain", help="criminal-relief or eviction-defense")
    eval_parser.add_argument("--jurisdiction", help="Jurisdiction code, e.g. TN")
    eval_parser.add_argument("--as-of", type=date.fromisoformat, help="Evaluate as of YYYY-MM-DD")
    eval_parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    eval_parser.add_argument("--hash", action="store_true", help="Include the verdict content hash")
    eval_parser.set_defaults(func=cmd_evaluate)

    # Jurisdictions command
    jur_parser = subparsers.add_parser("jurisdictions", help="List registered jurisdiction packs")
    jur_parser.add_argument("--domain", help="Only list packs for this domain")
    jur_parser.set_defaults(func=cmd_jurisdictions)

    # Validate command
    val_parser = subparsers.add_parser("validate-packs", help="Validate every jurisdiction pack")
    val_parser.add_argument("--lenient", action="store_true", help="Skip the schema major-version check")
    val_parser.set_defaults(func=cmd_validate_packs)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=config.RP_HOST)
    serve_parser.add_argument("--port", type=int, default=config.RP_PORT)
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
