"""Command-line entry point.

Usage:
  markforge digest "acme|technology|1700000000000|abc123"
  markforge params acme --category technology --salt abc123 --timestamp 1700000000000
  markforge score logo.svg --digest <64-hex>
  markforge registry list acme
  markforge registry clear
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from markforge.config import settings
from markforge.engine.digest import Digester, generate_hash_input, is_digest, select_backend
from markforge.engine.parameters import derive_parameters
from markforge.engine.registry import DedupRegistry, get_registry
from markforge.engine.scoring import rejection_reasons, score_artifact
from markforge.models.enums import LogoCategory

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _cmd_digest(args: argparse.Namespace) -> int:
    backend = select_backend(prefer_platform=args.backend == "platform")
    print(asyncio.run(Digester(backend).digest(args.message)))
    return 0


def _cmd_params(args: argparse.Namespace) -> int:
    clock = (lambda: args.timestamp) if args.timestamp is not None else None
    hash_input = generate_hash_input(args.name, args.category, args.salt, clock=clock)
    digester = Digester(select_backend(settings.prefer_platform_digest))
    digest = digester.digest_input(hash_input)
    params = derive_parameters(digest)

    if args.json:
        payload = {
            "input": hash_input.message,
            "digest": digest,
            "params": params.to_dict(),
        }
        print(json.dumps(payload, indent=2))
        return 0

    print(f"input   {hash_input.message}")
    print(f"digest  {digest}")
    for name, value in params.to_dict().items():
        print(f"  {name:<22} {value}")
    return 0


def _cmd_score(args: argparse.Namespace) -> int:
    if not is_digest(args.digest):
        print(f"error: not a 64-char hex digest: {args.digest}", file=sys.stderr)
        return 2
    try:
        artifact = Path(args.file).read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    metrics = score_artifact(artifact, derive_parameters(args.digest))
    print(f"score  {metrics.score}")
    for name, value in metrics.sub_scores().items():
        print(f"  {name:<24} {value}")
    for reason in rejection_reasons(metrics, args.threshold):
        print(f"  below {reason.threshold:g}: {reason.reason} = {reason.value:g}")
    return 0


def _cmd_registry(args: argparse.Namespace, registry: DedupRegistry) -> int:
    if args.action == "clear":
        registry.clear()
        print("registry cleared")
        return 0

    records = registry.for_brand(args.name) if args.name else registry.records()
    for r in records:
        print(f"{r.digest[:16]}  {r.brand_name:<20} {r.algorithm_id:<16} v{r.variant_index}  q={r.quality_score}")
    print(f"{len(records)} record(s)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="markforge", description="Parametric logo generation engine")
    sub = parser.add_subparsers(dest="command", required=True)

    p_digest = sub.add_parser("digest", help="SHA-256 digest of a message")
    p_digest.add_argument("message")
    p_digest.add_argument("--backend", choices=["platform", "pure"], default="platform")

    p_params = sub.add_parser("params", help="Derive design parameters for a brand")
    p_params.add_argument("name")
    p_params.add_argument(
        "--category",
        default=LogoCategory.GENERAL.value,
        help=f"Any string; known: {', '.join(c.value for c in LogoCategory)}",
    )
    p_params.add_argument("--salt", default=None, help="Reuse a salt to regenerate a design")
    p_params.add_argument("--timestamp", type=int, default=None, help="Milliseconds since the epoch")
    p_params.add_argument("--json", action="store_true")

    p_score = sub.add_parser("score", help="Score an SVG file against a digest's parameters")
    p_score.add_argument("file")
    p_score.add_argument("--digest", required=True)
    p_score.add_argument("--threshold", type=int, default=settings.quality_threshold)

    p_registry = sub.add_parser("registry", help="Inspect or clear the dedup registry")
    p_registry.add_argument("action", choices=["list", "clear"])
    p_registry.add_argument("name", nargs="?", default=None)

    return parser


def main(argv: list[str] | None = None, registry: DedupRegistry | None = None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)

    if args.command == "digest":
        return _cmd_digest(args)
    if args.command == "params":
        return _cmd_params(args)
    if args.command == "score":
        return _cmd_score(args)
    return _cmd_registry(args, registry or get_registry())


if __name__ == "__main__":
    sys.exit(main())
