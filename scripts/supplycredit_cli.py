"""Command line interface for the supplycredit workflow."""
from __future__ import annotations

import argparse
import json
import logging
import logging.config
import os
import sys
from configparser import Error as ConfigParserError
from pathlib import Path
from typing import Iterable, List, Optional

from supplycredit import StageContext, StageRunner, bootstrap, create_default_context, registry
from supplycredit.scoring.config import load_scoring_config
from supplycredit.scoring.engine import CreditScoringEngine
from supplycredit.scoring.repository import (
    ScoreNotFoundError,
    SQLiteRepository,
    SupplierNotFoundError,
)
from supplycredit.scoring.service import ScoringService
from supplycredit.settings import Settings


def load_environment() -> None:
    candidates = []
    if env_file := os.getenv("ENV_FILE"):
        candidates.append(Path(env_file))
    candidates.append(Path(".env"))

    for path in candidates:
        if not path.exists():
            continue
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, _, value = line.partition("=")
                os.environ.setdefault(key.strip(), value.strip().strip('"'))


load_environment()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure logging from an INI file or fall back to basic configuration."""

    config_candidates = []
    if config_env := os.getenv("LOGGING_CONFIG"):
        config_candidates.append(Path(config_env))
    config_candidates.append(Path("logging.ini"))

    for config_path in config_candidates:
        if not config_path.exists():
            continue
        if config_path.suffix.lower() not in {".ini", ".cfg"}:
            print(f"Skipping unsupported logging config {config_path}.", file=sys.stderr)
            continue
        try:
            logging.config.fileConfig(config_path, disable_existing_loggers=False)
            return
        except (ConfigParserError, KeyError, ValueError) as exc:
            print(
                f"Failed to load logging config {config_path}: {exc}. Falling back to basic logging.",
                file=sys.stderr,
            )
            break

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


configure_logging()
bootstrap()
runner = StageRunner(registry)


def _context() -> tuple[Settings, StageContext]:
    settings = Settings.load()
    return settings, create_default_context(settings)


def _service(settings: Settings) -> ScoringService:
    config = load_scoring_config(settings.scoring_config)
    return ScoringService(SQLiteRepository(settings.sqlite_path), CreditScoringEngine(config))


def _run_pipeline(stages: Optional[Iterable[str]]) -> None:
    settings, context = _context()
    try:
        resolved = runner.resolve(None if stages is None else list(stages))
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc
    logger.info(
        "Running stages %s with data directory %s and output %s.",
        resolved,
        settings.data_dir,
        settings.output_dir,
    )
    runner.run(resolved, context)


def _single_stage(stage: str) -> None:
    _, context = _context()
    runner.run([stage], context)


def command_run(args: argparse.Namespace) -> None:
    stages: Optional[List[str]] = args.stages if args.stages else None
    _run_pipeline(stages)


def command_stages(_: argparse.Namespace) -> None:
    print("supplycredit registered stages:")
    for definition in registry:
        print(f"- {definition.name}: {definition.description} ({definition.module})")


def command_ingest(_: argparse.Namespace) -> None:
    _single_stage("ingest")


def command_score(_: argparse.Namespace) -> None:
    _single_stage("score")


def command_export(_: argparse.Namespace) -> None:
    _single_stage("export")


def command_override(args: argparse.Namespace) -> None:
    service = _service(Settings.load())
    try:
        score = service.override_recommendation(args.supplier_id, args.recommendation)
    except ScoreNotFoundError as exc:
        print(f"Error: {exc}. Run the score stage first.", file=sys.stderr)
        raise SystemExit(1) from exc
    print(json.dumps(score.to_dict(), indent=2))


def command_report(args: argparse.Namespace) -> None:
    service = _service(Settings.load())
    try:
        report = service.report_for(args.supplier_id)
    except (SupplierNotFoundError, ScoreNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the supplier credit pre-screening workflow.")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    parser_run = subparsers.add_parser("run", help="Run the full pipeline")
    parser_run.add_argument(
        "stages",
        nargs="*",
        help="Optional ordered list of stages to run instead of all registered stages.",
    )
    parser_run.set_defaults(func=command_run)

    parser_stages = subparsers.add_parser("stages", help="List registered stages")
    parser_stages.set_defaults(func=command_stages)

    for name, func in (
        ("ingest", command_ingest),
        ("score", command_score),
        ("export", command_export),
    ):
        sub = subparsers.add_parser(name, help=f"Run only the {name} stage")
        sub.set_defaults(func=func)

    parser_override = subparsers.add_parser(
        "override", help="Manually set the recommendation of a scored supplier"
    )
    parser_override.add_argument("supplier_id")
    parser_override.add_argument("recommendation", choices=["approved", "pending", "rejected"])
    parser_override.set_defaults(func=command_override)

    parser_report = subparsers.add_parser(
        "report", help="Print the credit report and pricing terms of a supplier as JSON"
    )
    parser_report.add_argument("supplier_id")
    parser_report.set_defaults(func=command_report)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)
    return 0


if __name__ == "__main__":  # pragma: no cover - entry point for CLI usage
    raise SystemExit(main())
