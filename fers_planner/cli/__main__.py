from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from fers_planner.config.loader import ConfigError, load_config
from fers_planner.logging.init import log_summary, set_debug, setup_logging
from fers_planner.models.config_models import PlannerConfig
from fers_planner.models.scenario_inputs import ScenarioInputs
from fers_planner.services.orchestrator import ProcessingError, import_all
from fers_planner.services.preview import build_preview, render_text
from fers_planner.services.summary import render_summary_body

"""CLI entrypoint.

Subcommands:
- ``import FILE... [--base JSON] [--output JSON]``: import intake workbooks and
  write the merged scenario record as JSON
- ``preview JSON [--as-of YYYY-MM-DD]``: print the scenario preview

Exit codes: 0 success, 2 some workbooks failed, 1 fatal error.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


class InputFileError(Exception):
    """A scenario JSON file is missing or malformed."""


def _iso_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {text}") from e


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="fers-planner", description="FERS retirement scenario planner")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=None, help="YAML config file (default: config/planner.yml)")
    sub = p.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import intake workbooks into a scenario record")
    imp.add_argument("files", nargs="+", type=Path, help="Workbooks (.xlsx/.xls) or directories")
    imp.add_argument("--base", type=Path, default=None, help="Existing scenario record (JSON) to merge into")
    imp.add_argument("--output", type=Path, default=None, help="Write the merged record here instead of stdout")

    prev = sub.add_parser("preview", help="Print the retirement preview for a scenario record")
    prev.add_argument("scenario", type=Path, help="Scenario record (JSON)")
    prev.add_argument("--as-of", type=_iso_date, default=None, help="Date used for service-to-date figures")
    return p.parse_args(argv)


def _read_scenario(path: Path) -> ScenarioInputs:
    """Load a stored scenario record.

    Raises:
        InputFileError: the file is missing, not JSON, or not an object
    """
    if not path.is_file():
        raise InputFileError(f"scenario file not found: {path}")
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputFileError(f"invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise InputFileError(f"scenario file must hold a JSON object: {path}")
    return ScenarioInputs.from_mapping(data)


def _run_import(args: argparse.Namespace, cfg: PlannerConfig) -> int:
    logger = setup_logging()
    try:
        base = _read_scenario(args.base) if args.base is not None else ScenarioInputs.from_mapping(None)
    except InputFileError as e:
        logger.error(f"base: {e}")
        return EXIT_FATAL

    try:
        batch = import_all(args.files, base=base, config=cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    payload = json.dumps(batch.record.to_mapping(), indent=2, sort_keys=True)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info(f"scenario written to {args.output}")
    else:
        sys.stdout.write(payload + "\n")

    log_summary(render_summary_body(batch.result))

    if batch.result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _run_preview(args: argparse.Namespace, cfg: PlannerConfig) -> int:
    logger = setup_logging()
    try:
        record = _read_scenario(args.scenario)
    except InputFileError as e:
        logger.error(f"scenario: {e}")
        return EXIT_FATAL
    sys.stdout.write(render_text(build_preview(record, today=args.as_of, config=cfg)) + "\n")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] must not fall back to sys.argv (pytest flags)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=False)

    # JSON goes to stdout on import without --output, so logs move to stderr
    to_stderr = args.command == "import" and args.output is None
    logger = setup_logging(sys.stderr if to_stderr else None)
    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "import":
        return _run_import(args, cfg)
    return _run_preview(args, cfg)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
