"""CLI entrypoint for the typed error pipeline."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from typed_pipeline.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from typed_pipeline.common.errors import TypedPipelineError
from typed_pipeline.common.logging import build_logger, close_logger, generate_run_id, log_event
from typed_pipeline.common.result import Ok
from typed_pipeline.common.settings import load_settings
from typed_pipeline.pipeline.composer import run_pipeline
from typed_pipeline.pipeline.demo import run_demo, self_check
from typed_pipeline.pipeline.handler import describe_result, handle_result
from typed_pipeline.pipeline.reports import write_run_summary
from typed_pipeline.pipeline.sources import build_source_reader


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=["run", "demo"])
    parser.add_argument("sources", nargs="*", help="Paths or http(s) URLs to load")
    parser.add_argument("--settings", default=None)
    parser.add_argument("--overlay-settings", default=None)
    parser.add_argument("--data-dir", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--format", default="text", choices=["text", "json"])
    return parser.parse_args(argv)


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, sort_keys=True))


def _emit(args: argparse.Namespace, source: str, result, rendering: str, **extra) -> None:
    if args.format == "json":
        _print_json({"source": source, **extra, **describe_result(result)})
        return
    stream = sys.stdout if isinstance(result, Ok) else sys.stderr
    print(rendering, file=stream)


def _exit_code(outcomes: list) -> int:
    failures = sum(1 for _source, result in outcomes if not isinstance(result, Ok))
    if failures == 0:
        return EXIT_SUCCESS
    if failures == len(outcomes):
        return EXIT_HARD_FAIL
    return EXIT_PARTIAL


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    data_dir = Path(args.data_dir) if args.data_dir else None
    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)

    try:
        try:
            settings = load_settings(
                Path(args.settings) if args.settings else None,
                overlay_path=Path(args.overlay_settings) if args.overlay_settings else None,
            )
        except TypedPipelineError as exc:
            log_event(logger, str(exc), logging.ERROR, run_id=run_id, event="SETTINGS_FAIL", status="error", error_kind=exc.error_code)
            return EXIT_HARD_FAIL

        outcomes = []
        if args.command == "demo":
            for outcome in run_demo(settings=settings, logger=logger, run_id=run_id):
                if args.format == "text":
                    print(f"--- Scenario: {outcome.scenario.name} ---")
                _emit(args, outcome.scenario.filename, outcome.result, outcome.rendering, scenario=outcome.scenario.name)
                outcomes.append((outcome.scenario.filename, outcome.result))
            passed = self_check(settings=settings, logger=logger)
            if args.format == "json":
                _print_json({"self_check": "passed" if passed else "failed"})
            else:
                print(f"self-check {'passed' if passed else 'FAILED'}")
            exit_code = EXIT_SUCCESS if passed else EXIT_HARD_FAIL
        else:
            if not args.sources:
                log_event(logger, "no sources given", logging.ERROR, run_id=run_id, event="USAGE", status="error")
                return EXIT_HARD_FAIL
            reader = build_source_reader(settings)
            for source in args.sources:
                result = run_pipeline(source, settings=settings, reader=reader, logger=logger, run_id=run_id)
                rendering = handle_result(result, logger=logger, source=source)
                _emit(args, source, result, rendering)
                outcomes.append((source, result))
            exit_code = _exit_code(outcomes)

        if data_dir is not None:
            write_run_summary(data_dir, run_id=run_id, outcomes=outcomes)
        return exit_code
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure: {exc!r}",
            logging.ERROR,
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_kind="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except TypedPipelineError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
