"""Demonstration scenarios covering success and every error kind."""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from typed_pipeline.common.errors import ConfigReadError, PipelineError
from typed_pipeline.common.logging import log_event
from typed_pipeline.common.models import FinalResult
from typed_pipeline.common.result import Err, Result
from typed_pipeline.common.settings import PipelineSettings
from typed_pipeline.pipeline.composer import run_pipeline
from typed_pipeline.pipeline.handler import handle_result
from typed_pipeline.pipeline.sources import FileSourceReader

SELF_CHECK_SOURCE = "this_file_should_not_exist.txt"


@dataclass(frozen=True)
class Scenario:
    name: str
    filename: str
    content: str | None


# content None means the file is never written.
SCENARIOS = (
    Scenario("Successful Execution", "valid_config.txt", "valid_data_content\n"),
    Scenario("Config Read Error", "non_existent_config.txt", None),
    Scenario("Config Parse Error", "malformed_config.txt", "malformed content"),
    Scenario("Validation Error", "invalid_data_config.txt", "valid_data\ninvalid_field"),
    Scenario("Processing Error", "short_data_config.txt", "short"),
)


@dataclass(frozen=True)
class ScenarioOutcome:
    scenario: Scenario
    result: Result[FinalResult, PipelineError]
    rendering: str


def _write_scenarios(work_dir: Path) -> None:
    for scenario in SCENARIOS:
        if scenario.content is not None:
            (work_dir / scenario.filename).write_text(scenario.content, encoding="utf-8")


def iter_scenarios(
    work_dir: Path,
    *,
    settings: PipelineSettings | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> Iterator[ScenarioOutcome]:
    settings = settings or PipelineSettings()
    logger = logger or logging.getLogger("typed_pipeline.demo")
    reader = FileSourceReader(work_dir)
    _write_scenarios(work_dir)

    for scenario in SCENARIOS:
        log_event(logger, f"scenario: {scenario.name}", run_id=run_id, source=scenario.filename, event="SCENARIO")
        result = run_pipeline(scenario.filename, settings=settings, reader=reader, logger=logger, run_id=run_id)
        rendering = handle_result(result, logger=logger, source=scenario.filename)
        yield ScenarioOutcome(scenario=scenario, result=result, rendering=rendering)


def run_demo(
    *,
    settings: PipelineSettings | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> list[ScenarioOutcome]:
    with tempfile.TemporaryDirectory(prefix="typed-pipeline-demo-") as tmp:
        return list(iter_scenarios(Path(tmp), settings=settings, logger=logger, run_id=run_id))


def self_check(*, settings: PipelineSettings | None = None, logger: logging.Logger | None = None) -> bool:
    """A nonexistent source must surface as ConfigReadError naming that source."""
    result = run_pipeline(SELF_CHECK_SOURCE, settings=settings, reader=FileSourceReader(), logger=logger)
    if not isinstance(result, Err):
        return False
    error = result.error
    return isinstance(error, ConfigReadError) and error.source_identifier == SELF_CHECK_SOURCE
