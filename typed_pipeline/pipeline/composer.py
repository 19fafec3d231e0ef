"""Left-to-right composition of the fixed stage sequence."""

from __future__ import annotations

import logging
import time
from functools import partial, reduce
from typing import Any, Callable, Sequence

from typed_pipeline.common.constants import STAGES
from typed_pipeline.common.errors import PipelineError
from typed_pipeline.common.logging import log_event
from typed_pipeline.common.models import FinalResult
from typed_pipeline.common.result import Err, Ok, Result
from typed_pipeline.common.settings import PipelineSettings
from typed_pipeline.pipeline.sources import SourceReader, build_source_reader
from typed_pipeline.pipeline.stages import load_config, process_data, rejects_markers, validate_data

Stage = Callable[[Any], Result[Any, PipelineError]]
StageHook = Callable[[str], None]


def compose(stages: Sequence[tuple[str, Stage]], *, on_stage: StageHook | None = None) -> Callable[[Any], Result]:
    """Chain ``stages`` so only ``Ok`` values flow on and the first ``Err`` is returned as is."""

    def _bind(name: str, stage: Stage) -> Stage:
        def _run(value: Any) -> Result:
            if on_stage is not None:
                on_stage(name)
            return stage(value)

        return _run

    bound = [_bind(name, stage) for name, stage in stages]

    def _pipeline(seed: Any) -> Result:
        return reduce(lambda acc, stage: acc.and_then(stage), bound, Ok(seed))

    return _pipeline


def _logged(name: str, stage: Stage, logger: logging.Logger, run_id: str | None, source: str) -> Stage:
    def _run(value: Any) -> Result:
        log_event(logger, "stage start", run_id=run_id, stage=name, source=source, event="STAGE_START", status="ok")
        started = time.perf_counter()
        result = stage(value)
        duration_ms = round((time.perf_counter() - started) * 1000, 3)
        if isinstance(result, Err):
            log_event(
                logger,
                f"stage {name} failed",
                logging.WARNING,
                run_id=run_id,
                stage=name,
                source=source,
                event="STAGE_FAIL",
                status="error",
                duration_ms=duration_ms,
                error_kind=type(result.error).__name__,
            )
        else:
            log_event(
                logger,
                "stage end",
                run_id=run_id,
                stage=name,
                source=source,
                event="STAGE_END",
                status="ok",
                duration_ms=duration_ms,
            )
        return result

    return _run


def build_stages(
    settings: PipelineSettings,
    reader: SourceReader,
    logger: logging.Logger,
) -> list[tuple[str, Stage]]:
    stage_fns = {
        "load": partial(
            load_config,
            reader=reader,
            is_well_formed=rejects_markers(settings.parse_markers),
            encoding=settings.encoding,
            logger=logger,
        ),
        "validate": partial(
            validate_data,
            forbidden_fields=settings.forbidden_fields,
            invalid_value=settings.invalid_value,
            logger=logger,
        ),
        "process": partial(
            process_data,
            min_length=settings.min_length,
            task_name=settings.task_name,
            logger=logger,
        ),
    }
    return [(name, stage_fns[name]) for name in STAGES]


def run_pipeline(
    identifier: str,
    *,
    settings: PipelineSettings | None = None,
    reader: SourceReader | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
    on_stage: StageHook | None = None,
) -> Result[FinalResult, PipelineError]:
    settings = settings or PipelineSettings()
    reader = reader or build_source_reader(settings)
    logger = logger or logging.getLogger("typed_pipeline.composer")

    stages = [
        (name, _logged(name, stage, logger, run_id, identifier))
        for name, stage in build_stages(settings, reader, logger)
    ]
    return compose(stages, on_stage=on_stage)(identifier)
