"""Rendering of a finished pipeline run.

``handle_result`` matches on every declared error kind. The wildcard branch
only fires when a new kind was added to the taxonomy without a matching case
here; it renders a generic message and logs an ``UNEXPECTED_ERROR_KIND``
warning instead of crashing.
"""

from __future__ import annotations

import logging
from typing import Any

from typed_pipeline.common.errors import (
    ConfigParseError,
    ConfigReadError,
    PipelineError,
    ProcessingError,
    ValidationError,
    describe_error,
)
from typed_pipeline.common.logging import log_event
from typed_pipeline.common.models import FinalResult
from typed_pipeline.common.result import Err, Ok, Result

_LOGGER = logging.getLogger("typed_pipeline.handler")


def render_error(error: PipelineError, *, logger: logging.Logger | None = None) -> str:
    match error:
        case ConfigReadError(source_identifier=source):
            return f"Configuration Read Error: Could not open file '{source}'"
        case ConfigParseError(offending_content=content, line_number=line):
            return f"Configuration Parse Error: Malformed content at line {line} (Context: '{content}')"
        case ValidationError(field_name=field_name, invalid_value=value):
            return f"Data Validation Error: Field '{field_name}' has invalid value '{value}'"
        case ProcessingError(task_name=task, details=details):
            return f"Data Processing Error: Task '{task}' failed. Details: {details}"
        case _:
            log_event(
                logger or _LOGGER,
                f"unhandled error kind {type(error).__name__}",
                logging.WARNING,
                event="UNEXPECTED_ERROR_KIND",
                status="error",
                error_kind=type(error).__name__,
            )
            return f"An unexpected error type was encountered: {type(error).__name__}"


def handle_result(
    result: Result[FinalResult, PipelineError],
    *,
    logger: logging.Logger | None = None,
    source: str | None = None,
) -> str:
    logger = logger or _LOGGER
    if isinstance(result, Ok):
        rendering = f"Pipeline Succeeded! Final Result Code: {result.value.result_code}"
        log_event(logger, rendering, source=source, event="PIPELINE_OK", status="ok")
        return rendering

    rendering = f"Pipeline Failed! Error details: {render_error(result.error, logger=logger)}"
    log_event(
        logger,
        rendering,
        logging.ERROR,
        source=source,
        event="PIPELINE_FAIL",
        status="error",
        error_kind=type(result.error).__name__,
    )
    return rendering


def describe_result(result: Result[FinalResult, PipelineError]) -> dict[str, Any]:
    if isinstance(result, Err):
        return {"status": "error", "error": describe_error(result.error)}
    return {"status": "ok", **result.value.to_dict()}
