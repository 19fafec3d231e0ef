"""Load, validate and process stages.

Every stage returns a Result and never raises: failures are reported as one
of the taxonomy values in ``typed_pipeline.common.errors``.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from typed_pipeline.common.constants import (
    DEFAULT_FORBIDDEN_FIELDS,
    DEFAULT_INVALID_VALUE,
    DEFAULT_MIN_LENGTH,
    DEFAULT_PARSE_MARKERS,
    DEFAULT_TASK_NAME,
    EXCERPT_MAX_CHARS,
    VALIDATED_PREFIX,
)
from typed_pipeline.common.errors import (
    ConfigParseError,
    ConfigReadError,
    PipelineError,
    ProcessingError,
    SourceUnavailableError,
    ValidationError,
)
from typed_pipeline.common.logging import log_event
from typed_pipeline.common.models import Config, FinalResult, ValidatedData
from typed_pipeline.common.result import Err, Ok, Result
from typed_pipeline.pipeline.sources import SourceReader

_LOGGER = logging.getLogger("typed_pipeline.stages")


def rejects_markers(markers: Iterable[str]) -> Callable[[str], bool]:
    """Build a well-formedness predicate that fails on any of ``markers``."""
    frozen = tuple(markers)

    def _is_well_formed(content: str) -> bool:
        return not any(marker in content for marker in frozen)

    return _is_well_formed


def _excerpt(content: str) -> str:
    first_line = content.splitlines()[0] if content else ""
    return first_line[:EXCERPT_MAX_CHARS]


def load_config(
    identifier: str,
    *,
    reader: SourceReader,
    is_well_formed: Callable[[str], bool] | None = None,
    encoding: str = "utf-8",
    logger: logging.Logger | None = None,
) -> Result[Config, PipelineError]:
    logger = logger or _LOGGER
    predicate = is_well_formed or rejects_markers(DEFAULT_PARSE_MARKERS)

    try:
        with reader.open(identifier) as handle:
            raw = handle.read()
    except (OSError, ValueError, SourceUnavailableError) as exc:
        # NUL bytes in paths and unparseable URLs surface as ValueError.
        log_event(logger, f"cannot open {identifier}: {exc}", logging.DEBUG, stage="load", source=identifier)
        return Err(ConfigReadError(source_identifier=identifier))

    try:
        content = raw.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        log_event(logger, f"cannot decode {identifier} as {encoding}", logging.DEBUG, stage="load", source=identifier)
        return Err(ConfigParseError(offending_content=f"<not valid {encoding}>", line_number=1))

    if not content or not predicate(content):
        log_event(logger, f"malformed content in {identifier}", logging.DEBUG, stage="load", source=identifier)
        return Err(ConfigParseError(offending_content=_excerpt(content), line_number=1))

    log_event(logger, f"loaded {len(content)} chars from {identifier}", logging.DEBUG, stage="load", source=identifier)
    return Ok(Config(data=content))


def validate_data(
    config: Config,
    *,
    forbidden_fields: Iterable[str] = DEFAULT_FORBIDDEN_FIELDS,
    invalid_value: str = DEFAULT_INVALID_VALUE,
    logger: logging.Logger | None = None,
) -> Result[ValidatedData, PipelineError]:
    logger = logger or _LOGGER
    for field_name in forbidden_fields:
        if field_name in config.data:
            log_event(logger, f"forbidden field {field_name} present", logging.DEBUG, stage="validate")
            return Err(ValidationError(field_name=field_name, invalid_value=invalid_value))

    log_event(logger, "data validated", logging.DEBUG, stage="validate")
    return Ok(ValidatedData(processed_data=VALIDATED_PREFIX + config.data))


def process_data(
    validated: ValidatedData,
    *,
    min_length: int = DEFAULT_MIN_LENGTH,
    task_name: str = DEFAULT_TASK_NAME,
    logger: logging.Logger | None = None,
) -> Result[FinalResult, PipelineError]:
    logger = logger or _LOGGER
    body = validated.processed_data.removeprefix(VALIDATED_PREFIX)
    if len(body) < min_length:
        log_event(logger, f"body of {len(body)} chars is too short", logging.DEBUG, stage="process")
        return Err(
            ProcessingError(
                task_name=task_name,
                details=f"Input data too short for task ({len(body)} < {min_length} chars)",
            )
        )

    log_event(logger, "data processed", logging.DEBUG, stage="process")
    return Ok(FinalResult(result_code=len(validated.processed_data)))
