import logging
from dataclasses import dataclass

import pytest

from typed_pipeline.common.errors import ConfigParseError, ConfigReadError, ProcessingError, ValidationError
from typed_pipeline.common.models import FinalResult
from typed_pipeline.common.result import Err, Ok
from typed_pipeline.pipeline.handler import describe_result, handle_result, render_error


@dataclass(frozen=True)
class SchedulingError:
    slot: str


def test_handle_success():
    assert handle_result(Ok(FinalResult(result_code=30))) == "Pipeline Succeeded! Final Result Code: 30"


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ConfigReadError("missing.txt"), "Configuration Read Error: Could not open file 'missing.txt'"),
        (
            ConfigParseError("malformed content", 1),
            "Configuration Parse Error: Malformed content at line 1 (Context: 'malformed content')",
        ),
        (
            ValidationError("invalid_field", "contains disallowed value"),
            "Data Validation Error: Field 'invalid_field' has invalid value 'contains disallowed value'",
        ),
        (
            ProcessingError("Data Processing", "Input data too short for task"),
            "Data Processing Error: Task 'Data Processing' failed. Details: Input data too short for task",
        ),
    ],
)
def test_each_error_kind_renders_its_fields(error, expected):
    assert render_error(error) == expected
    assert handle_result(Err(error)) == f"Pipeline Failed! Error details: {expected}"


def test_unknown_error_kind_falls_back_with_warning(caplog):
    logger = logging.getLogger("test.handler")
    with caplog.at_level(logging.WARNING, logger="test.handler"):
        rendering = handle_result(Err(SchedulingError(slot="late")), logger=logger)

    assert rendering.endswith("An unexpected error type was encountered: SchedulingError")
    markers = [getattr(record, "event", None) for record in caplog.records]
    assert "UNEXPECTED_ERROR_KIND" in markers


def test_handler_does_not_mutate_result():
    result = Err(ValidationError("f", "v"))
    handle_result(result)
    assert result == Err(ValidationError("f", "v"))


def test_describe_result_shapes():
    assert describe_result(Ok(FinalResult(result_code=7))) == {"status": "ok", "result_code": 7}
    assert describe_result(Err(ConfigReadError("a"))) == {
        "status": "error",
        "error": {"kind": "ConfigReadError", "source_identifier": "a"},
    }
