import json
import logging
from pathlib import Path

from typed_pipeline.common.constants import JSON_LOG_FIELDS
from typed_pipeline.common.logging import JsonLineFormatter, build_logger, close_logger, generate_run_id, log_event


def test_json_line_formatter_has_stable_fields():
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "stage failed", None, None)
    record.stage = "validate"
    record.error_kind = "ValidationError"

    payload = json.loads(JsonLineFormatter().format(record))

    assert set(JSON_LOG_FIELDS) <= set(payload)
    assert payload["stage"] == "validate"
    assert payload["error_kind"] == "ValidationError"
    assert payload["level"] == "WARNING"
    assert payload["message"] == "stage failed"
    assert payload["run_id"] is None


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("run-log", data_dir=tmp_path, level="info")
    log_event(logger, "stage start", run_id="run-log", stage="load", event="STAGE_START", status="ok")
    close_logger(logger)

    lines = (tmp_path / "run_meta" / "run-log.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["event"] == "STAGE_START"
    assert logger.handlers == []


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")
