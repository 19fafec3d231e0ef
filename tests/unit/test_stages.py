import pytest

from typed_pipeline.common.errors import ConfigParseError, ConfigReadError, ProcessingError, ValidationError
from typed_pipeline.common.models import Config, FinalResult, ValidatedData
from typed_pipeline.common.result import Err, Ok
from typed_pipeline.common.settings import PipelineSettings
from typed_pipeline.pipeline.sources import build_source_reader
from typed_pipeline.pipeline.stages import load_config, process_data, rejects_markers, validate_data


def test_load_config_returns_content(memory_reader):
    reader = memory_reader({"a.txt": "valid_data_content"})
    assert load_config("a.txt", reader=reader) == Ok(Config(data="valid_data_content"))


def test_load_config_missing_source_yields_read_error(memory_reader):
    reader = memory_reader({})
    assert load_config("missing.txt", reader=reader) == Err(ConfigReadError(source_identifier="missing.txt"))


def test_load_config_read_failure_closes_handle(memory_reader):
    reader = memory_reader({"a.txt": "content"}, failing_reads={"a.txt"})
    result = load_config("a.txt", reader=reader)
    assert result == Err(ConfigReadError(source_identifier="a.txt"))
    assert reader.opened[0].closed is True


def test_load_config_closes_handle_on_success(memory_reader):
    reader = memory_reader({"a.txt": "content here"})
    load_config("a.txt", reader=reader)
    assert reader.opened[0].closed is True


def test_load_config_empty_content_is_parse_error(memory_reader):
    reader = memory_reader({"empty.txt": ""})
    assert load_config("empty.txt", reader=reader) == Err(ConfigParseError(offending_content="", line_number=1))


def test_load_config_marker_is_parse_error(memory_reader):
    reader = memory_reader({"bad.txt": "malformed content\nsecond line"})
    result = load_config("bad.txt", reader=reader)
    assert result == Err(ConfigParseError(offending_content="malformed content", line_number=1))


def test_load_config_uses_caller_predicate(memory_reader):
    reader = memory_reader({"a.txt": "key: value"})
    result = load_config("a.txt", reader=reader, is_well_formed=lambda content: ":" not in content)
    assert isinstance(result, Err)
    assert isinstance(result.error, ConfigParseError)


def test_load_config_undecodable_bytes_is_parse_error(memory_reader):
    reader = memory_reader({"bin.dat": b"\xff\xfe\xfa"})
    result = load_config("bin.dat", reader=reader)
    assert result == Err(ConfigParseError(offending_content="<not valid utf-8>", line_number=1))


def test_rejects_markers_predicate():
    predicate = rejects_markers(["bad", "worse"])
    assert predicate("fine") is True
    assert predicate("this is worse") is False


def test_validate_data_prefixes_payload():
    assert validate_data(Config(data="abc")) == Ok(ValidatedData(processed_data="Validated: abc"))


def test_validate_data_rejects_forbidden_field():
    result = validate_data(Config(data="valid_data\ninvalid_field"))
    assert result == Err(ValidationError(field_name="invalid_field", invalid_value="contains disallowed value"))


def test_validate_data_custom_rules():
    result = validate_data(Config(data="secret=1"), forbidden_fields=("secret",), invalid_value="not allowed")
    assert result == Err(ValidationError(field_name="secret", invalid_value="not allowed"))


def test_process_data_returns_length_of_processed_payload():
    result = process_data(ValidatedData(processed_data="Validated: valid_data_content\n"))
    assert result == Ok(FinalResult(result_code=30))


def test_process_data_rejects_short_body():
    result = process_data(ValidatedData(processed_data="Validated: short"))
    assert isinstance(result, Err)
    assert result.error == ProcessingError(
        task_name="Data Processing",
        details="Input data too short for task (5 < 10 chars)",
    )


def test_process_data_threshold_is_inclusive():
    assert process_data(ValidatedData(processed_data="Validated: 0123456789")) == Ok(FinalResult(result_code=21))


@pytest.mark.parametrize("identifier", ["nul\x00byte.txt", "http://[broken/x"])
def test_load_config_invalid_identifiers_are_read_errors(tmp_path, identifier):
    reader = build_source_reader(PipelineSettings(base_dir=tmp_path))
    assert load_config(identifier, reader=reader) == Err(ConfigReadError(source_identifier=identifier))


def test_load_config_unknown_encoding_is_parse_error(memory_reader):
    reader = memory_reader({"a.txt": "content here"})
    result = load_config("a.txt", reader=reader, encoding="no-such-codec")
    assert result == Err(ConfigParseError(offending_content="<not valid no-such-codec>", line_number=1))
