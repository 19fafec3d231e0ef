"""Domain errors and failure typing.

Stage failures are values, not exceptions: each stage returns one of the four
frozen dataclasses below inside an ``Err``. The exception classes at the bottom
belong to the ambient layers (settings, transport) and are converted into
taxonomy values before they can leave a stage.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Union


class _ErrorKind:
    """Gives every taxonomy variant a stable tag without sharing any fields."""

    __slots__ = ()

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class ConfigReadError(_ErrorKind):
    """The input source could not be opened or read."""

    source_identifier: str


@dataclass(frozen=True)
class ConfigParseError(_ErrorKind):
    """Content was read but is structurally invalid."""

    offending_content: str
    line_number: int


@dataclass(frozen=True)
class ValidationError(_ErrorKind):
    """Content parsed but broke a domain rule."""

    field_name: str
    invalid_value: str


@dataclass(frozen=True)
class ProcessingError(_ErrorKind):
    """Validated data failed during the final transformation."""

    task_name: str
    details: str


PipelineError = Union[ConfigReadError, ConfigParseError, ValidationError, ProcessingError]

ERROR_KINDS: tuple[type, ...] = (ConfigReadError, ConfigParseError, ValidationError, ProcessingError)


def describe_error(error: PipelineError) -> dict[str, Any]:
    """Return the externally observable shape of an error: its tag plus fields."""
    if not is_dataclass(error):
        return {"kind": type(error).__name__, "detail": repr(error)}
    return {"kind": type(error).__name__, **asdict(error)}


class TypedPipelineError(Exception):
    """Base class for failures raised by the ambient layers."""

    error_code = "TYPED_PIPELINE_ERROR"


class SettingsError(TypedPipelineError):
    """Raised for invalid or unreadable settings files."""

    error_code = "SETTINGS_ERROR"


class SourceUnavailableError(TypedPipelineError):
    """Raised by source readers when a remote source cannot be fetched."""

    error_code = "SOURCE_UNAVAILABLE"
