"""Source readers that resolve an identifier into raw bytes.

Readers hand out handles through context managers so the load stage can read
inside a ``with`` block and the handle is released on every exit path.
"""

from __future__ import annotations

import io
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Callable, ContextManager, Iterator, Protocol
from urllib.parse import urlparse

from typed_pipeline.common.http import HttpClient, RetryConfig, TimeoutConfig
from typed_pipeline.common.settings import PipelineSettings

REMOTE_SCHEMES = ("http", "https")


class SourceReader(Protocol):
    def open(self, identifier: str) -> ContextManager[IO[bytes]]:
        ...


class FileSourceReader:
    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir = base_dir

    def resolve(self, identifier: str) -> Path:
        path = Path(identifier)
        if self.base_dir is not None and not path.is_absolute():
            return self.base_dir / path
        return path

    def open(self, identifier: str) -> ContextManager[IO[bytes]]:
        return self.resolve(identifier).open("rb")


class HttpSourceReader:
    def __init__(self, client_factory: Callable[[], HttpClient]) -> None:
        self.client_factory = client_factory

    @contextmanager
    def open(self, identifier: str) -> Iterator[IO[bytes]]:
        with self.client_factory() as client:
            payload = client.get_bytes(identifier)
        with io.BytesIO(payload) as handle:
            yield handle


class RoutingSourceReader:
    """Dispatch to the HTTP reader for URLs and to the file reader otherwise."""

    def __init__(self, file_reader: FileSourceReader, http_reader: HttpSourceReader) -> None:
        self.file_reader = file_reader
        self.http_reader = http_reader

    def open(self, identifier: str) -> ContextManager[IO[bytes]]:
        if urlparse(identifier).scheme in REMOTE_SCHEMES:
            return self.http_reader.open(identifier)
        return self.file_reader.open(identifier)


def build_source_reader(settings: PipelineSettings) -> RoutingSourceReader:
    def _client() -> HttpClient:
        return HttpClient(
            timeout=TimeoutConfig(connect=settings.connect_timeout, read=settings.read_timeout),
            retry=RetryConfig(max_attempts=settings.max_attempts),
        )

    return RoutingSourceReader(FileSourceReader(settings.base_dir), HttpSourceReader(_client))
