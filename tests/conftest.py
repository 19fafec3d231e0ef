from __future__ import annotations

import io

import pytest


class TrackingHandle(io.BytesIO):
    def __init__(self, payload: bytes, fail_read: bool = False):
        super().__init__(payload)
        self.fail_read = fail_read

    def read(self, *args):
        if self.fail_read:
            raise OSError("disk gone")
        return super().read(*args)


class MemorySourceReader:
    """In-memory sources keyed by identifier; missing keys behave like missing files."""

    def __init__(self, sources: dict[str, bytes | str], failing_reads: set[str] | None = None):
        self.sources = {
            key: value.encode("utf-8") if isinstance(value, str) else value for key, value in sources.items()
        }
        self.failing_reads = failing_reads or set()
        self.opened: list[TrackingHandle] = []

    def open(self, identifier: str):
        if identifier not in self.sources:
            raise FileNotFoundError(identifier)
        handle = TrackingHandle(self.sources[identifier], fail_read=identifier in self.failing_reads)
        self.opened.append(handle)
        return handle


@pytest.fixture
def memory_reader():
    return MemorySourceReader
