"""Payloads handed from one pipeline stage to the next."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Config:
    data: str


@dataclass(frozen=True)
class ValidatedData:
    processed_data: str


@dataclass(frozen=True)
class FinalResult:
    result_code: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
