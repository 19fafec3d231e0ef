"""Run report aggregation."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from typed_pipeline.common.errors import PipelineError
from typed_pipeline.common.fs import write_json
from typed_pipeline.common.models import FinalResult
from typed_pipeline.common.result import Err, Result
from typed_pipeline.pipeline.handler import describe_result


def summarise_outcomes(run_id: str, outcomes: list[tuple[str, Result[FinalResult, PipelineError]]]) -> dict:
    error_counts: Counter[str] = Counter()
    sources = []
    for source, result in outcomes:
        if isinstance(result, Err):
            error_counts[type(result.error).__name__] += 1
        sources.append({"source": source, **describe_result(result)})

    error_count = sum(error_counts.values())
    status = "success"
    if outcomes and error_count == len(outcomes):
        status = "error"
    elif error_count > 0:
        status = "partial"

    return {
        "run_id": run_id,
        "status": status,
        "run_count": len(outcomes),
        "success_count": len(outcomes) - error_count,
        "error_count": error_count,
        "errors_by_kind": dict(sorted(error_counts.items())),
        "sources": sources,
    }


def write_run_summary(
    data_dir: Path,
    run_id: str,
    outcomes: list[tuple[str, Result[FinalResult, PipelineError]]],
) -> Path:
    summary_path = data_dir / "reports" / "run_summary.json"
    write_json(summary_path, summarise_outcomes(run_id, outcomes))
    return summary_path
