from pathlib import Path

import pytest

from typed_pipeline.common.errors import ConfigParseError, ConfigReadError, ProcessingError, ValidationError
from typed_pipeline.common.models import FinalResult
from typed_pipeline.common.result import Err, Ok
from typed_pipeline.pipeline.demo import SCENARIOS, iter_scenarios, run_demo, self_check


@pytest.mark.integration
def test_demo_scenarios_cover_every_outcome(tmp_path: Path):
    outcomes = list(iter_scenarios(tmp_path))

    assert [outcome.scenario for outcome in outcomes] == list(SCENARIOS)
    results = [outcome.result for outcome in outcomes]
    assert results[0] == Ok(FinalResult(result_code=30))
    assert results[1] == Err(ConfigReadError(source_identifier="non_existent_config.txt"))
    assert isinstance(results[2].error, ConfigParseError)
    assert isinstance(results[3].error, ValidationError)
    assert isinstance(results[4].error, ProcessingError)


@pytest.mark.integration
def test_run_demo_cleans_up_scenario_files(monkeypatch):
    created = []
    real_iter = iter_scenarios

    def _spy(work_dir, **kwargs):
        created.append(work_dir)
        yield from real_iter(work_dir, **kwargs)

    monkeypatch.setattr("typed_pipeline.pipeline.demo.iter_scenarios", _spy)
    outcomes = run_demo()

    assert len(outcomes) == len(SCENARIOS)
    assert not created[0].exists()


@pytest.mark.integration
def test_self_check_passes(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert self_check() is True
