import logging
from datetime import datetime

import bittensor as bt
import pytest

from circuit_pipeline.constants import BITTENSOR_LOGGER_NAME
from circuit_pipeline.utils import (
    attach_log_file,
    detach_log_file,
    get_log_file_path,
    log_plan,
    log_report,
)


def test_log_file_name():
    path = get_log_file_path("logs", "verify_header", datetime(2024, 3, 9, 14, 5))

    assert path == "logs/verify_header_2024-03-09-14-05.log"


def test_attach_and_detach_log_file(tmp_path):
    log_dir = tmp_path / "logs"

    handler = attach_log_file(str(log_dir), "verify_header")
    try:
        assert handler in logging.getLogger(BITTENSOR_LOGGER_NAME).handlers
        log_files = list(log_dir.glob("verify_header_*.log"))
        assert len(log_files) == 1
    finally:
        detach_log_file(handler)

    assert handler not in logging.getLogger(BITTENSOR_LOGGER_NAME).handlers


def test_plan_and_report_tables(make_runner, capsys):
    runner, _ = make_runner()
    log_plan(runner.slot, runner.plan())
    report = runner.run()
    log_report(report)

    out = capsys.readouterr().out
    assert "Pipeline plan for slot 7" in out
    assert "compile_circuit" in out
    assert "verify_proof" in out
    assert "disabled" in out


@pytest.fixture
def run_log(tmp_path):
    """
    Attach a run log file at INFO level and return a reader for its content.
    """
    log_dir = tmp_path / "logs"
    bt.logging.enable_info()
    handler = attach_log_file(str(log_dir), "verify_header")

    def read() -> str:
        handler.flush()
        return "".join(path.read_text() for path in log_dir.glob("verify_header_*.log"))

    yield read
    detach_log_file(handler)
    bt.logging.enable_default()


def test_run_log_records_stage_banners_and_skips(make_runner, run_log):
    first, _ = make_runner()
    first.run()

    content = run_log()
    assert "COMPILING CIRCUIT verify_header.circom" in content
    assert "DONE (" in content
    assert "Skipping verify_proof" in content
    assert "Skipping compile_circuit" not in content

    second, _ = make_runner()
    second.run()

    content = run_log()
    assert f"Skipping compile_circuit, found {second.paths.r1cs}" in content
    assert f"Skipping export_vkey, found {second.paths.vkey}" in content


def test_report_summary_reaches_the_run_log(make_runner, run_log):
    runner, _ = make_runner()
    report = runner.run()

    log_report(report)

    content = run_log()
    assert " Pipeline | compile_circuit: ran " in content
    assert " Pipeline | verify_proof: disabled " in content
    assert "Scalar size does not match" in content
