import os
import stat

import pytest

from circuit_pipeline.deployment_layer.pipeline_config import PipelineConfig, ToolPaths
from circuit_pipeline.errors import MissingPrerequisiteError
from circuit_pipeline.utils import ensure_executable, ensure_file, run_preflight_checks


def _make_executable(path):
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return str(path)


@pytest.fixture
def toolbox(tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    tools = {
        name: _make_executable(bin_dir / name)
        for name in ("circom", "make", "node", "prover")
    }
    cli = tmp_path / "node_modules" / "snarkjs" / "cli.js"
    cli.parent.mkdir(parents=True)
    cli.write_text("")
    tools["snarkjs_cli"] = str(cli)
    tools["setup_node"] = tools["node"]
    return tools


def test_all_tools_present(toolbox):
    config = PipelineConfig(tools=ToolPaths(**toolbox))

    run_preflight_checks(config)


def test_missing_snarkjs_cli(toolbox, tmp_path):
    os.remove(toolbox["snarkjs_cli"])
    config = PipelineConfig(tools=ToolPaths(**toolbox))

    with pytest.raises(MissingPrerequisiteError) as excinfo:
        run_preflight_checks(config)

    assert excinfo.value.path == toolbox["snarkjs_cli"]


def test_missing_setup_node(toolbox, tmp_path):
    toolbox["setup_node"] = str(tmp_path / "node" / "out" / "Release" / "node")
    config = PipelineConfig(tools=ToolPaths(**toolbox))

    with pytest.raises(MissingPrerequisiteError):
        run_preflight_checks(config)


def test_ensure_executable_rejects_plain_files(tmp_path):
    plain = tmp_path / "prover"
    plain.write_text("")
    plain.chmod(0o600)

    with pytest.raises(MissingPrerequisiteError):
        ensure_executable(str(plain))


def test_ensure_executable_looks_up_path(tmp_path, monkeypatch):
    _make_executable(tmp_path / "circom")
    monkeypatch.setenv("PATH", str(tmp_path))

    ensure_executable("circom")
    with pytest.raises(MissingPrerequisiteError):
        ensure_executable("definitely-not-installed-circom")


def test_ensure_file(tmp_path):
    with pytest.raises(MissingPrerequisiteError):
        ensure_file(str(tmp_path / "final.ptau"))
