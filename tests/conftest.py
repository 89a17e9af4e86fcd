import hashlib
import os

import pytest

from circuit_pipeline.core.runner import PipelineRunner
from circuit_pipeline.deployment_layer.pipeline_config import PipelineConfig, ToolPaths
from circuit_pipeline.execution_layer.command import CommandResult, ExternalCommand

CIRCUIT_NAME = "verify_header"
SLOT = "7"


class FakeCommandRunner:
    """
    Stands in for the external toolchain.

    Records every command and writes the files the real tool would write.
    Output files must land in directories that already exist, except for the
    witness generator directory which circom itself creates.
    """

    def __init__(self, runner: PipelineRunner, fail: dict[str, int] | None = None):
        self.paths = runner.paths
        self.commands: list[ExternalCommand] = []
        self.fail = fail or {}
        toolchain = runner.toolchain
        paths = runner.paths
        self.effects = {
            "compile_circuit": (toolchain.compile_circuit(), [paths.r1cs]),
            "build_witness_generator": (
                toolchain.build_witness_generator(),
                [paths.witness_generator],
            ),
            "generate_witness": (toolchain.generate_witness(), [paths.witness]),
            "zkey_new": (toolchain.zkey_new(), [paths.p1_zkey]),
            "zkey_contribute": (toolchain.zkey_contribute(), [paths.zkey]),
            "zkey_verify": (toolchain.zkey_verify(), []),
            "export_vkey": (toolchain.export_vkey(), [paths.vkey]),
            "generate_proof": (toolchain.generate_proof(), [paths.proof, paths.public]),
            "verify_proof": (toolchain.verify_proof(), []),
            "export_calldata": (toolchain.export_calldata(), [paths.calldata]),
            "export_verifier": (toolchain.export_verifier(), [paths.verifier]),
        }

    def stage_for(self, command: ExternalCommand) -> str:
        for stage_name, (expected, _) in self.effects.items():
            if expected == command:
                return stage_name
        raise AssertionError(f"Unexpected command: {command}")

    def executed_stages(self) -> list[str]:
        return [self.stage_for(command) for command in self.commands]

    def run(self, command: ExternalCommand) -> CommandResult:
        self.commands.append(command)
        stage_name = self.stage_for(command)
        if stage_name in self.fail:
            return CommandResult(
                command=command,
                returncode=self.fail[stage_name],
                stderr=f"{stage_name} failed",
            )

        if stage_name == "compile_circuit":
            os.makedirs(self.paths.witness_generator_dir, exist_ok=True)

        for output in self.effects[stage_name][1]:
            parent = os.path.dirname(output)
            assert os.path.isdir(parent), f"{parent} missing before {stage_name}"
            with open(output, "wb") as f:
                f.write(self._content_for(stage_name, output))
        return CommandResult(command=command, returncode=0, stdout="ok")

    def _content_for(self, stage_name: str, output: str) -> bytes:
        if stage_name == "generate_witness":
            with open(self.paths.input, "rb") as f:
                return hashlib.sha256(f.read()).digest()
        return f"{stage_name}:{os.path.basename(output)}".encode()


@pytest.fixture
def circuit_dir(tmp_path):
    base = tmp_path / "circuits" / CIRCUIT_NAME
    (base / "input").mkdir(parents=True)
    (base / f"{CIRCUIT_NAME}.circom").write_text("pragma circom 2.0.0;\n")
    (base / "input" / f"{SLOT}_input.json").write_text('{"slot": "7"}')
    ptau = tmp_path / "powers_of_tau" / "final.ptau"
    ptau.parent.mkdir()
    ptau.write_bytes(b"ptau")
    return base


@pytest.fixture
def pipeline_config(circuit_dir):
    return PipelineConfig(
        circuit_name=CIRCUIT_NAME,
        base_dir=str(circuit_dir),
        ptau_path="../../powers_of_tau/final.ptau",
        tools=ToolPaths(
            circom="circom",
            make="make",
            node="node",
            setup_node="node-patched",
            snarkjs_cli="../node_modules/snarkjs/cli.js",
            prover="prover",
        ),
    )


@pytest.fixture
def make_runner(pipeline_config):
    def _make(fail: dict[str, int] | None = None, slot: str = SLOT):
        runner = PipelineRunner(pipeline_config, slot)
        fake = FakeCommandRunner(runner, fail=fail)
        runner.command_runner = fake
        return runner, fake

    return _make
