from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from circuit_pipeline.deployment_layer.artifact_cache import ArtifactCache
from circuit_pipeline.deployment_layer.paths import PipelinePaths
from circuit_pipeline.execution_layer.command import ExternalCommand
from circuit_pipeline.execution_layer.toolchain import CircomToolchain

TRUSTED_SETUP_CACHE_KEY = "trusted_setup"

# snarkjs groth16 verify fails with "Scalar size does not match" on this
# circuit. Proofs are verified through the generated verifier contract.
PROOF_VERIFICATION_DISABLED_REASON = (
    "snarkjs groth16 verify fails with 'Scalar size does not match'; "
    "verify through the verifier contract instead"
)


class StageStatus(str, Enum):
    """
    Outcome of a single stage in a pipeline run.
    """

    PENDING = "pending"
    RAN = "ran"
    CACHED = "cached"
    DISABLED = "disabled"

    def __str__(self):
        return self.value


@dataclass
class Stage:
    """
    One step of the pipeline.

    A stage either runs an external command or an in-process action. Files
    listed in `requires` must exist before the stage executes. Stages with a
    `cache_key` are skipped while the key's marker file exists.
    """

    name: str
    title: str
    command: ExternalCommand | None = None
    action: Callable[[], None] | None = None
    cache_key: str | None = None
    requires: list[str] = field(default_factory=list)
    disabled_reason: str | None = None

    @property
    def enabled(self) -> bool:
        return self.disabled_reason is None


@dataclass
class StageResult:
    name: str
    title: str
    status: StageStatus
    duration: float = 0.0
    returncode: int | None = None
    detail: str = ""


def build_stages(
    paths: PipelinePaths,
    toolchain: CircomToolchain,
    cache: ArtifactCache,
    scaffold: Callable[[], None],
) -> list[Stage]:
    """
    Build the ordered stage list for one slot and register cache markers.

    Args:
        paths (PipelinePaths): Artifact locations for the run.
        toolchain (CircomToolchain): Command builder for external tools.
        cache (ArtifactCache): Cache receiving the marker registrations.
        scaffold (Callable): Action creating the output directories.

    Returns:
        list[Stage]: Stages in dependency order.
    """
    name = paths.config.circuit_name

    cache.register("compile_circuit", paths.r1cs)
    cache.register(TRUSTED_SETUP_CACHE_KEY, paths.vkey)
    cache.register("export_verifier", paths.verifier)

    return [
        Stage(
            name="scaffold",
            title="Create output directories",
            action=scaffold,
        ),
        Stage(
            name="compile_circuit",
            title=f"COMPILING CIRCUIT {name}.circom",
            command=toolchain.compile_circuit(),
            cache_key="compile_circuit",
            requires=[paths.circuit],
        ),
        Stage(
            name="build_witness_generator",
            title="Build Witness Generation Binary",
            command=toolchain.build_witness_generator(),
        ),
        Stage(
            name="generate_witness",
            title="Generate Witness",
            command=toolchain.generate_witness(),
            requires=[paths.input],
        ),
        Stage(
            name="check_ptau",
            title="Check Phase 1 ptau file",
            requires=[paths.ptau],
        ),
        Stage(
            name="zkey_new",
            title="Generating zkey",
            command=toolchain.zkey_new(),
            cache_key=TRUSTED_SETUP_CACHE_KEY,
        ),
        Stage(
            name="zkey_contribute",
            title="Contribute to Phase2 Ceremony",
            command=toolchain.zkey_contribute(),
            cache_key=TRUSTED_SETUP_CACHE_KEY,
        ),
        Stage(
            name="zkey_verify",
            title="VERIFYING FINAL ZKEY",
            command=toolchain.zkey_verify(),
            cache_key=TRUSTED_SETUP_CACHE_KEY,
        ),
        Stage(
            name="export_vkey",
            title="EXPORTING VKEY",
            command=toolchain.export_vkey(),
            cache_key=TRUSTED_SETUP_CACHE_KEY,
        ),
        Stage(
            name="generate_proof",
            title="GENERATING PROOF FOR GIVEN SLOT",
            command=toolchain.generate_proof(),
        ),
        Stage(
            name="verify_proof",
            title="VERIFYING PROOF FOR GIVEN SLOT",
            command=toolchain.verify_proof(),
            disabled_reason=PROOF_VERIFICATION_DISABLED_REASON,
        ),
        Stage(
            name="export_calldata",
            title="GENERATING CALLDATA FOR VERIFIER CONTRACT",
            command=toolchain.export_calldata(),
        ),
        Stage(
            name="export_verifier",
            title="GENERATING VERIFIER CONTRACT",
            command=toolchain.export_verifier(),
            cache_key="export_verifier",
        ),
    ]
