from __future__ import annotations

import os
from dataclasses import dataclass, field

import bittensor as bt

from circuit_pipeline.constants import (
    COMPILED_DIR_NAME,
    SLOT_PROOF_DIR_PREFIX,
    TRUSTED_SETUP_DIR_NAME,
)
from circuit_pipeline.deployment_layer.pipeline_config import PipelineConfig


@dataclass
class PipelinePaths:
    """
    Paths to every artifact consumed or produced for one circuit and slot.
    """

    config: PipelineConfig
    slot: str
    circuit: str = field(init=False)
    build_dir: str = field(init=False)
    compiled_dir: str = field(init=False)
    trusted_setup_dir: str = field(init=False)
    input_dir: str = field(init=False)
    verifier_dir: str = field(init=False)
    log_dir: str = field(init=False)
    slot_proof_dir: str = field(init=False)
    r1cs: str = field(init=False)
    witness_generator_dir: str = field(init=False)
    witness_generator: str = field(init=False)
    witness: str = field(init=False)
    ptau: str = field(init=False)
    p1_zkey: str = field(init=False)
    zkey: str = field(init=False)
    vkey: str = field(init=False)
    input: str = field(init=False)
    proof: str = field(init=False)
    public: str = field(init=False)
    calldata: str = field(init=False)
    verifier: str = field(init=False)

    def __post_init__(self):
        self.slot = str(self.slot)
        name = self.config.circuit_name

        self.circuit = self.config.resolve(f"{name}.circom")
        self.build_dir = self.config.resolve(self.config.build_dir)
        self.compiled_dir = os.path.join(self.build_dir, COMPILED_DIR_NAME)
        self.trusted_setup_dir = os.path.join(self.build_dir, TRUSTED_SETUP_DIR_NAME)
        self.input_dir = self.config.resolve(self.config.input_dir)
        self.verifier_dir = self.config.resolve(self.config.verifier_dir)
        self.log_dir = self.config.resolve(self.config.log_dir)
        self.slot_proof_dir = self.config.resolve(
            f"{SLOT_PROOF_DIR_PREFIX}{self.slot}"
        )

        self.r1cs = os.path.join(self.compiled_dir, f"{name}.r1cs")
        self.witness_generator_dir = os.path.join(self.compiled_dir, f"{name}_cpp")
        self.witness_generator = os.path.join(self.witness_generator_dir, name)
        self.witness = os.path.join(self.witness_generator_dir, "witness.wtns")

        self.ptau = self.config.resolve(self.config.ptau_path)
        self.p1_zkey = os.path.join(self.trusted_setup_dir, f"{name}_p1.zkey")
        self.zkey = os.path.join(self.trusted_setup_dir, f"{name}.zkey")
        self.vkey = os.path.join(self.trusted_setup_dir, "vkey.json")

        self.input = os.path.join(self.input_dir, f"{self.slot}_input.json")
        self.proof = os.path.join(self.slot_proof_dir, "proof.json")
        self.public = os.path.join(self.slot_proof_dir, "public.json")
        self.calldata = os.path.join(self.slot_proof_dir, "calldata.txt")
        self.verifier = os.path.join(self.verifier_dir, f"{name}.sol")

        bt.logging.trace(f"PipelinePaths: compiled dir: {self.compiled_dir}")
        bt.logging.trace(f"PipelinePaths: trusted setup dir: {self.trusted_setup_dir}")
        bt.logging.trace(f"PipelinePaths: slot proof dir: {self.slot_proof_dir}")

    @property
    def scaffold_dirs(self) -> list[tuple[str, str]]:
        """
        Directories created before any stage runs, in creation order,
        paired with a human readable label.
        """
        return [
            ("build", self.build_dir),
            ("compiled circuit", self.compiled_dir),
            ("trusted setup", self.trusted_setup_dir),
            ("slot proof data", self.slot_proof_dir),
            ("verifier", self.verifier_dir),
        ]
