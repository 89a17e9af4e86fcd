from __future__ import annotations

from circuit_pipeline.deployment_layer.paths import PipelinePaths
from circuit_pipeline.deployment_layer.pipeline_config import PipelineConfig
from circuit_pipeline.execution_layer.command import ExternalCommand


class CircomToolchain:
    """
    Builds the commands for circom, the generated witness binary,
    rapidsnark and the snarkjs CLI.
    """

    def __init__(self, config: PipelineConfig, paths: PipelinePaths):
        self.config = config
        self.paths = paths
        tools = config.tools
        self.circom = config.resolve_tool(tools.circom)
        self.make = config.resolve_tool(tools.make)
        self.node = config.resolve_tool(tools.node)
        self.setup_node = config.resolve_tool(tools.setup_node or tools.node)
        self.snarkjs_cli = config.resolve(tools.snarkjs_cli)
        self.prover = config.resolve_tool(tools.prover)

    def _snarkjs(
        self, *args: str, node: str | None = None, heavy: bool = False, **kwargs
    ) -> ExternalCommand:
        argv = [node or self.node]
        if heavy:
            argv.extend(self.config.setup_node_options)
        argv.append(self.snarkjs_cli)
        argv.extend(args)
        return ExternalCommand(argv=argv, **kwargs)

    def compile_circuit(self) -> ExternalCommand:
        return ExternalCommand(
            argv=[
                self.circom,
                self.paths.circuit,
                *self.config.compiler_flags,
                "--output",
                self.paths.compiled_dir,
            ]
        )

    def build_witness_generator(self) -> ExternalCommand:
        return ExternalCommand(argv=[self.make, "-C", self.paths.witness_generator_dir])

    def generate_witness(self) -> ExternalCommand:
        return ExternalCommand(
            argv=[self.paths.witness_generator, self.paths.input, self.paths.witness]
        )

    def zkey_new(self) -> ExternalCommand:
        return self._snarkjs(
            "zkey",
            "new",
            self.paths.r1cs,
            self.paths.ptau,
            self.paths.p1_zkey,
            node=self.setup_node,
            heavy=True,
        )

    def zkey_contribute(self) -> ExternalCommand:
        return self._snarkjs(
            "zkey",
            "contribute",
            self.paths.p1_zkey,
            self.paths.zkey,
            f"-n={self.config.contribution_name}",
            f"-e={self.config.contribution_entropy}",
            node=self.setup_node,
        )

    def zkey_verify(self) -> ExternalCommand:
        return self._snarkjs(
            "zkey",
            "verify",
            self.paths.r1cs,
            self.paths.ptau,
            self.paths.zkey,
            node=self.setup_node,
            heavy=True,
        )

    def export_vkey(self) -> ExternalCommand:
        return self._snarkjs(
            "zkey",
            "export",
            "verificationkey",
            self.paths.zkey,
            self.paths.vkey,
            node=self.setup_node,
        )

    def generate_proof(self) -> ExternalCommand:
        return ExternalCommand(
            argv=[
                self.prover,
                self.paths.zkey,
                self.paths.witness,
                self.paths.proof,
                self.paths.public,
            ]
        )

    def verify_proof(self) -> ExternalCommand:
        return self._snarkjs(
            "groth16",
            "verify",
            self.paths.vkey,
            self.paths.input,
            self.paths.proof,
        )

    def export_calldata(self) -> ExternalCommand:
        return self._snarkjs(
            "zkey",
            "export",
            "soliditycalldata",
            self.paths.public,
            self.paths.proof,
            stdout_path=self.paths.calldata,
        )

    def export_verifier(self) -> ExternalCommand:
        return self._snarkjs(
            "zkey",
            "export",
            "solidityverifier",
            self.paths.zkey,
            self.paths.verifier,
        )
