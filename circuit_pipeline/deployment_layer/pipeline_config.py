from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields

import toml

from circuit_pipeline.constants import (
    BUILD_DIR_NAME,
    DEFAULT_CIRCUIT_NAME,
    DEFAULT_COMPILER_FLAGS,
    DEFAULT_CONTRIBUTION_ENTROPY,
    DEFAULT_CONTRIBUTION_NAME,
    DEFAULT_PROVER_PATH,
    DEFAULT_PTAU_PATH,
    DEFAULT_SETUP_NODE_OPTIONS,
    DEFAULT_SETUP_NODE_PATH,
    DEFAULT_SNARKJS_CLI,
    INPUT_DIR_NAME,
    LOG_DIR_NAME,
    VERIFIER_DIR_NAME,
)
from circuit_pipeline.errors import ConfigurationError


@dataclass
class ToolPaths:
    """
    Locations of the external executables the pipeline drives.

    Bare names are looked up on PATH; anything containing a path separator
    is resolved against the circuit directory.
    """

    circom: str = "circom"
    make: str = "make"
    node: str = "node"
    setup_node: str = DEFAULT_SETUP_NODE_PATH
    snarkjs_cli: str = DEFAULT_SNARKJS_CLI
    prover: str = DEFAULT_PROVER_PATH

    @classmethod
    def from_dict(cls, data: dict) -> ToolPaths:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown tool entries: {sorted(unknown)}")
        return cls(**data)


@dataclass
class PipelineConfig:
    """
    Everything a pipeline run needs to know besides the slot.

    Directory fields are relative to `base_dir` unless absolute.
    """

    circuit_name: str = DEFAULT_CIRCUIT_NAME
    base_dir: str = "."
    ptau_path: str = DEFAULT_PTAU_PATH
    build_dir: str = BUILD_DIR_NAME
    input_dir: str = INPUT_DIR_NAME
    verifier_dir: str = VERIFIER_DIR_NAME
    log_dir: str = LOG_DIR_NAME
    tools: ToolPaths = field(default_factory=ToolPaths)
    compiler_flags: list[str] = field(
        default_factory=lambda: list(DEFAULT_COMPILER_FLAGS)
    )
    setup_node_options: list[str] = field(
        default_factory=lambda: list(DEFAULT_SETUP_NODE_OPTIONS)
    )
    contribution_name: str = DEFAULT_CONTRIBUTION_NAME
    contribution_entropy: str = DEFAULT_CONTRIBUTION_ENTROPY

    def __post_init__(self):
        if not self.circuit_name:
            raise ConfigurationError("circuit_name must not be empty")
        if isinstance(self.tools, dict):
            self.tools = ToolPaths.from_dict(self.tools)
        elif not isinstance(self.tools, ToolPaths):
            raise ConfigurationError(
                f"tools must be a table of tool paths, got {type(self.tools).__name__}"
            )

    def resolve(self, path: str) -> str:
        """
        Resolve a configured path against the circuit directory.
        """
        if os.path.isabs(path):
            return path
        return os.path.normpath(os.path.join(self.base_dir, path))

    def resolve_tool(self, tool: str) -> str:
        """
        Resolve a tool path, leaving bare executable names for PATH lookup.
        """
        if os.sep not in tool and (os.altsep is None or os.altsep not in tool):
            return tool
        return self.resolve(tool)

    @classmethod
    def from_dict(cls, data: dict) -> PipelineConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_file(cls, config_path: str) -> PipelineConfig:
        """
        Create a PipelineConfig from a JSON or TOML file.

        A relative `base_dir` is taken relative to the file's directory.

        Args:
            config_path (str): Path to the configuration file.

        Returns:
            PipelineConfig: The loaded configuration.
        """
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                if config_path.endswith(".json"):
                    data = json.load(f)
                elif config_path.endswith(".toml"):
                    data = toml.load(f)
                else:
                    raise ConfigurationError(
                        f"Unsupported configuration format: {config_path}"
                    )
            except (json.JSONDecodeError, toml.TomlDecodeError) as e:
                raise ConfigurationError(
                    f"Malformed configuration file {config_path}: {e}"
                ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {config_path} must contain a table of settings"
            )

        config_dir = os.path.dirname(os.path.abspath(config_path))
        base_dir = data.get("base_dir", ".")
        if not os.path.isabs(base_dir):
            data["base_dir"] = os.path.normpath(os.path.join(config_dir, base_dir))

        return cls.from_dict(data)
