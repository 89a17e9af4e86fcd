import argparse
import os
import sys
from typing import Optional

from circuit_pipeline.constants import DEFAULT_CONFIG_PATH, SLOT_ENV_VAR

SHOW_HELP = False

# Intercept --help/-h flags before importing bittensor since it overrides help behavior
# This allows showing our custom help message instead of bittensor's default one
if "--help" in sys.argv:
    SHOW_HELP = True
    sys.argv.remove("--help")
elif "-h" in sys.argv:
    SHOW_HELP = True
    sys.argv.remove("-h")

# flake8: noqa
import bittensor as bt

from circuit_pipeline.deployment_layer.pipeline_config import PipelineConfig
from circuit_pipeline.errors import ConfigurationError

parser: Optional[argparse.ArgumentParser] = None
config: Optional[bt.config] = None


DESCRIPTION = (
    "Circuit pipeline. Compiles a circom circuit, generates a witness, "
    "runs or reuses the trusted setup and produces a proof, calldata and "
    "a Solidity verifier for one slot."
)


def init_config(args: Optional[list[str]] = None):
    """
    Initialize the configuration for a pipeline run.
    The configuration itself is stored in the global variable `config`.
    """
    global parser
    global config

    parser = argparse.ArgumentParser(
        description=DESCRIPTION,
        allow_abbrev=False,
    )

    parser.add_argument(
        "--slot",
        type=str,
        default=os.getenv(SLOT_ENV_VAR),
        help=f"The slot to build a proof for. Defaults to the {SLOT_ENV_VAR} environment variable.",
    )
    parser.add_argument(
        "--pipeline-config",
        type=str,
        default=DEFAULT_CONFIG_PATH,
        help="Path to a JSON or TOML pipeline configuration file.",
    )
    parser.add_argument(
        "--circuit-dir",
        type=str,
        default=None,
        help="Directory containing the circuit source (default: current directory).",
    )
    parser.add_argument(
        "--circuit-name",
        type=str,
        default=None,
        help="Name of the circuit, without the .circom extension.",
    )
    parser.add_argument(
        "--ptau",
        type=str,
        default=None,
        help="Path to the phase 1 powers of tau file.",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory for the timestamped run logs.",
    )
    parser.add_argument(
        "--dry-run",
        default=False,
        action="store_true",
        help="Print which stages would run or be skipped, then exit.",
    )
    parser.add_argument(
        "--skip-preflight",
        default=False,
        action="store_true",
        help="Do not check that the external tools are installed before running.",
    )

    bt.logging.add_args(parser)

    config = bt.config(parser, args=args, strict=True)

    if SHOW_HELP:
        # --help or -h flag was passed, show the help message and exit
        parser.print_help()
        sys.exit(0)

    bt.logging(config=config, logging_dir=config.logging.logging_dir)
    bt.logging.enable_info()


def build_pipeline_config(cli_config) -> PipelineConfig:
    """
    Merge the configuration file (if any) with command line overrides.

    Args:
        cli_config: Parsed command line configuration.

    Returns:
        PipelineConfig: The configuration for the run.
    """
    config_path = getattr(cli_config, "pipeline_config", None)
    if config_path:
        if not os.path.isfile(config_path):
            raise ConfigurationError(f"Configuration file not found: {config_path}")
        pipeline_config = PipelineConfig.from_file(config_path)
        bt.logging.debug(f"Loaded pipeline configuration from {config_path}")
    else:
        pipeline_config = PipelineConfig()

    circuit_dir = getattr(cli_config, "circuit_dir", None)
    if circuit_dir:
        pipeline_config.base_dir = os.path.abspath(circuit_dir)
    if getattr(cli_config, "circuit_name", None):
        pipeline_config.circuit_name = cli_config.circuit_name
    if getattr(cli_config, "ptau", None):
        pipeline_config.ptau_path = os.path.abspath(cli_config.ptau)
    if getattr(cli_config, "log_dir", None):
        pipeline_config.log_dir = os.path.abspath(cli_config.log_dir)

    return pipeline_config


def resolve_slot(cli_config) -> str:
    slot = getattr(cli_config, "slot", None) or os.getenv(SLOT_ENV_VAR)
    if slot is None or not str(slot).strip():
        raise ConfigurationError(
            f"No slot given. Pass --slot or set the {SLOT_ENV_VAR} environment variable."
        )
    return str(slot).strip()
