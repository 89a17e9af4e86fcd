import os
import shutil
import traceback
from collections import OrderedDict
from functools import partial

import bittensor as bt

from circuit_pipeline.deployment_layer.pipeline_config import PipelineConfig
from circuit_pipeline.errors import MissingPrerequisiteError

PREFLIGHT_LOG_PREFIX = " PreFlight | "


def run_preflight_checks(config: PipelineConfig):
    """
    Ensure every external tool the pipeline drives can be started.

    Checks:
    - circom is available
    - make is available
    - node is available (both the regular and the setup binary)
    - the snarkjs CLI script exists
    - the rapidsnark prover is available

    Raises:
        MissingPrerequisiteError: If any of the pre-flight checks fail.
    """
    tools = config.tools
    preflight_checks = OrderedDict(
        {
            "Checking circom installation": partial(
                ensure_executable, config.resolve_tool(tools.circom)
            ),
            "Checking make installation": partial(
                ensure_executable, config.resolve_tool(tools.make)
            ),
            "Checking node installation": partial(
                ensure_executable, config.resolve_tool(tools.node)
            ),
            "Checking setup node installation": (
                partial(ensure_executable, config.resolve_tool(tools.setup_node))
                if tools.setup_node and tools.setup_node != tools.node
                else None
            ),
            "Checking SnarkJS installation": partial(
                ensure_file, config.resolve(tools.snarkjs_cli)
            ),
            "Checking prover installation": partial(
                ensure_executable, config.resolve_tool(tools.prover)
            ),
        }
    )

    bt.logging.info(f"{PREFLIGHT_LOG_PREFIX}Running pre-flight checks")

    for check_name, check_function in preflight_checks.items():
        if check_function is None:
            bt.logging.info(f"{PREFLIGHT_LOG_PREFIX}Skipping {check_name} check")
            continue
        bt.logging.info(f"{PREFLIGHT_LOG_PREFIX}{check_name}")
        try:
            check_function()
            bt.logging.success(
                f"{PREFLIGHT_LOG_PREFIX}{check_name} completed successfully"
            )
        except MissingPrerequisiteError as e:
            bt.logging.error(f"Failed {check_name.lower()}: {e}")
            bt.logging.debug(
                f"{PREFLIGHT_LOG_PREFIX}{check_name} error details: "
                f"{traceback.format_exc()}"
            )
            raise

    bt.logging.info(f"{PREFLIGHT_LOG_PREFIX}Pre-flight checks completed.")


def ensure_executable(tool: str):
    """
    Ensure a tool is either on PATH or an existing executable file.
    """
    if os.path.dirname(tool):
        if os.path.isfile(tool) and os.access(tool, os.X_OK):
            bt.logging.debug(f"{PREFLIGHT_LOG_PREFIX}Found executable {tool}")
            return
        raise MissingPrerequisiteError(tool, f"{tool} is missing or not executable")

    resolved = shutil.which(tool)
    if resolved is None:
        raise MissingPrerequisiteError(
            tool, f"{tool} was not found on PATH. Please install it manually."
        )
    bt.logging.debug(f"{PREFLIGHT_LOG_PREFIX}Found {tool} at {resolved}")


def ensure_file(path: str):
    if not os.path.isfile(path):
        raise MissingPrerequisiteError(path)
    bt.logging.debug(f"{PREFLIGHT_LOG_PREFIX}Found {path}")
