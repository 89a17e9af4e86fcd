"""
Entry point for a pipeline run:
 - Parse CLI args and the optional pipeline configuration file
 - Check the external tools are installed
 - Run every stage for the selected slot, duplicating output to logs/

Exit code is 0 on success, the failing tool's exit code when a stage fails
and 1 when a required file is missing.
"""

import sys

# isort: off
from circuit_pipeline import cli_parser  # <- must stay before the bittensor import

import bittensor as bt

# isort: on

from circuit_pipeline.core.runner import PipelineRunner
from circuit_pipeline.errors import (
    ConfigurationError,
    MissingPrerequisiteError,
    PipelineError,
    StageFailedError,
)
from circuit_pipeline.utils import (
    attach_log_file,
    detach_log_file,
    log_plan,
    log_report,
    run_preflight_checks,
)


def exit_code_for(error: PipelineError) -> int:
    if isinstance(error, StageFailedError) and error.returncode > 0:
        return error.returncode
    return 1


def main() -> int:
    cli_parser.init_config()
    config = cli_parser.config

    try:
        pipeline_config = cli_parser.build_pipeline_config(config)
        slot = cli_parser.resolve_slot(config)
    except ConfigurationError as e:
        bt.logging.error(str(e))
        return exit_code_for(e)

    runner = PipelineRunner(pipeline_config, slot)

    if config.dry_run:
        log_plan(slot, runner.plan())
        return 0

    handler = attach_log_file(runner.paths.log_dir, pipeline_config.circuit_name)
    try:
        if not config.skip_preflight:
            run_preflight_checks(pipeline_config)
        report = runner.run()
        log_report(report)
    except MissingPrerequisiteError as e:
        bt.logging.error(f"Missing prerequisite: {e}")
        return exit_code_for(e)
    except StageFailedError as e:
        bt.logging.error(str(e))
        return exit_code_for(e)
    finally:
        detach_log_file(handler)

    return 0


if __name__ == "__main__":
    sys.exit(main())
