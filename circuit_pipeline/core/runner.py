from __future__ import annotations

import os
import time
from dataclasses import dataclass, field

import bittensor as bt

from circuit_pipeline.core.stages import (
    Stage,
    StageResult,
    StageStatus,
    build_stages,
)
from circuit_pipeline.deployment_layer.artifact_cache import ArtifactCache
from circuit_pipeline.deployment_layer.paths import PipelinePaths
from circuit_pipeline.deployment_layer.pipeline_config import PipelineConfig
from circuit_pipeline.errors import MissingPrerequisiteError, StageFailedError
from circuit_pipeline.execution_layer.command import CommandRunner
from circuit_pipeline.execution_layer.toolchain import CircomToolchain

LOG_PREFIX = " Pipeline | "


@dataclass
class PipelineReport:
    slot: str
    results: list[StageResult] = field(default_factory=list)
    duration: float = 0.0

    def status_of(self, stage_name: str) -> StageStatus | None:
        for result in self.results:
            if result.name == stage_name:
                return result.status
        return None


class PipelineRunner:
    """
    Runs the circuit build pipeline for a single slot.

    Stages execute in order, one at a time. The first failure aborts the
    run by raising; nothing after the failing stage executes.
    """

    def __init__(
        self,
        config: PipelineConfig,
        slot: str,
        command_runner: CommandRunner | None = None,
    ):
        self.config = config
        self.slot = str(slot)
        self.paths = PipelinePaths(config, self.slot)
        self.toolchain = CircomToolchain(config, self.paths)
        self.cache = ArtifactCache()
        self.command_runner = command_runner or CommandRunner()
        self.stages: list[Stage] = build_stages(
            self.paths, self.toolchain, self.cache, scaffold=self.scaffold
        )

    def scaffold(self):
        """
        Create every output directory the later stages write into.
        """
        for label, path in self.paths.scaffold_dirs:
            if not os.path.isdir(path):
                bt.logging.info(
                    f"{LOG_PREFIX}No {label} directory found. Creating {path}..."
                )
                os.makedirs(path, exist_ok=True)

    def plan(self) -> list[StageResult]:
        """
        Predict the status of each stage without executing anything.
        """
        planned = []
        for stage in self.stages:
            if not stage.enabled:
                status = StageStatus.DISABLED
            elif self.cache.is_cached(stage.cache_key):
                status = StageStatus.CACHED
            else:
                status = StageStatus.PENDING
            planned.append(
                StageResult(
                    name=stage.name,
                    title=stage.title,
                    status=status,
                    detail=stage.disabled_reason
                    or self.cache.marker(stage.cache_key or "")
                    or "",
                )
            )
        return planned

    def run(self) -> PipelineReport:
        """
        Execute the pipeline.

        Returns:
            PipelineReport: Status and duration of every stage.

        Raises:
            MissingPrerequisiteError: A required input file is absent.
            StageFailedError: An external tool exited with a non-zero code.
        """
        bt.logging.info(f"{LOG_PREFIX}SLOT: {self.slot}")
        report = PipelineReport(slot=self.slot)
        run_start = time.time()

        for stage in self.stages:
            result = self._run_stage(stage)
            report.results.append(result)

        report.duration = time.time() - run_start
        bt.logging.success(
            f"{LOG_PREFIX}Pipeline completed for slot {self.slot} "
            f"({report.duration:.0f}s)"
        )
        return report

    def _run_stage(self, stage: Stage) -> StageResult:
        if not stage.enabled:
            bt.logging.warning(
                f"{LOG_PREFIX}Skipping {stage.name}: {stage.disabled_reason}"
            )
            return StageResult(
                stage.name,
                stage.title,
                StageStatus.DISABLED,
                detail=stage.disabled_reason,
            )

        if self.cache.is_cached(stage.cache_key):
            marker = self.cache.marker(stage.cache_key)
            bt.logging.info(f"{LOG_PREFIX}Skipping {stage.name}, found {marker}")
            return StageResult(
                stage.name, stage.title, StageStatus.CACHED, detail=marker
            )

        self._check_requirements(stage)

        if stage.command is None and stage.action is None:
            bt.logging.info(f"{LOG_PREFIX}{stage.title}: OK")
            return StageResult(stage.name, stage.title, StageStatus.RAN)

        bt.logging.info(f"{LOG_PREFIX}===={stage.title}====")
        start = time.time()
        returncode = None
        if stage.action is not None:
            stage.action()
        else:
            command_result = self.command_runner.run(stage.command)
            returncode = command_result.returncode
            if not command_result.ok:
                raise StageFailedError(
                    stage.name, command_result.returncode, command_result.stderr
                )
        elapsed = time.time() - start
        bt.logging.success(f"{LOG_PREFIX}DONE ({elapsed:.0f}s)")
        return StageResult(
            stage.name,
            stage.title,
            StageStatus.RAN,
            duration=elapsed,
            returncode=returncode,
        )

    def _check_requirements(self, stage: Stage):
        for path in stage.requires:
            if not os.path.isfile(path):
                bt.logging.error(f"{LOG_PREFIX}{path} not found. Exiting...")
                raise MissingPrerequisiteError(
                    path, f"Stage {stage.name} requires {path}, which does not exist"
                )
            bt.logging.debug(f"{LOG_PREFIX}Found {path}")
