from __future__ import annotations


class PipelineError(Exception):
    """Base class for every failure that aborts a pipeline run."""


class MissingPrerequisiteError(PipelineError):
    """
    A file or executable the pipeline needs was not found.

    Attributes:
        path (str): The missing path.
    """

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Required file not found: {path}")


class StageFailedError(PipelineError):
    """
    An external tool exited with a non-zero status.

    Attributes:
        stage (str): Name of the failing stage.
        returncode (int): Exit code of the tool.
        stderr (str): Captured standard error.
    """

    def __init__(self, stage: str, returncode: int, stderr: str = ""):
        self.stage = stage
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Stage {stage} failed with exit code {returncode}")


class ConfigurationError(PipelineError):
    """The pipeline configuration is invalid."""
