from .artifact_cache import ArtifactCache
from .paths import PipelinePaths
from .pipeline_config import PipelineConfig, ToolPaths

__all__ = ["ArtifactCache", "PipelinePaths", "PipelineConfig", "ToolPaths"]
