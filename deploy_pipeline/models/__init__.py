# deploy_pipeline/models/__init__.py
"""Data models for deploy-pipeline"""

from .project import ProjectDeclaration, RuntimeKind
from .result import (
    Step,
    StepStatus,
    StepOutcome,
    PipelineResult,
    ProjectFailure,
    BatchResult,
)
from .config import PipelineConfig, SourceConfig, NotificationConfig, ReportConfig

__all__ = [
    # Project models
    "ProjectDeclaration",
    "RuntimeKind",

    # Result models
    "Step",
    "StepStatus",
    "StepOutcome",
    "PipelineResult",
    "ProjectFailure",
    "BatchResult",

    # Config models
    "PipelineConfig",
    "SourceConfig",
    "NotificationConfig",
    "ReportConfig",
]
