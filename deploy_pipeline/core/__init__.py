# deploy_pipeline/core/__init__.py
"""Core deployment pipeline engine"""

from .process_runner import ProcessRunner, render_command
from .eligibility import (
    DeploymentQueue,
    EligibilityGate,
    FlagEligibilityGate,
    MarkerFileEligibilityGate,
)
from .step_policy import StepPolicy, ResolvedSteps
from .pipeline_executor import PipelineExecutor
from .batch_coordinator import BatchCoordinator

__all__ = [
    'ProcessRunner',
    'render_command',
    'DeploymentQueue',
    'EligibilityGate',
    'FlagEligibilityGate',
    'MarkerFileEligibilityGate',
    'StepPolicy',
    'ResolvedSteps',
    'PipelineExecutor',
    'BatchCoordinator',
]
