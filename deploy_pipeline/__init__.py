"""Deploy Pipeline - pull, build, publish and deploy declared projects.

Projects are declared in a project file or database. Each project that is
due for deployment has its tracked branch pulled, is built and published
when it is a compiled project, gets its dependencies installed and runs
its post-deploy hook. Deployed projects are reported in one notification.
"""

from .__version__ import __version__, __version_info__, __license__

# Core engine
from .core import (
    ProcessRunner,
    EligibilityGate,
    FlagEligibilityGate,
    MarkerFileEligibilityGate,
    StepPolicy,
    PipelineExecutor,
    BatchCoordinator,
)

# Main API
from .api.deployer import Deployer

# Data models
from .models import (
    ProjectDeclaration,
    RuntimeKind,
    PipelineConfig,
    PipelineResult,
    BatchResult,
    Step,
    StepStatus,
)

# Exceptions
from .api.exceptions import (
    DeployPipelineError,
    ConfigError,
    CredentialError,
    ProjectSourceError,
    ProjectDeclarationError,
    UnsupportedRuntimeError,
    NotificationError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__license__",

    # Core engine
    "ProcessRunner",
    "EligibilityGate",
    "FlagEligibilityGate",
    "MarkerFileEligibilityGate",
    "StepPolicy",
    "PipelineExecutor",
    "BatchCoordinator",

    # Main API
    "Deployer",

    # Data models
    "ProjectDeclaration",
    "RuntimeKind",
    "PipelineConfig",
    "PipelineResult",
    "BatchResult",
    "Step",
    "StepStatus",

    # Exceptions
    "DeployPipelineError",
    "ConfigError",
    "CredentialError",
    "ProjectSourceError",
    "ProjectDeclarationError",
    "UnsupportedRuntimeError",
    "NotificationError",
]
