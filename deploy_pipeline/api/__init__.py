"""Public exceptions for deploy-pipeline"""

from .exceptions import (
    DeployPipelineError,
    ConfigError,
    CredentialError,
    ProjectSourceError,
    ProjectDeclarationError,
    MissingFieldError,
    UnsupportedRuntimeError,
    NotificationError,
)

__all__ = [
    "DeployPipelineError",
    "ConfigError",
    "CredentialError",
    "ProjectSourceError",
    "ProjectDeclarationError",
    "MissingFieldError",
    "UnsupportedRuntimeError",
    "NotificationError",
]
