"""Exception definitions for deploy-pipeline"""

from ..constants import ErrorCode


class DeployPipelineError(Exception):
    """Base exception for deploy-pipeline"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(DeployPipelineError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class CredentialError(ConfigError):
    """Connection string or other credential could not be resolved"""

    def __init__(self, env_var: str):
        message = f"Unable to read connection string from environment variable '{env_var}'"
        super().__init__(message)
        self.error_code = ErrorCode.CREDENTIAL_MISSING
        self.env_var = env_var


class ProjectSourceError(DeployPipelineError):
    """Project source could not be read"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SOURCE_UNREADABLE)


class ProjectDeclarationError(DeployPipelineError):
    """A single project declaration is invalid"""

    def __init__(self, project_name: str, message: str):
        super().__init__(f"Project '{project_name}': {message}", ErrorCode.DECLARATION_INVALID)
        self.project_name = project_name


class MissingFieldError(ProjectDeclarationError):
    """Required declaration field is absent"""

    def __init__(self, project_name: str, field_name: str):
        super().__init__(project_name, f"missing required field '{field_name}'")
        self.field_name = field_name


class UnsupportedRuntimeError(ProjectDeclarationError):
    """Declared language or project file extension is not recognized"""

    def __init__(self, project_name: str, runtime: str):
        super().__init__(project_name, f"unsupported language or project file extension '{runtime}'")
        self.error_code = ErrorCode.RUNTIME_UNSUPPORTED
        self.runtime = runtime


class NotificationError(DeployPipelineError):
    """Notification channel error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.NOTIFICATION_FAILED)
