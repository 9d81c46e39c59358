"""Global constants for deploy-pipeline"""

from enum import Enum

APP_NAME = "deploy-pipeline"
LOG_FORMAT = "%(message)s"

# Configuration
DEFAULT_CONFIG_FILE = "deploy-pipeline.yaml"
DEFAULT_PROJECTS_FILE = "projects.json"
DEFAULT_REPORT_FILE = "PendingDeployment.html"
DEFAULT_MARKER_FILE = "deploy.txt"
DEFAULT_DEPENDENCY_MANIFEST = "requirements.txt"
DEFAULT_PROCESS_TIMEOUT = 3600  # seconds, 0 disables

# Default step commands, rendered per project
DEFAULT_COMMANDS = {
    "pull": "git pull origin {branch}",
    "build": "dotnet build -c Release",
    "publish": "dotnet publish {project_file} -c Release --no-build -o {publish_target}",
    "install": "pip install -r {manifest}",
}

DEFAULT_NOTIFICATION_TEMPLATE = "The following project(s) have been deployed: {projects}"

# Exit codes reported by the process runner when the child never produced one
EXIT_TIMEOUT = 124
EXIT_LAUNCH_FAILURE = 127

# Project file extensions by runtime
COMPILED_EXTENSIONS = (".csproj", ".vbproj", ".fsproj")
INTERPRETED_EXTENSIONS = (".pyproj",)

# Declared language names by runtime
COMPILED_LANGUAGES = ("compiled", "csharp", "c#", "vb", "vbnet", "fsharp", "dotnet", ".net")
INTERPRETED_LANGUAGES = ("interpreted", "python", "py")

# Telegram Bot API
TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"
TELEGRAM_TIMEOUT = 30  # seconds


class SourceType(Enum):
    FILE = "file"
    DATABASE = "database"


class EligibilityMode(Enum):
    FLAG = "flag"
    MARKER = "marker"


class PostDeployCwd(Enum):
    PROJECT = "project"
    INHERIT = "inherit"


class NotificationType(Enum):
    TELEGRAM = "telegram"
    LOG = "log"
    NONE = "none"


# Error codes
class ErrorCode:
    CONFIG_ERROR = "DP001"
    CREDENTIAL_MISSING = "DP002"
    SOURCE_UNREADABLE = "DP003"
    DECLARATION_INVALID = "DP004"
    RUNTIME_UNSUPPORTED = "DP005"
    NOTIFICATION_FAILED = "DP006"


# Environment variables
ENV_CONFIG_PATH = "DEPLOY_PIPELINE_CONFIG"
ENV_CONNECTION = "DEPLOY_PIPELINE_CONNECTION"
ENV_TELEGRAM_TOKEN = "TELEGRAM_BOT_TOKEN"
ENV_TELEGRAM_CHAT_ID = "TELEGRAM_CHAT_ID"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
