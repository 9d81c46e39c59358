"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import (
    DEFAULT_COMMANDS,
    DEFAULT_DEPENDENCY_MANIFEST,
    DEFAULT_MARKER_FILE,
    DEFAULT_NOTIFICATION_TEMPLATE,
    DEFAULT_PROCESS_TIMEOUT,
    DEFAULT_PROJECTS_FILE,
    DEFAULT_REPORT_FILE,
    ENV_CONNECTION,
    ENV_TELEGRAM_CHAT_ID,
    ENV_TELEGRAM_TOKEN,
    EligibilityMode,
    NotificationType,
    PostDeployCwd,
    SourceType,
)


@dataclass
class SourceConfig:
    """Where project declarations come from"""

    type: SourceType = SourceType.FILE
    path: Optional[Path] = None
    connection_env: str = ENV_CONNECTION

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Path) -> 'SourceConfig':
        """Create from dictionary"""
        path = data.get('path')
        source_type = SourceType(data.get('type', SourceType.FILE.value))
        if path is None and source_type == SourceType.FILE:
            path = DEFAULT_PROJECTS_FILE

        return cls(
            type=source_type,
            path=_resolve(path, base_dir),
            connection_env=data.get('connection_env', ENV_CONNECTION)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {'type': self.type.value, 'connection_env': self.connection_env}
        if self.path:
            data['path'] = str(self.path)
        return data


@dataclass
class NotificationConfig:
    """Notification channel configuration"""

    type: NotificationType = NotificationType.LOG
    token_env: str = ENV_TELEGRAM_TOKEN
    chat_id_env: str = ENV_TELEGRAM_CHAT_ID
    template: str = DEFAULT_NOTIFICATION_TEMPLATE

    def __post_init__(self):
        """Reject templates that cannot be filled with the deployed list"""
        try:
            self.template.format(projects="")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"Invalid notification template {self.template!r}: {e!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NotificationConfig':
        """Create from dictionary"""
        return cls(
            type=NotificationType(data.get('type', NotificationType.LOG.value)),
            token_env=data.get('token_env', ENV_TELEGRAM_TOKEN),
            chat_id_env=data.get('chat_id_env', ENV_TELEGRAM_CHAT_ID),
            template=data.get('template', DEFAULT_NOTIFICATION_TEMPLATE)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'type': self.type.value,
            'token_env': self.token_env,
            'chat_id_env': self.chat_id_env,
            'template': self.template
        }


@dataclass
class ReportConfig:
    """Pending-deployment report configuration"""

    path: Path = Path(DEFAULT_REPORT_FILE)
    open: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Path) -> 'ReportConfig':
        """Create from dictionary"""
        return cls(
            path=_resolve(data.get('path', DEFAULT_REPORT_FILE), base_dir),
            open=data.get('open', True)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {'path': str(self.path), 'open': self.open}


@dataclass
class PipelineConfig:
    """Top-level deploy-pipeline configuration"""

    source: SourceConfig = field(default_factory=SourceConfig)
    eligibility: EligibilityMode = EligibilityMode.MARKER
    marker_file: str = DEFAULT_MARKER_FILE
    dependency_manifest: str = DEFAULT_DEPENDENCY_MANIFEST
    timeout: Optional[float] = DEFAULT_PROCESS_TIMEOUT
    post_deploy_cwd: PostDeployCwd = PostDeployCwd.PROJECT
    commands: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COMMANDS))
    notification: NotificationConfig = field(default_factory=NotificationConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    log_to_database: bool = False
    base_dir: Path = field(default_factory=Path.cwd)

    def __post_init__(self):
        """Validate cross-field constraints"""
        if self.eligibility == EligibilityMode.FLAG and self.source.type != SourceType.DATABASE:
            raise ValueError("Flag-based eligibility requires the database project source")
        if self.log_to_database and self.source.type != SourceType.DATABASE:
            raise ValueError("Database logging requires the database project source")

    def command(self, step: str) -> str:
        """Get the command template for a step"""
        return self.commands.get(step, DEFAULT_COMMANDS[step])

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> 'PipelineConfig':
        """Create from dictionary

        Args:
            data: Parsed configuration document
            base_dir: Directory relative paths are resolved against
        """
        base_dir = base_dir or Path.cwd()

        commands = dict(DEFAULT_COMMANDS)
        commands.update(data.get('commands') or {})

        timeout = data.get('timeout', DEFAULT_PROCESS_TIMEOUT)
        if not timeout:
            timeout = None

        return cls(
            source=SourceConfig.from_dict(data.get('source') or {}, base_dir),
            eligibility=EligibilityMode(data.get('eligibility', EligibilityMode.MARKER.value)),
            marker_file=data.get('marker_file', DEFAULT_MARKER_FILE),
            dependency_manifest=data.get('dependency_manifest', DEFAULT_DEPENDENCY_MANIFEST),
            timeout=timeout,
            post_deploy_cwd=PostDeployCwd(data.get('post_deploy_cwd', PostDeployCwd.PROJECT.value)),
            commands=commands,
            notification=NotificationConfig.from_dict(data.get('notification') or {}),
            report=ReportConfig.from_dict(data.get('report') or {}, base_dir),
            log_to_database=(data.get('logging') or {}).get('database', False),
            base_dir=base_dir
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'source': self.source.to_dict(),
            'eligibility': self.eligibility.value,
            'marker_file': self.marker_file,
            'dependency_manifest': self.dependency_manifest,
            'timeout': self.timeout or 0,
            'post_deploy_cwd': self.post_deploy_cwd.value,
            'commands': self.commands,
            'notification': self.notification.to_dict(),
            'report': self.report.to_dict(),
            'logging': {'database': self.log_to_database}
        }


def _resolve(value: Optional[str], base_dir: Path) -> Optional[Path]:
    if value is None:
        return None
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return path
