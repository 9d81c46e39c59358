"""Services surrounding the deployment pipeline"""

from .config_service import ConfigService
from .notifier import Notifier, NullNotifier, LogNotifier, TelegramNotifier, create_notifier
from .project_source import (
    ProjectSource,
    FileProjectSource,
    SqliteProjectStore,
    create_project_source,
)
from .report import render_pending_report, write_pending_report, open_report
from .log_sink import SqliteLogHandler

__all__ = [
    'ConfigService',
    'Notifier',
    'NullNotifier',
    'LogNotifier',
    'TelegramNotifier',
    'create_notifier',
    'ProjectSource',
    'FileProjectSource',
    'SqliteProjectStore',
    'create_project_source',
    'render_pending_report',
    'write_pending_report',
    'open_report',
    'SqliteLogHandler',
]
