"""Logging handler that records log entries in the project database"""

import logging
import sqlite3
from datetime import datetime

from ..constants import APP_NAME

LOG_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS deployment_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    logged_at TEXT NOT NULL,
    program TEXT NOT NULL,
    source TEXT NOT NULL,
    level TEXT NOT NULL,
    message TEXT NOT NULL
);
"""


class SqliteLogHandler(logging.Handler):
    """Write log records into a ``deployment_log`` table"""

    def __init__(self, connection: sqlite3.Connection, program: str = APP_NAME,
                 level: int = logging.INFO):
        super().__init__(level)
        self.connection = connection
        self.program = program
        self.connection.executescript(LOG_TABLE_SCHEMA)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.connection.execute(
                """INSERT INTO deployment_log (logged_at, program, source, level, message)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    datetime.fromtimestamp(record.created).isoformat(timespec='seconds'),
                    self.program,
                    f"{record.module}.{record.funcName}",
                    record.levelname,
                    self.format(record)
                )
            )
            self.connection.commit()
        except sqlite3.Error:
            self.handleError(record)
