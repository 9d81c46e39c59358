# deploy_pipeline/services/project_source.py
"""Project declaration sources: a project file or a SQLite database"""

import json
import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import jsonschema
import yaml

from ..api.exceptions import (
    CredentialError,
    DeployPipelineError,
    MissingFieldError,
    ProjectDeclarationError,
    ProjectSourceError,
)
from ..core.eligibility import DeploymentQueue
from ..models.config import SourceConfig
from ..models.project import ProjectDeclaration
from ..constants import SourceType

logger = logging.getLogger(__name__)

DOCUMENT_SCHEMA = {
    "type": "object",
    "required": ["projects"],
    "properties": {
        "projects": {"type": "object"}
    }
}

PROJECT_SCHEMA = {
    "type": "object",
    "required": ["directory", "branch"],
    "properties": {
        "active": {"type": "boolean"},
        "directory": {"type": "string", "minLength": 1},
        "branch": {"type": "string", "minLength": 1},
        "language": {"type": ["string", "null"]},
        "projectFile": {"type": ["string", "null"]},
        "publishLocation": {"type": ["string", "null"]},
        "postDeployBatchFile": {"type": ["string", "null"]},
        "group": {"type": "integer"}
    }
}

REPOSITORIES_SCHEMA = """
CREATE TABLE IF NOT EXISTS repositories (
    repo_name TEXT PRIMARY KEY,
    project_file_path TEXT NOT NULL,
    git_branch TEXT NOT NULL DEFAULT 'main',
    publish_path TEXT,
    post_deploy_path TEXT,
    automated_deployment INTEGER NOT NULL DEFAULT 1,
    deployment_queued INTEGER NOT NULL DEFAULT 0,
    deployment_group INTEGER NOT NULL DEFAULT 0,
    last_deployed_at TEXT
);
"""


class ProjectSource(ABC):
    """Supplies project declarations in batch order"""

    def __init__(self):
        self.failures: List[Tuple[str, DeployPipelineError]] = []

    @abstractmethod
    def load_projects(self) -> List[ProjectDeclaration]:
        """
        Load all declared projects

        Declarations that fail validation are logged, recorded in
        ``failures`` and left out.

        Raises:
            ProjectSourceError: If the source itself cannot be read
        """
        pass

    def _reject(self, name: str, error: DeployPipelineError) -> None:
        logger.error(str(error))
        self.failures.append((name, error))


class FileProjectSource(ProjectSource):
    """Projects declared in a JSON or YAML document

    The document holds a ``projects`` map keyed by project name. Projects
    are ordered by ``group``, then by their position in the document.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._validator = jsonschema.Draft7Validator(PROJECT_SCHEMA)

    def load_projects(self) -> List[ProjectDeclaration]:
        self.failures = []
        document = self._read_document()

        projects = []
        for key, data in document['projects'].items():
            # YAML reads bare numeric keys as ints
            name = str(key)
            try:
                self._validate(name, data)
                projects.append(ProjectDeclaration.from_dict(name, data, self.path.parent))
            except ProjectDeclarationError as e:
                self._reject(name, e)

        # sorted() is stable, so document order is kept within a group
        return sorted(projects, key=lambda p: p.group)

    def _read_document(self) -> Dict[str, Any]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                if self.path.suffix.lower() in ('.yaml', '.yml'):
                    document = yaml.safe_load(f)
                else:
                    document = json.load(f)
        except OSError as e:
            raise ProjectSourceError(f"Unable to read project file {self.path}: {e}")
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ProjectSourceError(f"Unable to parse project file {self.path}: {e}")

        try:
            jsonschema.validate(document, DOCUMENT_SCHEMA)
        except jsonschema.ValidationError as e:
            raise ProjectSourceError(f"Invalid project file {self.path}: {e.message}")

        return document

    def _validate(self, name: str, data: Any) -> None:
        """Fail closed on the first schema violation of a declaration"""
        for error in self._validator.iter_errors(data):
            if error.validator == 'required':
                missing = [f for f in PROJECT_SCHEMA['required'] if f not in data]
                raise MissingFieldError(name, missing[0])
            location = ".".join(str(p) for p in error.path) or "declaration"
            raise ProjectDeclarationError(name, f"{location}: {error.message}")


class SqliteProjectStore(ProjectSource, DeploymentQueue):
    """Projects and their queued flags kept in a SQLite ``repositories`` table"""

    def __init__(self, connection: sqlite3.Connection):
        super().__init__()
        self.connection = connection
        self.connection.row_factory = sqlite3.Row

    @classmethod
    def connect(cls, database: str) -> 'SqliteProjectStore':
        """Open the database, creating the table when it does not exist"""
        if database.startswith('sqlite:///'):
            database = database[len('sqlite:///'):]

        try:
            connection = sqlite3.connect(database)
            connection.executescript(REPOSITORIES_SCHEMA)
        except sqlite3.Error as e:
            raise ProjectSourceError(f"Unable to open project database {database}: {e}")

        return cls(connection)

    def load_projects(self) -> List[ProjectDeclaration]:
        self.failures = []
        try:
            rows = self.connection.execute(
                """SELECT repo_name, project_file_path, git_branch,
                          publish_path, post_deploy_path, deployment_group
                   FROM repositories
                   WHERE automated_deployment = 1
                   ORDER BY deployment_group, repo_name"""
            ).fetchall()
        except sqlite3.Error as e:
            raise ProjectSourceError(f"Unable to query project database: {e}")

        projects = []
        for row in rows:
            try:
                projects.append(self._from_row(row))
            except ProjectDeclarationError as e:
                self._reject(row['repo_name'], e)
        return projects

    def queued_projects(self) -> Set[str]:
        try:
            rows = self.connection.execute(
                """SELECT repo_name FROM repositories
                   WHERE automated_deployment = 1 AND deployment_queued = 1"""
            ).fetchall()
        except sqlite3.Error as e:
            raise ProjectSourceError(f"Unable to query deployment queue: {e}")
        return {row['repo_name'] for row in rows}

    def clear_queued(self, name: str, deployed: bool) -> None:
        if deployed:
            self.connection.execute(
                """UPDATE repositories
                   SET deployment_queued = 0, last_deployed_at = ?
                   WHERE repo_name = ?""",
                (datetime.now().isoformat(timespec='seconds'), name)
            )
        else:
            self.connection.execute(
                "UPDATE repositories SET deployment_queued = 0 WHERE repo_name = ?",
                (name,)
            )
        self.connection.commit()

    def close(self) -> None:
        self.connection.close()

    @staticmethod
    def _from_row(row: sqlite3.Row) -> ProjectDeclaration:
        name = row['repo_name']
        for column in ('project_file_path', 'git_branch'):
            if not row[column]:
                raise MissingFieldError(name, column)

        return ProjectDeclaration.from_project_path(
            name,
            Path(row['project_file_path']).expanduser(),
            row['git_branch'],
            publish_target=_optional_path(row['publish_path']),
            post_deploy_hook=_optional_path(row['post_deploy_path']),
            group=row['deployment_group'] or 0
        )


def resolve_connection(env_var: str) -> str:
    """
    Read the database connection string from the environment

    Raises:
        CredentialError: If the variable is unset or empty
    """
    connection = os.environ.get(env_var)
    if not connection:
        raise CredentialError(env_var)
    return connection


def create_project_source(config: SourceConfig) -> ProjectSource:
    """Create the project source described by the configuration"""
    if config.type == SourceType.DATABASE:
        return SqliteProjectStore.connect(resolve_connection(config.connection_env))

    if config.path is None:
        raise ProjectSourceError("File project source requires a path")
    return FileProjectSource(config.path)


def _optional_path(value: Optional[str]) -> Optional[Path]:
    if value is None or not str(value).strip():
        return None
    return Path(value).expanduser()
