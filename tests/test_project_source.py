"""
Tests for project sources: project files and the SQLite store.
"""

import json
import sqlite3
import textwrap
from pathlib import Path

import pytest

from deploy_pipeline.api.exceptions import (
    CredentialError,
    MissingFieldError,
    ProjectSourceError,
)
from deploy_pipeline.constants import SourceType
from deploy_pipeline.models import RuntimeKind, SourceConfig
from deploy_pipeline.services.project_source import (
    FileProjectSource,
    SqliteProjectStore,
    create_project_source,
)


def _write_projects(path: Path, projects: dict) -> Path:
    path.write_text(json.dumps({"projects": projects}))
    return path


class TestFileProjectSource:
    def test_loads_json(self, tmp_path):
        path = _write_projects(tmp_path / "projects.json", {
            "web": {"active": True, "directory": "src/web", "branch": "main", "language": "csharp"},
            "tool": {"active": False, "directory": "src/tool", "branch": "dev", "language": "python"},
        })

        projects = FileProjectSource(path).load_projects()

        assert [p.name for p in projects] == ["web", "tool"]
        assert projects[0].source_directory == tmp_path / "src" / "web"
        assert projects[0].runtime_kind == RuntimeKind.COMPILED
        assert not projects[1].active

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "projects.yaml"
        path.write_text(textwrap.dedent("""\
            projects:
              scraper:
                directory: /srv/scraper
                branch: main
                language: python
        """))

        projects = FileProjectSource(path).load_projects()

        assert projects[0].name == "scraper"
        assert projects[0].runtime_kind == RuntimeKind.INTERPRETED

    def test_numeric_yaml_key_is_a_string_name(self, tmp_path):
        path = tmp_path / "projects.yaml"
        path.write_text(textwrap.dedent("""\
            projects:
              2048:
                directory: /srv/game
                branch: main
        """))

        projects = FileProjectSource(path).load_projects()

        assert projects[0].name == "2048"

    def test_ordered_by_group_then_document(self, tmp_path):
        path = _write_projects(tmp_path / "projects.json", {
            "c": {"directory": "c", "branch": "main", "group": 1},
            "a": {"directory": "a", "branch": "main", "group": 2},
            "b": {"directory": "b", "branch": "main", "group": 1},
        })

        assert [p.name for p in FileProjectSource(path).load_projects()] == ["c", "b", "a"]

    def test_invalid_declaration_skipped(self, tmp_path):
        path = _write_projects(tmp_path / "projects.json", {
            "broken": {"directory": "x"},
            "typed": {"directory": "x", "branch": "main", "active": "yes"},
            "ok": {"directory": "y", "branch": "main"},
        })
        source = FileProjectSource(path)

        projects = source.load_projects()

        assert [p.name for p in projects] == ["ok"]
        assert [name for name, _ in source.failures] == ["broken", "typed"]
        assert isinstance(source.failures[0][1], MissingFieldError)
        assert source.failures[0][1].field_name == "branch"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectSourceError):
            FileProjectSource(tmp_path / "missing.json").load_projects()

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "projects.json"
        path.write_text("{not json")
        with pytest.raises(ProjectSourceError):
            FileProjectSource(path).load_projects()

    def test_missing_projects_map(self, tmp_path):
        path = tmp_path / "projects.json"
        path.write_text(json.dumps({"apps": {}}))
        with pytest.raises(ProjectSourceError):
            FileProjectSource(path).load_projects()


@pytest.fixture
def database(tmp_path):
    path = tmp_path / "deploy.db"
    store = SqliteProjectStore.connect(str(path))
    api_dir = tmp_path / "Api"
    api_dir.mkdir()
    (api_dir / "Api.csproj").write_text("<Project />")
    rows = [
        ("Api", str(api_dir / "Api.csproj"), "main", None, None, 1, 1, 1),
        ("Scraper", str(tmp_path / "Scraper"), "main", None, "/srv/hooks/restart.sh", 1, 0, 0),
        ("Manual", str(tmp_path / "Manual"), "main", None, None, 0, 1, 0),
    ]
    store.connection.executemany(
        """INSERT INTO repositories
           (repo_name, project_file_path, git_branch, publish_path, post_deploy_path,
            automated_deployment, deployment_queued, deployment_group)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        rows
    )
    store.connection.commit()
    yield store
    store.close()


class TestSqliteProjectStore:
    def test_loads_automated_projects_in_group_order(self, database, tmp_path):
        projects = database.load_projects()

        assert [p.name for p in projects] == ["Scraper", "Api"]
        api = projects[1]
        assert api.source_directory == tmp_path / "Api"
        assert api.runtime_kind == RuntimeKind.COMPILED
        assert projects[0].runtime_kind == RuntimeKind.NONE
        assert projects[0].post_deploy_hook == Path("/srv/hooks/restart.sh")

    def test_queued_projects(self, database):
        assert database.queued_projects() == {"Api"}

    def test_clear_queued_after_success(self, database):
        database.clear_queued("Api", deployed=True)

        row = database.connection.execute(
            "SELECT deployment_queued, last_deployed_at FROM repositories WHERE repo_name = 'Api'"
        ).fetchone()
        assert row["deployment_queued"] == 0
        assert row["last_deployed_at"] is not None
        assert database.queued_projects() == set()

    def test_clear_queued_after_failure(self, database):
        database.clear_queued("Api", deployed=False)

        row = database.connection.execute(
            "SELECT deployment_queued, last_deployed_at FROM repositories WHERE repo_name = 'Api'"
        ).fetchone()
        assert row["deployment_queued"] == 0
        assert row["last_deployed_at"] is None


class TestCreateProjectSource:
    def test_database_requires_connection(self, monkeypatch):
        monkeypatch.delenv("DEPLOY_PIPELINE_CONNECTION", raising=False)
        with pytest.raises(CredentialError) as exc_info:
            create_project_source(SourceConfig(type=SourceType.DATABASE))
        assert exc_info.value.env_var == "DEPLOY_PIPELINE_CONNECTION"

    def test_database_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MY_DB", f"sqlite:///{tmp_path / 'x.db'}")
        source = create_project_source(SourceConfig(type=SourceType.DATABASE, connection_env="MY_DB"))

        assert isinstance(source, SqliteProjectStore)
        assert source.load_projects() == []
        source.close()

    def test_file_source(self, tmp_path):
        source = create_project_source(SourceConfig(path=tmp_path / "projects.json"))
        assert isinstance(source, FileProjectSource)

    def test_unopenable_database(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MY_DB", str(tmp_path / "missing-dir" / "x.db"))
        with pytest.raises(ProjectSourceError):
            create_project_source(SourceConfig(type=SourceType.DATABASE, connection_env="MY_DB"))
