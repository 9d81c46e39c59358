"""
Shared test fixtures and configuration.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Set, Tuple

import pytest

from deploy_pipeline.models import PipelineConfig, ProjectDeclaration, RuntimeKind
from deploy_pipeline.services.notifier import Notifier


class RecordingRunner:
    """Process runner double that records commands instead of running them"""

    def __init__(self, fail: Optional[Set[str]] = None):
        self.fail = set(fail or ())
        self.calls: List[Tuple[str, List[str], Optional[Path]]] = []

    @staticmethod
    def classify(command: Sequence[str]) -> str:
        if command[0] == "git":
            return "pull"
        if list(command[:2]) == ["dotnet", "build"]:
            return "build"
        if list(command[:2]) == ["dotnet", "publish"]:
            return "publish"
        if command[0] == "pip":
            return "install"
        return "post-deploy"

    def run(self, command: Sequence[str], cwd: Optional[Path] = None) -> int:
        step = self.classify(command)
        self.calls.append((step, list(command), cwd))
        return 1 if step in self.fail else 0

    @property
    def steps(self) -> List[str]:
        return [step for step, _, _ in self.calls]

    def command(self, step: str) -> List[str]:
        for name, command, _ in self.calls:
            if name == step:
                return command
        raise KeyError(step)

    def cwd(self, step: str) -> Optional[Path]:
        for name, _, cwd in self.calls:
            if name == step:
                return cwd
        raise KeyError(step)


class RecordingNotifier(Notifier):
    """Notifier double that keeps every message"""

    def __init__(self):
        self.messages: List[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def config(tmp_path: Path) -> PipelineConfig:
    return PipelineConfig(base_dir=tmp_path)


@pytest.fixture
def make_project(tmp_path: Path):
    """Create a project directory and its declaration"""

    def _make(name: str = "app",
              kind: RuntimeKind = RuntimeKind.NONE,
              requirements: bool = False,
              hook: bool = False,
              publish: Optional[str] = None,
              marker: bool = False,
              active: bool = True,
              create_dir: bool = True) -> ProjectDeclaration:
        directory = tmp_path / "src" / name
        if create_dir:
            directory.mkdir(parents=True)
            if requirements:
                (directory / "requirements.txt").write_text("requests\n")
            if marker:
                (directory / "deploy.txt").write_text("")

        hook_path = None
        if hook:
            hook_path = tmp_path / "hooks" / f"{name}.sh"
            hook_path.parent.mkdir(parents=True, exist_ok=True)
            hook_path.write_text("#!/bin/sh\nexit 0\n")

        publish_path = None
        if publish == "valid":
            publish_path = tmp_path / "publish" / name
            publish_path.mkdir(parents=True)
        elif publish == "missing":
            publish_path = tmp_path / "publish" / "missing" / name

        project_file = None
        runtime = ""
        if kind == RuntimeKind.COMPILED:
            project_file = directory / f"{name}.csproj"
            runtime = ".csproj"
        elif kind == RuntimeKind.INTERPRETED:
            runtime = "python"
        elif kind == RuntimeKind.UNKNOWN:
            runtime = ".rbproj"

        return ProjectDeclaration(
            name=name,
            source_directory=directory,
            branch="main",
            runtime_kind=kind,
            runtime=runtime,
            project_file=project_file,
            publish_target=publish_path,
            post_deploy_hook=hook_path,
            active=active,
        )

    return _make
