"""
Tests for the process runner and command rendering.
"""

import sys

from deploy_pipeline.constants import EXIT_LAUNCH_FAILURE, EXIT_TIMEOUT
from deploy_pipeline.core import ProcessRunner, render_command


class TestRenderCommand:
    def test_placeholders(self):
        assert render_command("git pull origin {branch}", branch="release/2.0") == [
            "git", "pull", "origin", "release/2.0"
        ]

    def test_substituted_path_with_spaces_stays_one_argument(self):
        command = render_command("dotnet publish {project_file} -o {publish_target}",
                                 project_file="Api.csproj", publish_target="/srv/My Apps/api")
        assert command == ["dotnet", "publish", "Api.csproj", "-o", "/srv/My Apps/api"]

    def test_quoted_template(self):
        assert render_command('echo "hello world"') == ["echo", "hello world"]


class TestProcessRunner:
    def test_exit_code_passed_through(self, tmp_path):
        runner = ProcessRunner()
        assert runner.run([sys.executable, "-c", "import sys; sys.exit(3)"], tmp_path) == 3

    def test_success(self, tmp_path):
        assert ProcessRunner().run([sys.executable, "-c", "pass"], tmp_path) == 0

    def test_working_directory(self, tmp_path):
        script = "import os, pathlib; pathlib.Path('cwd.txt').write_text(os.getcwd())"
        ProcessRunner().run([sys.executable, "-c", script], tmp_path)

        assert (tmp_path / "cwd.txt").exists()

    def test_missing_executable(self, tmp_path):
        runner = ProcessRunner()
        assert runner.run(["definitely-not-a-real-command-xyz"], tmp_path) == EXIT_LAUNCH_FAILURE

    def test_missing_working_directory(self, tmp_path):
        runner = ProcessRunner()
        assert runner.run([sys.executable, "-c", "pass"], tmp_path / "nope") == EXIT_LAUNCH_FAILURE

    def test_timeout(self, tmp_path):
        runner = ProcessRunner(timeout=0.5)
        code = runner.run([sys.executable, "-c", "import time; time.sleep(10)"], tmp_path)
        assert code == EXIT_TIMEOUT
