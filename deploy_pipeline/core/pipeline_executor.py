# deploy_pipeline/core/pipeline_executor.py
"""Fixed step sequence for deploying a single project"""

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

from .process_runner import ProcessRunner, render_command
from .step_policy import ResolvedSteps
from ..constants import PostDeployCwd
from ..models.config import PipelineConfig
from ..models.project import ProjectDeclaration
from ..models.result import PipelineResult, Step, StepOutcome, StepStatus

# Error messages logged when a step fails
STEP_FAILURE_MESSAGES = {
    Step.PULL: "Git pull for project '{name}' failed",
    Step.BUILD: "Project '{name}' build failed",
    Step.PUBLISH: "Project '{name}' publish failed",
    Step.INSTALL: "Project '{name}' dependency install from {manifest} failed",
    Step.POST_DEPLOY: "Post-deploy for project '{name}' failed",
}


class PipelineExecutor:
    """Run pull, build, publish, install and post-deploy for one project

    Pull failing stops everything. Build failing stops publish. Dependency
    install runs whenever pull succeeded. The post-deploy hook runs only
    while the project still counts as deployed.
    """

    def __init__(self, runner: ProcessRunner, config: Optional[PipelineConfig] = None,
                 logger: Optional[logging.Logger] = None):
        self.runner = runner
        self.config = config or PipelineConfig()
        self.logger = logger or logging.getLogger(__name__)

    def execute(self, project: ProjectDeclaration, steps: ResolvedSteps) -> PipelineResult:
        """
        Deploy a project

        Args:
            project: Project declaration
            steps: Optional steps resolved by the step policy

        Returns:
            Pipeline result; ``deployed`` is the single pass/fail outcome
        """
        result = PipelineResult(project=project.name)
        self.logger.info(f"Deploying project '{project.name}'")

        if not project.source_directory.is_dir():
            result.error = f"Source directory does not exist: {project.source_directory}"
            self.logger.error(f"Project '{project.name}': {result.error}")
            return self._finish(project, result, deployed=False)

        pull = self._run_step(project, Step.PULL, self._command(project, 'pull'))
        result.outcomes.append(pull)
        if pull.status == StepStatus.FAILED:
            self._not_attempted(result, [Step.BUILD, Step.PUBLISH, Step.INSTALL, Step.POST_DEPLOY])
            return self._finish(project, result, deployed=False)

        deployed = True

        if steps.buildable:
            build = self._run_step(project, Step.BUILD, self._command(project, 'build'))
            result.outcomes.append(build)
            if build.status == StepStatus.FAILED:
                deployed = False
                self._not_attempted(result, [Step.PUBLISH])
            elif steps.has_publish:
                publish = self._run_step(project, Step.PUBLISH, self._command(project, 'publish'))
                result.outcomes.append(publish)
                deployed = publish.status.passed
            else:
                result.outcomes.append(StepOutcome(Step.PUBLISH, StepStatus.NOT_APPLICABLE))
        else:
            result.outcomes.append(StepOutcome(Step.BUILD, StepStatus.NOT_APPLICABLE))
            result.outcomes.append(StepOutcome(Step.PUBLISH, StepStatus.NOT_APPLICABLE))

        install = self._install_dependencies(project)
        result.outcomes.append(install)
        if install.status == StepStatus.FAILED:
            deployed = False

        if not steps.has_post_deploy:
            result.outcomes.append(StepOutcome(Step.POST_DEPLOY, StepStatus.NOT_APPLICABLE))
        elif not deployed:
            self._not_attempted(result, [Step.POST_DEPLOY])
        else:
            post_deploy = self._run_step(
                project,
                Step.POST_DEPLOY,
                [str(project.post_deploy_hook)],
                cwd=self._post_deploy_cwd(project)
            )
            result.outcomes.append(post_deploy)
            deployed = post_deploy.status.passed

        return self._finish(project, result, deployed)

    def _install_dependencies(self, project: ProjectDeclaration) -> StepOutcome:
        """Install from the dependency manifest when the project has one"""
        manifest = project.source_directory / self.config.dependency_manifest
        if not manifest.is_file():
            self.logger.debug(f"Project '{project.name}' has no {self.config.dependency_manifest}")
            return StepOutcome(Step.INSTALL, StepStatus.NOT_APPLICABLE)

        return self._run_step(project, Step.INSTALL, self._command(project, 'install'))

    def _run_step(self, project: ProjectDeclaration, step: Step, command: List[str],
                  cwd: Optional[Path] = None) -> StepOutcome:
        """Run one step's command, logging an error if it fails"""
        if cwd is None and step != Step.POST_DEPLOY:
            cwd = project.source_directory

        self.logger.debug(f"Project '{project.name}': {step.value}")
        start = time.monotonic()
        exit_code = self.runner.run(command, cwd)
        duration = time.monotonic() - start

        if exit_code != 0:
            message = STEP_FAILURE_MESSAGES[step].format(
                name=project.name,
                manifest=self.config.dependency_manifest
            )
            self.logger.error(f"{message} (exit code {exit_code})")
            return StepOutcome(step, StepStatus.FAILED, exit_code, duration)

        return StepOutcome(step, StepStatus.SUCCEEDED, exit_code, duration)

    def _command(self, project: ProjectDeclaration, step: str) -> List[str]:
        return render_command(self.config.command(step), **self._fields(project))

    def _fields(self, project: ProjectDeclaration) -> Dict[str, str]:
        return {
            'name': project.name,
            'branch': project.branch,
            'source_directory': str(project.source_directory),
            'project_file': project.project_file_name,
            'publish_target': str(project.publish_target or ""),
            'manifest': self.config.dependency_manifest,
        }

    def _post_deploy_cwd(self, project: ProjectDeclaration) -> Optional[Path]:
        if self.config.post_deploy_cwd == PostDeployCwd.PROJECT:
            return project.source_directory
        return None

    @staticmethod
    def _not_attempted(result: PipelineResult, skipped: List[Step]) -> None:
        for step in skipped:
            result.outcomes.append(StepOutcome(step, StepStatus.NOT_ATTEMPTED))

    def _finish(self, project: ProjectDeclaration, result: PipelineResult,
                deployed: bool) -> PipelineResult:
        result.deployed = deployed
        if deployed:
            self.logger.info(f"Project '{project.name}' deployment succeeded")
        else:
            # the specific cause was logged by the failing step
            self.logger.warning(f"Project '{project.name}' deployment failed")
        return result
