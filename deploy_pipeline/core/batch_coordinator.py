# deploy_pipeline/core/batch_coordinator.py
"""Batch iteration over declared projects in report or deploy mode"""

import logging
from typing import Iterable, List, Optional

from .eligibility import EligibilityGate
from .pipeline_executor import PipelineExecutor
from .step_policy import ResolvedSteps, StepPolicy
from ..api.exceptions import NotificationError, ProjectDeclarationError
from ..constants import DEFAULT_NOTIFICATION_TEMPLATE
from ..models.project import ProjectDeclaration
from ..models.result import BatchResult, PipelineResult
from ..services.notifier import Notifier, NullNotifier


class BatchCoordinator:
    """Run every eligible project through the pipeline, one at a time

    A failure in one project never stops the others. The aggregate
    notification only lists projects that deployed.
    """

    def __init__(self,
                 gate: EligibilityGate,
                 executor: PipelineExecutor,
                 policy: Optional[StepPolicy] = None,
                 notifier: Optional[Notifier] = None,
                 notification_template: str = DEFAULT_NOTIFICATION_TEMPLATE,
                 logger: Optional[logging.Logger] = None):
        self.gate = gate
        self.executor = executor
        self.logger = logger or logging.getLogger(__name__)
        self.policy = policy or StepPolicy(self.logger)
        self.notifier = notifier or NullNotifier()
        self.notification_template = notification_template

    def report(self, projects: Iterable[ProjectDeclaration]) -> List[str]:
        """
        List projects pending deployment without touching any signal

        Args:
            projects: Declarations in batch order

        Returns:
            Names of eligible projects, in input order
        """
        pending = []
        for project in self._unique(projects):
            if self.gate.is_eligible(project):
                pending.append(project.name)
        return pending

    def deploy(self, projects: Iterable[ProjectDeclaration]) -> BatchResult:
        """
        Deploy every eligible project and notify about the ones that deployed

        Args:
            projects: Declarations in batch order

        Returns:
            Batch result
        """
        batch = BatchResult()

        for project in self._unique(projects, batch):
            if not self.gate.is_eligible(project):
                self.logger.debug(f"Project '{project.name}' is not pending deployment")
                continue

            try:
                steps = self.policy.resolve(project)
            except ProjectDeclarationError as e:
                self.logger.error(str(e))
                batch.add_failure(project.name, e)
                self._consume(project, False)
                continue

            result = self._execute(project, steps, batch)
            if result is not None:
                batch.record(result)

        self._notify(batch)
        return batch

    def _execute(self, project: ProjectDeclaration, steps: ResolvedSteps,
                 batch: BatchResult) -> Optional[PipelineResult]:
        """Run the pipeline and consume the signal exactly once, whatever happens"""
        result = None
        try:
            result = self.executor.execute(project, steps)
        except Exception as e:
            self.logger.critical(f"Unexpected error deploying project '{project.name}': {e}",
                                 exc_info=True)
            batch.add_failure(project.name, e)
        finally:
            self._consume(project, result.deployed if result else False)
        return result

    def _consume(self, project: ProjectDeclaration, deployed: bool) -> None:
        try:
            self.gate.consume(project, deployed)
        except Exception as e:
            self.logger.error(
                f"Unable to clear the deployment signal for project '{project.name}': {e}"
            )

    def _notify(self, batch: BatchResult) -> None:
        if not batch.deployed:
            self.logger.info("No projects were deployed")
            return

        try:
            message = self.notification_template.format(projects=batch.summary)
        except (KeyError, IndexError, ValueError) as e:
            self.logger.error(f"Invalid notification template {self.notification_template!r}: {e!r}")
            return

        try:
            self.notifier.notify(message)
        except NotificationError as e:
            self.logger.warning(f"Notification failed: {e}")

    def _unique(self, projects: Iterable[ProjectDeclaration],
                batch: Optional[BatchResult] = None) -> Iterable[ProjectDeclaration]:
        """Yield each project name once"""
        seen = set()
        for project in projects:
            if project.name in seen:
                self.logger.warning(f"Duplicate declaration for project '{project.name}' ignored")
                if batch is not None:
                    batch.skipped.append(project.name)
                continue
            seen.add(project.name)
            yield project
