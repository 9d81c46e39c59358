"""Deployer API wiring the pipeline engine to its collaborators"""

import logging
from typing import List, Optional

from ..constants import EligibilityMode
from ..core import (
    BatchCoordinator,
    EligibilityGate,
    FlagEligibilityGate,
    MarkerFileEligibilityGate,
    PipelineExecutor,
    ProcessRunner,
    StepPolicy,
)
from ..models import BatchResult, PipelineConfig, ProjectDeclaration
from ..services.log_sink import SqliteLogHandler
from ..services.notifier import Notifier, create_notifier
from ..services.project_source import ProjectSource, SqliteProjectStore, create_project_source

PACKAGE_LOGGER = "deploy_pipeline"


class Deployer:
    """Run report or deploy batches for one configuration

    All collaborators are created once from the configuration and handed
    to the components that need them. Any of them can be injected instead.
    """

    def __init__(self,
                 config: PipelineConfig,
                 notify: bool = True,
                 source: Optional[ProjectSource] = None,
                 runner: Optional[ProcessRunner] = None,
                 notifier: Optional[Notifier] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize deployer

        Args:
            config: Pipeline configuration
            notify: False to suppress the deployment notification
            source: Project source, created from the configuration if omitted
            runner: Process runner, created from the configuration if omitted
            notifier: Notification channel, created from the configuration if omitted
            logger: Logger shared by every component

        Raises:
            CredentialError: If the database connection string is not set
            ProjectSourceError: If the project source cannot be opened
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.source = source or create_project_source(config.source)
        self.runner = runner or ProcessRunner(config.timeout, self.logger)
        self.notifier = notifier or create_notifier(config.notification, enabled=notify)
        self.policy = StepPolicy(self.logger)
        self.executor = PipelineExecutor(self.runner, config, self.logger)

        self._log_handler: Optional[SqliteLogHandler] = None
        if config.log_to_database and isinstance(self.source, SqliteProjectStore):
            self._log_handler = SqliteLogHandler(self.source.connection)
            logging.getLogger(PACKAGE_LOGGER).addHandler(self._log_handler)

    def create_gate(self) -> EligibilityGate:
        """Create the eligibility gate, reading persisted flags once"""
        if self.config.eligibility == EligibilityMode.FLAG:
            return FlagEligibilityGate(self.source, self.logger)
        return MarkerFileEligibilityGate(self.config.marker_file, self.logger)

    def create_coordinator(self) -> BatchCoordinator:
        return BatchCoordinator(
            gate=self.create_gate(),
            executor=self.executor,
            policy=self.policy,
            notifier=self.notifier,
            notification_template=self.config.notification.template,
            logger=self.logger
        )

    def load_projects(self) -> List[ProjectDeclaration]:
        """Load declarations from the project source"""
        projects = self.source.load_projects()
        self.logger.debug(f"Loaded {len(projects)} project declaration(s)")
        return projects

    def pending(self) -> List[str]:
        """
        List projects pending deployment

        Returns:
            Eligible project names in batch order
        """
        return self.create_coordinator().report(self.load_projects())

    def deploy(self) -> BatchResult:
        """
        Deploy every pending project

        Returns:
            Batch result, including declarations the source rejected
        """
        projects = self.load_projects()
        batch = self.create_coordinator().deploy(projects)

        for name, error in self.source.failures:
            batch.add_failure(name, error)

        return batch

    def close(self) -> None:
        """Detach the database log handler and close the project database"""
        if self._log_handler is not None:
            logging.getLogger(PACKAGE_LOGGER).removeHandler(self._log_handler)
            self._log_handler = None
        if isinstance(self.source, SqliteProjectStore):
            self.source.close()

    def __enter__(self) -> 'Deployer':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
