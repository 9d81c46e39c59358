# deploy_pipeline/core/eligibility.py
"""Eligibility gates deciding whether a project is due for deployment"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Set

from ..constants import DEFAULT_MARKER_FILE
from ..models.project import ProjectDeclaration


class DeploymentQueue(ABC):
    """Persisted per-project "queued" flags"""

    @abstractmethod
    def queued_projects(self) -> Set[str]:
        """Names of projects currently queued for deployment"""
        pass

    @abstractmethod
    def clear_queued(self, name: str, deployed: bool) -> None:
        """Clear the queued flag, recording the deploy time when deployed"""
        pass


class EligibilityGate(ABC):
    """Decide whether a project is due now and consume the signal after a run"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def is_eligible(self, project: ProjectDeclaration) -> bool:
        """Check the eligibility signal without side effects"""
        pass

    @abstractmethod
    def consume(self, project: ProjectDeclaration, deployed: bool) -> None:
        """Clear the eligibility signal once the pipeline has run"""
        pass


class FlagEligibilityGate(EligibilityGate):
    """Eligibility from a persisted queued flag

    Flags are read once, when the gate is created, so every project is
    judged against the same snapshot for the whole batch.
    """

    def __init__(self, queue: DeploymentQueue, logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.queue = queue
        self._queued = set(queue.queued_projects())

    def is_eligible(self, project: ProjectDeclaration) -> bool:
        return project.name in self._queued

    def consume(self, project: ProjectDeclaration, deployed: bool) -> None:
        self.queue.clear_queued(project.name, deployed)
        self._queued.discard(project.name)
        self.logger.debug(f"Cleared deployment queue flag for project '{project.name}'")


class MarkerFileEligibilityGate(EligibilityGate):
    """Eligibility from a sentinel file in the project directory"""

    def __init__(self, marker_name: str = DEFAULT_MARKER_FILE,
                 logger: Optional[logging.Logger] = None):
        super().__init__(logger)
        self.marker_name = marker_name

    def marker_path(self, project: ProjectDeclaration):
        return project.source_directory / self.marker_name

    def is_eligible(self, project: ProjectDeclaration) -> bool:
        if not project.active:
            return False
        return self.marker_path(project).is_file()

    def consume(self, project: ProjectDeclaration, deployed: bool) -> None:
        marker = self.marker_path(project)
        try:
            marker.unlink()
        except FileNotFoundError:
            self.logger.debug(f"Marker file already removed: {marker}")
            return
        self.logger.debug(f"Removed marker file {marker}")
