# deploy_pipeline/core/step_policy.py
"""Per-project resolution of optional pipeline steps"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..api.exceptions import UnsupportedRuntimeError
from ..models.project import ProjectDeclaration, RuntimeKind


@dataclass(frozen=True)
class ResolvedSteps:
    """Which optional steps apply to a project"""
    buildable: bool
    runtime_kind: RuntimeKind
    has_publish: bool = False
    has_post_deploy: bool = False


class StepPolicy:
    """Derive applicable steps from a project's declared attributes"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, project: ProjectDeclaration) -> ResolvedSteps:
        """
        Resolve the optional steps for a project

        Args:
            project: Project declaration

        Returns:
            Resolved steps

        Raises:
            UnsupportedRuntimeError: If the runtime kind is not recognized
        """
        if project.runtime_kind == RuntimeKind.UNKNOWN:
            raise UnsupportedRuntimeError(project.name, project.runtime)

        buildable = self.can_build(project)

        return ResolvedSteps(
            buildable=buildable,
            runtime_kind=project.runtime_kind,
            has_publish=buildable and project.publish_target is not None,
            has_post_deploy=self.can_post_deploy(project)
        )

    def can_build(self, project: ProjectDeclaration) -> bool:
        """Only compiled projects build; an invalid publish target disables it"""
        if project.runtime_kind != RuntimeKind.COMPILED:
            return False

        if project.publish_target is not None and not project.publish_target.is_dir():
            self.logger.error(
                f"Project '{project.name}' has an invalid publish directory "
                f"'{project.publish_target}'"
            )
            return False

        return True

    def can_post_deploy(self, project: ProjectDeclaration) -> bool:
        """A post-deploy hook applies only when declared and present on disk"""
        hook = project.post_deploy_hook
        return hook is not None and hook.is_file()
