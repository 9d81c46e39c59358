"""Pipeline and batch result models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Step(Enum):
    """Pipeline steps in execution order"""
    PULL = "pull"
    BUILD = "build"
    PUBLISH = "publish"
    INSTALL = "install"
    POST_DEPLOY = "post-deploy"


class StepStatus(Enum):
    """Outcome of a single step"""
    NOT_APPLICABLE = "not_applicable"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_ATTEMPTED = "not_attempted"

    @property
    def passed(self) -> bool:
        """Whether the step lets the pipeline continue"""
        return self in (StepStatus.NOT_APPLICABLE, StepStatus.SUCCEEDED)


@dataclass
class StepOutcome:
    """Result of a single pipeline step"""
    step: Step
    status: StepStatus
    exit_code: Optional[int] = None
    duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'step': self.step.value,
            'status': self.status.value,
            'duration': self.duration
        }
        if self.exit_code is not None:
            data['exit_code'] = self.exit_code
        return data


@dataclass
class PipelineResult:
    """Result of one project's pipeline run"""
    project: str
    deployed: bool = False
    outcomes: List[StepOutcome] = field(default_factory=list)
    error: Optional[str] = None

    def outcome(self, step: Step) -> Optional[StepOutcome]:
        """Get the outcome recorded for a step"""
        for outcome in self.outcomes:
            if outcome.step == step:
                return outcome
        return None

    def status(self, step: Step) -> StepStatus:
        """Get the status of a step, NOT_ATTEMPTED when never recorded"""
        outcome = self.outcome(step)
        return outcome.status if outcome else StepStatus.NOT_ATTEMPTED

    @property
    def attempted_steps(self) -> List[Step]:
        """Steps that actually ran an external process"""
        return [o.step for o in self.outcomes
                if o.status in (StepStatus.SUCCEEDED, StepStatus.FAILED)]

    @property
    def failed_step(self) -> Optional[Step]:
        """First failed step, if any"""
        for outcome in self.outcomes:
            if outcome.status == StepStatus.FAILED:
                return outcome.step
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            'project': self.project,
            'deployed': self.deployed,
            'outcomes': [o.to_dict() for o in self.outcomes]
        }
        if self.error:
            data['error'] = self.error
        return data


@dataclass
class ProjectFailure:
    """A project that could not be run at all"""
    project: str
    error: str
    error_code: Optional[str] = None


@dataclass
class BatchResult:
    """Accumulated result of one batch"""
    deployed: List[str] = field(default_factory=list)
    results: List[PipelineResult] = field(default_factory=list)
    failures: List[ProjectFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def record(self, result: PipelineResult) -> None:
        """Fold a pipeline result into the batch"""
        self.results.append(result)
        if result.deployed:
            self.deployed.append(result.project)

    def add_failure(self, project: str, error: Exception) -> None:
        """Record a project that failed before its pipeline ran"""
        self.failures.append(ProjectFailure(
            project=project,
            error=str(error),
            error_code=getattr(error, 'error_code', None)
        ))

    @property
    def summary(self) -> str:
        """Comma-joined names of deployed projects, in batch order"""
        return ", ".join(self.deployed)

    @property
    def attempted(self) -> List[str]:
        """Projects whose pipeline ran"""
        return [r.project for r in self.results]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'deployed': self.deployed,
            'results': [r.to_dict() for r in self.results],
            'failures': [f.__dict__ for f in self.failures],
            'skipped': self.skipped
        }
