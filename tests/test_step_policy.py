"""
Tests for step policy resolution.
"""

import pytest

from deploy_pipeline.api.exceptions import UnsupportedRuntimeError
from deploy_pipeline.core import StepPolicy
from deploy_pipeline.models import RuntimeKind


class TestStepPolicy:
    def test_compiled_is_buildable(self, make_project):
        steps = StepPolicy().resolve(make_project("a", kind=RuntimeKind.COMPILED))
        assert steps.buildable
        assert not steps.has_publish
        assert steps.runtime_kind == RuntimeKind.COMPILED

    def test_compiled_with_publish_target(self, make_project):
        steps = StepPolicy().resolve(make_project("a", kind=RuntimeKind.COMPILED, publish="valid"))
        assert steps.buildable
        assert steps.has_publish

    def test_invalid_publish_target_disables_build(self, make_project):
        steps = StepPolicy().resolve(make_project("a", kind=RuntimeKind.COMPILED, publish="missing"))
        assert not steps.buildable
        assert not steps.has_publish

    @pytest.mark.parametrize("kind", [RuntimeKind.INTERPRETED, RuntimeKind.NONE])
    def test_not_buildable(self, make_project, kind):
        steps = StepPolicy().resolve(make_project("a", kind=kind, publish="valid"))
        assert not steps.buildable
        assert not steps.has_publish

    def test_post_deploy_requires_existing_hook(self, make_project):
        assert StepPolicy().resolve(make_project("a", hook=True)).has_post_deploy
        assert not StepPolicy().resolve(make_project("b")).has_post_deploy

    def test_unknown_runtime_raises(self, make_project):
        with pytest.raises(UnsupportedRuntimeError) as exc_info:
            StepPolicy().resolve(make_project("a", kind=RuntimeKind.UNKNOWN))

        assert exc_info.value.project_name == "a"
        assert ".rbproj" in str(exc_info.value)
