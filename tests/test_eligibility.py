"""
Tests for eligibility gates.
"""

from deploy_pipeline.core import FlagEligibilityGate, MarkerFileEligibilityGate
from deploy_pipeline.core.eligibility import DeploymentQueue


class CountingQueue(DeploymentQueue):
    def __init__(self, queued):
        self.queued = set(queued)
        self.reads = 0
        self.cleared = []

    def queued_projects(self):
        self.reads += 1
        return set(self.queued)

    def clear_queued(self, name, deployed):
        self.cleared.append((name, deployed))


class TestMarkerFileGate:
    def test_active_with_marker(self, make_project):
        gate = MarkerFileEligibilityGate()
        assert gate.is_eligible(make_project("a", marker=True))

    def test_without_marker(self, make_project):
        gate = MarkerFileEligibilityGate()
        assert not gate.is_eligible(make_project("a"))

    def test_inactive(self, make_project):
        gate = MarkerFileEligibilityGate()
        assert not gate.is_eligible(make_project("a", marker=True, active=False))

    def test_marker_directory_is_not_a_marker(self, make_project):
        project = make_project("a")
        (project.source_directory / "deploy.txt").mkdir()
        assert not MarkerFileEligibilityGate().is_eligible(project)

    def test_custom_marker_name(self, make_project):
        project = make_project("a")
        (project.source_directory / ".deploy").write_text("")
        assert MarkerFileEligibilityGate(".deploy").is_eligible(project)

    def test_consume_deletes_marker(self, make_project):
        project = make_project("a", marker=True)
        gate = MarkerFileEligibilityGate()

        gate.consume(project, deployed=False)

        assert not (project.source_directory / "deploy.txt").exists()
        assert not gate.is_eligible(project)

    def test_consume_missing_marker(self, make_project):
        project = make_project("a")
        MarkerFileEligibilityGate().consume(project, deployed=True)


class TestFlagGate:
    def test_flags_read_once(self, make_project):
        queue = CountingQueue({"a"})
        gate = FlagEligibilityGate(queue)

        assert gate.is_eligible(make_project("a"))
        assert not gate.is_eligible(make_project("b"))
        assert queue.reads == 1

    def test_consume_clears_flag(self, make_project):
        queue = CountingQueue({"a"})
        gate = FlagEligibilityGate(queue)
        project = make_project("a")

        gate.consume(project, deployed=True)

        assert queue.cleared == [("a", True)]
        assert not gate.is_eligible(project)

    def test_ignores_active_attribute(self, make_project):
        gate = FlagEligibilityGate(CountingQueue({"a"}))
        assert gate.is_eligible(make_project("a", active=False))
