"""
Tests for the pending deployment report.
"""

from deploy_pipeline.services.report import render_pending_report, write_pending_report


class TestPendingReport:
    def test_lists_projects_in_order(self):
        report = render_pending_report(["web", "api"])

        assert "<h1><b>Projects Pending Deployment</b></h1>" in report
        assert report.index("<tr><td>web</td></tr>") < report.index("<tr><td>api</td></tr>")

    def test_escapes_names(self):
        report = render_pending_report(["<script>"])
        assert "<tr><td>&lt;script&gt;</td></tr>" in report

    def test_empty_report(self):
        report = render_pending_report([])
        assert "<tr><td>" not in report
        assert "<th>Project Name</th>" in report

    def test_write_creates_directory(self, tmp_path):
        path = write_pending_report(["web"], tmp_path / "reports" / "pending.html")

        assert path.exists()
        assert "web" in path.read_text()
