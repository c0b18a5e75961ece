"""Tests for HTML report generation."""

from pathlib import Path

from ghrelease.dashboard import build_dashboard
from ghrelease.models import DashboardMetric, FilterSpec
from ghrelease.report import format_metric, generate_dashboard


class TestFormatMetric:
    """Tests for format_metric."""

    def test_formats(self) -> None:
        """Test number, percentage, duration and undefined values."""
        assert format_metric(DashboardMetric("Total", "", 1234, "releases", "number")) == "1,234"
        assert format_metric(DashboardMetric("Rate", "", 66.666, "%", "percentage")) == "66.7%"
        assert format_metric(DashboardMetric("Gap", "", 27, "days", "duration")) == "27 days"
        assert format_metric(DashboardMetric("Recency", "", None, "days", "duration")) == "-"


class TestGenerateDashboard:
    """Tests for generate_dashboard."""

    def test_writes_html(self, tmp_path: Path, sample_releases, now) -> None:
        """Test the dashboard contains metrics and every chart."""
        output = tmp_path / "reports" / "dashboard.html"

        generate_dashboard(build_dashboard(sample_releases, now=now), output)

        html = output.read_text()
        assert "GitHub Release Dashboard" in html
        assert "Total Releases" in html
        assert "2024-01-15 to 2024-02-10" in html
        assert "chart-by_release_type" in html
        assert "Plotly.newPlot('timeline'" in html

    def test_empty_result(self, tmp_path: Path, sample_releases, now) -> None:
        """Test a report is still written when nothing matches."""
        output = tmp_path / "dashboard.html"
        result = build_dashboard(sample_releases, FilterSpec(repo_names=["missing"]), now=now)

        generate_dashboard(result, output)

        assert "no releases match the filters" in output.read_text()

    def test_markup_in_names_escaped(self, tmp_path: Path, make_release, now) -> None:
        """Test repository names cannot break out of the inline script."""
        output = tmp_path / "dashboard.html"
        release = make_release("</script><b>evil</b>", "v1.0.0", "2024-01-15T09:00:00")

        generate_dashboard(build_dashboard([release], now=now), output)

        page = output.read_text()
        assert "</script><b>" not in page
        assert "<\\/script><b>evil<\\/b>" in page
