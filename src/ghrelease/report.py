"""HTML dashboard generation with Plotly charts."""

import html
import json
from pathlib import Path

from ghrelease.aggregation import Dimension
from ghrelease.models import DashboardMetric, DashboardResult

DIMENSION_TITLES = {
    Dimension.REPO: "Releases by Repository",
    Dimension.DATE: "Releases by Date",
    Dimension.DAY_OF_WEEK: "Releases by Day of Week",
    Dimension.MONTH: "Releases by Month",
    Dimension.QUARTER: "Releases by Quarter",
    Dimension.TIME_PERIOD: "Releases by Time of Day",
    Dimension.RELEASE_TYPE: "Releases by Release Type",
}


def _script_json(value: object) -> str:
    """Serialize for inline <script> use; "</" would close the script element."""
    return json.dumps(value).replace("</", "<\\/")


def format_metric(metric: DashboardMetric) -> str:
    """Render a metric value for display.

    Args:
        metric: Metric to format.

    Returns:
        Display string, "-" for an undefined value.
    """
    if metric.value is None:
        return "-"
    if metric.format == "percentage":
        return f"{metric.value:.1f}%"
    if metric.format == "duration":
        return f"{metric.value:,.0f} {metric.unit}"
    return f"{metric.value:,.0f}"


def _build_charts(result: DashboardResult) -> tuple[str, str]:
    """Build chart HTML containers and JavaScript for every aggregation.

    Args:
        result: Dashboard result to chart.

    Returns:
        Tuple of (charts_html, charts_js).
    """
    charts_html = ""
    charts_js = ""

    for dimension, title in DIMENSION_TITLES.items():
        rows = result.aggregations.get(dimension, [])
        # Dates read better chronologically than by count
        if dimension == Dimension.DATE:
            rows = sorted(rows, key=lambda row: row.key)

        chart_id = f"chart-{dimension}"
        charts_html += f"""
            <div class="chart-container">
                <div id="{chart_id}" class="chart"></div>
            </div>
        """

        trace = [
            {
                "x": [row.key for row in rows],
                "y": [row.count for row in rows],
                "text": [f"{row.percentage:.1f}%" for row in rows],
                "type": "bar",
                "marker": {"color": "#636EFA"},
            }
        ]
        layout = {
            "title": title,
            "xaxis": {"type": "category"},
            "yaxis": {"title": "Releases"},
            "margin": {"t": 40, "r": 20},
        }
        charts_js += f"""
        Plotly.newPlot('{chart_id}', {_script_json(trace)}, {_script_json(layout)});
        """

    return charts_html, charts_js


def _build_time_series(result: DashboardResult) -> str:
    dates = [p.date for p in result.time_series]
    traces = [
        {
            "x": dates,
            "y": [p.count for p in result.time_series],
            "type": "bar",
            "name": "Daily Releases",
            "marker": {"color": "#EF553B"},
        },
        {
            "x": dates,
            "y": [p.cumulative_count for p in result.time_series],
            "type": "scatter",
            "mode": "lines",
            "name": "Cumulative",
            "yaxis": "y2",
            "line": {"color": "#636EFA"},
        },
    ]
    layout = {
        "title": "Release Timeline",
        "xaxis": {"title": "Date"},
        "yaxis": {"title": "Daily Releases"},
        "yaxis2": {"title": "Cumulative", "overlaying": "y", "side": "right"},
        "margin": {"t": 40, "r": 60},
    }
    return f"Plotly.newPlot('timeline', {_script_json(traces)}, {_script_json(layout)});"


def generate_dashboard(result: DashboardResult, output_path: str | Path) -> None:
    """Generate an HTML dashboard from a dashboard result.

    Args:
        result: Dashboard result to render.
        output_path: Path to write HTML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cards_html = "".join(
        f"""
        <div class="card">
            <h3>{html.escape(metric.name)}</h3>
            <div class="value">{html.escape(format_metric(metric))}</div>
        </div>
        """
        for metric in result.metrics
    )

    charts_html, charts_js = _build_charts(result)
    timeline_js = _build_time_series(result)

    freshness = result.freshness
    if freshness.earliest_release:
        data_range = f"{freshness.earliest_release} to {freshness.latest_release}"
    else:
        data_range = "no releases match the filters"

    page = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>GitHub Release Dashboard</title>
    <script src="https://cdn.plot.ly/plotly-2.27.0.min.js"></script>
    <style>
        * {{ box-sizing: border-box; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            margin: 0;
            padding: 20px;
            background: #f5f5f5;
        }}
        .header {{
            text-align: center;
            margin-bottom: 30px;
        }}
        .header h1 {{
            color: #333;
            margin-bottom: 5px;
        }}
        .header p {{
            color: #666;
            font-size: 14px;
        }}
        .cards {{
            display: grid;
            grid-template-columns: repeat(3, 1fr);
            gap: 15px;
            margin-bottom: 30px;
        }}
        .card {{
            background: white;
            border-radius: 8px;
            padding: 15px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }}
        .card h3 {{
            margin: 0 0 8px 0;
            color: #666;
            font-size: 12px;
            text-transform: uppercase;
        }}
        .card .value {{
            font-size: 24px;
            font-weight: bold;
            color: #333;
        }}
        .charts {{
            display: grid;
            grid-template-columns: 1fr 1fr;
            gap: 20px;
        }}
        .chart-container {{
            background: white;
            border-radius: 8px;
            padding: 15px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }}
        .chart {{
            width: 100%;
            height: 300px;
        }}
        @media (max-width: 900px) {{
            .cards {{
                grid-template-columns: repeat(2, 1fr);
            }}
            .charts {{
                grid-template-columns: 1fr;
            }}
        }}
    </style>
</head>
<body>
    <div class="header">
        <h1>GitHub Release Dashboard</h1>
        <p>Releases: {html.escape(data_range)}</p>
        <p>Generated: {html.escape(freshness.last_updated)}</p>
    </div>

    <div class="cards">
        {cards_html}
    </div>

    <div class="chart-container" style="margin-bottom: 20px;">
        <div id="timeline" class="chart"></div>
    </div>

    <div class="charts">
        {charts_html}
    </div>

    <script>
        {timeline_js}
        {charts_js}
    </script>
</body>
</html>
"""

    output_path.write_text(page)
