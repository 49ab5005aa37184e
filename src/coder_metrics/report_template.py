"""Default HTML template for the metrics report.

Placeholders: ``$rows``, ``$since``, ``$days``, ``$organization``, ``$generated``.
"""

DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Coder metrics since $since</title>
<style>
    body {
        font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
        margin: 2em;
        color: #24292f;
    }
    table {
        border-collapse: collapse;
        width: 100%;
    }
    th, td {
        border-bottom: 1px solid #d0d7de;
        padding: 6px 10px;
        text-align: right;
    }
    th:first-child, td:first-child, td.repos {
        text-align: left;
    }
    th {
        background: #f6f8fa;
    }
    td.score {
        font-weight: bold;
    }
    a {
        color: #0969da;
        text-decoration: none;
    }
    .meta {
        color: #57606a;
        font-size: 0.9em;
    }
</style>
</head>
<body>
<h1>Coder metrics</h1>
<p class="meta">Last $days days (since $since) $organization &middot; generated $generated</p>
<table>
<thead>
<tr>
    <th>Coder</th>
    <th title="Non-merge commits">Commits</th>
    <th title="Hits of code">HoC</th>
    <th title="Issues opened">Issues</th>
    <th title="Merged pull requests">Pulls</th>
    <th title="Merged pull requests reviewed">Reviews</th>
    <th title="Pull request comments">Msgs</th>
    <th title="Average pull request lifecycle, hours">LcP</th>
    <th>Score</th>
    <th>Top repositories</th>
</tr>
</thead>
<tbody>
$rows
</tbody>
</table>
<p class="meta">Score = HoC + 250 &times; Pulls + 50 &times; Issues + 5 &times; Commits + 150 &times; Reviews + 5 &times; Msgs</p>
</body>
</html>
"""
