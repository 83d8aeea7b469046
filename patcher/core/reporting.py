# -*- coding: utf-8 -*-
from __future__ import annotations

import html
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from patcher.models import PathResult, ValidationResult


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _esc(s: Any) -> str:
    return html.escape("" if s is None else str(s))


def build_export_message(result: PathResult, export_path: str) -> str:
    """
    Plain-text summary shown after an export: how many files were mapped
    and which ones were deliberately left out.
    """
    lines = [f"Export {len(result)} files."]
    if len(result):
        lines[0] += f" ({export_path})"
    if result.unsettled:
        lines.append("Warning:")
        lines.append(",\n".join(result.unsettled))
    return "\n".join(lines)


def build_report_html(
    tool_name: str,
    tool_version: str,
    unit_name: str,
    destination: str,
    compile_mode: bool,
    result: PathResult,
    validation_results: Optional[List[ValidationResult]] = None,
) -> str:
    validation_results = validation_results or []

    css = """
    body { font-family: -apple-system, Segoe UI, Roboto, Arial, sans-serif; margin: 24px; }
    h1 { margin: 0 0 6px 0; }
    .sub { color: #444; margin: 0 0 18px 0; }
    .card { border: 1px solid #ddd; border-radius: 10px; padding: 14px; margin: 12px 0; }
    table { width: 100%; border-collapse: collapse; margin-top: 8px; }
    th, td { border-bottom: 1px solid #eee; padding: 8px; text-align: left; vertical-align: top; font-size: 13px; }
    th { background: #fafafa; }
    code { background: #f6f6f6; padding: 1px 4px; border-radius: 6px; }
    .small { font-size: 12px; color: #555; }
    """

    issue_rows = "".join(
        f"<tr><td>{_esc(r.level)}</td><td><code>{_esc(r.code)}</code></td><td>{_esc(r.message)}</td>"
        f"<td><code>{_esc(r.relpath or '')}</code></td></tr>"
        for r in validation_results
    )
    pair_rows = "".join(
        f"<tr><td class='small'>{_esc(p.src)}</td><td class='small'>{_esc(p.dst)}</td></tr>"
        for p in result
    )
    unsettled_items = "".join(f"<li><code>{_esc(n)}</code></li>" for n in result.unsettled)
    mode = "compiled" if compile_mode else "sources only"

    if issue_rows:
        issues_block = (
            "<table><thead><tr><th>Level</th><th>Code</th><th>Message</th><th>Path</th></tr></thead>"
            "<tbody>" + issue_rows + "</tbody></table>"
        )
    else:
        issues_block = "<p class='small'>No issues.</p>"
    if unsettled_items:
        unsettled_block = "<ul>" + unsettled_items + "</ul>"
    else:
        unsettled_block = "<p class='small'>Nothing excluded.</p>"
    if not pair_rows:
        pair_rows = '<tr><td colspan="2" class="small">No files planned.</td></tr>'

    return f"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>{_esc(tool_name)} Report - {_esc(unit_name)}</title>
  <style>{css}</style>
</head>
<body>
  <h1>{_esc(tool_name)} - Export Report</h1>
  <p class="sub">Generated {_esc(_utc_now())} (UTC) - Tool version {_esc(tool_version)}</p>

  <div class="card">
    <p>Unit: <b>{_esc(unit_name)}</b> | Mode: <b>{mode}</b></p>
    <p>Destination: <code>{_esc(destination)}</code></p>
  </div>

  <div class="card">
    <h2>Validation</h2>
    {issues_block}
  </div>

  <div class="card">
    <h2>Export Plan</h2>
    <p class="small">Total pairs: <b>{len(result)}</b></p>
    <table>
      <thead><tr><th>Source</th><th>Destination</th></tr></thead>
      <tbody>
        {pair_rows}
      </tbody>
    </table>
  </div>

  <div class="card">
    <h2>Not Exported</h2>
    {unsettled_block}
  </div>
</body>
</html>
"""


def write_report_html(html_text: str, report_path: str) -> str:
    p = Path(report_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(html_text, encoding="utf-8")
    return str(p)
