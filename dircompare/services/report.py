"""
Report rendering for the terminal and static viewers.
"""

from __future__ import annotations

import html
from datetime import datetime
from pathlib import Path
from typing import Optional

from dircompare import APP_DISPLAY_NAME, __version__
from dircompare.core.models import ComparisonResult, FileInfo, display_text
from dircompare.services.file_io import FileIOService, WriteResult
from dircompare.services.file_store import FileStore, Side


MARKERS = {
    "baseline": " ",
    "added": "+",
    "removed": "-",
    "modified": "~",
    "renamed": ">",
    "unknown": "?",
}

ROW_COLORS = {
    "baseline": "#ffffff",
    "added": "#e6ffe6",
    "removed": "#ffe6e6",
    "modified": "#fffde6",
    "renamed": "#e6f7ff",
    "unknown": "#f5f5f5",
}


def format_size(size: int) -> str:
    if size < 1024:
        return f'{size} B'
    elif size < 1024 * 1024:
        return f'{size / 1024:.1f} KB'
    elif size < 1024 * 1024 * 1024:
        return f'{size / (1024 * 1024):.1f} MB'
    else:
        return f'{size / (1024 * 1024 * 1024):.2f} GB'


def _visible(files: list[FileInfo], show_unchanged: bool) -> list[FileInfo]:
    if show_unchanged:
        return files
    return [f for f in files if f.comparison_result != ComparisonResult.BASELINE.label]


def render_text(store: FileStore, show_unchanged: bool = True) -> str:
    """
    Plain-text report: one line per record with a change marker.

    Markers: ' ' baseline, '+' added, '-' removed, '~' modified.
    """
    lines = []

    for side, root in ((Side.A, store.files_a.root_path), (Side.B, store.files_b.root_path)):
        lines.append(f"[{side.value.upper()}] {display_text(root)}")
        for info in _visible(store.list_files(side), show_unchanged):
            marker = MARKERS.get(info.comparison_result, "?")
            lines.append(f"  {marker} {info.path}  ({format_size(info.size_bytes)})")
        lines.append("")

    lines.append(f"Comparison results: {store.current_summary()}")
    return "\n".join(lines)


def _html_table(title: str, root: Path, files: list[FileInfo]) -> str:
    rows = []
    for info in files:
        color = ROW_COLORS.get(info.comparison_result, "#ffffff")
        rows.append(
            f'<tr style="background-color: {color}">'
            f'<td>{html.escape(info.path)}</td>'
            f'<td>{html.escape(info.extension)}</td>'
            f'<td class="size">{html.escape(format_size(info.size_bytes))}</td>'
            f'<td>{html.escape(info.comparison_result)}</td>'
            f'</tr>'
        )
    body = "\n".join(rows) if rows else '<tr><td colspan="4">No files</td></tr>'
    return (
        f'<section>\n<h2>{html.escape(title)}</h2>\n'
        f'<p class="root">{html.escape(display_text(root))}</p>\n'
        f'<table>\n<thead><tr><th>Path</th><th>Extension</th><th>Size</th><th>Result</th></tr></thead>\n'
        f'<tbody>\n{body}\n</tbody>\n</table>\n</section>'
    )


def render_html(store: FileStore, show_unchanged: bool = True) -> str:
    """Self-contained HTML report of both inventories."""
    summary = store.current_summary()
    table_a = _html_table("A (baseline)", store.files_a.root_path,
                          _visible(store.list_files(Side.A), show_unchanged))
    table_b = _html_table("B (candidate)", store.files_b.root_path,
                          _visible(store.list_files(Side.B), show_unchanged))
    generated = datetime.now().strftime('%Y-%m-%d %H:%M:%S')

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{html.escape(APP_DISPLAY_NAME)} report</title>
<style>
    body {{ font-family: sans-serif; margin: 2em; color: #222; }}
    table {{ border-collapse: collapse; width: 100%; margin-bottom: 2em; }}
    th, td {{ border: 1px solid #ddd; padding: 4px 8px; text-align: left; }}
    td.size {{ text-align: right; }}
    .root {{ font-family: monospace; color: #666; }}
</style>
</head>
<body>
<h1>{html.escape(APP_DISPLAY_NAME)}</h1>
<p class="summary">{html.escape(str(summary))}</p>
{table_a}
{table_b}
<footer>Generated {generated} by {html.escape(APP_DISPLAY_NAME)} {__version__}</footer>
</body>
</html>
"""


def write_static_report(
    store: FileStore,
    output_path: Path | str,
    show_unchanged: bool = True,
    file_io: Optional[FileIOService] = None
) -> WriteResult:
    """Render the HTML report and write it atomically."""
    file_io = file_io or FileIOService()
    return file_io.write_file(output_path, render_html(store, show_unchanged))
