"""Standalone HTML rendering of report tables.

Documents carry their own styling and reference nothing external, so they
can be previewed offline or handed to a print-to-PDF facility as is.
"""

from __future__ import annotations

from html import escape

from site_ledger.reports.labels import Labels
from site_ledger.reports.tables import ReportTable

REPORT_STYLE = """
body { font-family: -apple-system, "Segoe UI", Roboto, "Noto Sans", sans-serif; color: #1e293b; margin: 24px; }
h1 { font-size: 20px; margin: 0 0 4px; }
.meta { color: #64748b; font-size: 13px; margin: 0 0 2px; }
table { border-collapse: collapse; width: 100%; margin-top: 16px; font-size: 13px; }
th, td { border: 1px solid #e2e8f0; padding: 6px 8px; text-align: left; }
thead th { background: #f1f5f9; }
tfoot td { font-weight: bold; background: #f8fafc; }
.empty { color: #94a3b8; text-align: center; padding: 32px 0; }
"""


def _cells(tag: str, values: tuple[str, ...]) -> str:
    return "".join(f"<{tag}>{escape(str(value))}</{tag}>" for value in values)


def render_html(
    table: ReportTable,
    *,
    site_name: str,
    generated_at: str,
    labels: Labels,
) -> str:
    """Render a complete HTML5 document for ``table``.

    Every piece of record text is escaped. An empty table renders its
    header with a "no data" placeholder in place of the body.
    """
    head = f"<tr>{_cells('th', table.headers)}</tr>"

    if table.is_empty:
        body = (
            f'<tr><td class="empty" colspan="{len(table.headers)}">'
            f"{escape(labels.no_data)}</td></tr>"
        )
    else:
        body = "".join(f"<tr>{_cells('td', row)}</tr>" for row in table.rows)

    foot = ""
    if table.totals is not None and not table.is_empty:
        foot = f"<tfoot><tr>{_cells('td', table.totals)}</tr></tfoot>"

    return f"""<!DOCTYPE html>
<html lang="{escape(labels.language)}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(table.title)} - {escape(site_name)}</title>
<style>{REPORT_STYLE}</style>
</head>
<body>
<h1>{escape(table.title)}</h1>
<p class="meta">{escape(labels.site)}: {escape(site_name)}</p>
<p class="meta">{escape(labels.generated_on)}: {escape(generated_at)}</p>
<table>
<thead>{head}</thead>
<tbody>{body}</tbody>
{foot}
</table>
</body>
</html>
"""
