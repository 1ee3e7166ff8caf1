"""CSV rendering of report tables."""

from __future__ import annotations

import csv
import io

from site_ledger.reports.tables import ReportTable


def render_csv(table: ReportTable) -> str:
    """Render a table as CSV text.

    Fields containing a comma, a quote or a newline are quoted and inner
    quotes doubled, so spreadsheets read the cells back unchanged. An
    empty table still yields its header row.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    for row in table.csv_rows():
        writer.writerow(row)
    return output.getvalue()
