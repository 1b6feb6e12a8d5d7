from __future__ import annotations

import csv
import io
import os
import tempfile
from dataclasses import dataclass
from typing import List, Optional

from .query import QueryState, apply_query
from .tabular import Row, format_value

EXPORT_MEDIA_TYPE = 'text/csv'


@dataclass
class ExportPayload:
    content: bytes
    media_type: str
    file_name: str


def rows_to_csv_text(rows: List[Row], columns: List[str], delimiter: str = ',') -> str:
    """Serialize rows under a header line.

    Values containing the delimiter, a quote or a line break are quoted
    with inner quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    writer.writerow(columns)
    for row in rows:
        writer.writerow([format_value(row.get(col, '')) for col in columns])
    return buffer.getvalue()


def export_file_name(source_name: Optional[str]) -> str:
    if not source_name or not source_name.strip():
        return 'filtered_data.csv'
    return f"filtered_{os.path.basename(source_name.strip())}"


def export_filtered_rows(
    rows: List[Row],
    columns: List[str],
    state: QueryState,
    source_name: Optional[str] = None,
) -> ExportPayload:
    """Export every row surviving the current search/filter/sort, not just the visible page.

    Hidden columns are still exported.
    """
    text = rows_to_csv_text(apply_query(rows, state), columns)
    return ExportPayload(
        content=text.encode('utf-8'),
        media_type=EXPORT_MEDIA_TYPE,
        file_name=export_file_name(source_name),
    )


def output_dir() -> str:
    """Shared directory under the system temp dir for downloads and viewer files."""
    path = os.path.join(tempfile.gettempdir(), 'archive_explorer')
    os.makedirs(path, exist_ok=True)
    return path


def write_export_file(payload: ExportPayload, directory: Optional[str] = None) -> str:
    """Write an export to disk for download and return its path."""
    target_dir = directory or output_dir()
    path = os.path.join(target_dir, payload.file_name)
    with open(path, 'wb') as f:
        f.write(payload.content)
    return path
