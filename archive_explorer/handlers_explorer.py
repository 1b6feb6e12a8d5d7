from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import gradio as gr

from . import settings
from .errors import ArchiveExplorerError
from .export import output_dir
from .handlers_table import render_table
from .nodes import FolderNode
from .query import QueryState
from .tabular import parse_csv_payload
from .tree_query import count_files, filter_and_sort_tree, find_node, tree_stats
from .upload import load_archive_upload

logger = logging.getLogger(__name__)


def describe_tree(tree: Optional[FolderNode]) -> str:
    if tree is None:
        return ""
    files, folders = tree_stats(tree)
    return f"{folders} folders | {files} files"


def handle_archive_upload(file_obj, modified_by):
    """Walk an uploaded zip into the tree state and reset the selection."""
    modified_by = (modified_by or '').strip() or settings.DEFAULT_MODIFIED_BY
    try:
        tree = load_archive_upload(file_obj, modified_by=modified_by)
    except ArchiveExplorerError as exc:
        return None, f"Upload failed: {str(exc)}", "", None

    status = "Upload successful! Your ZIP file has been processed and is ready to explore."
    return tree, status, describe_tree(tree), None


def visible_tree(tree: Optional[FolderNode], query: str, sort_key: str):
    if tree is None:
        return None
    return filter_and_sort_tree(tree, query or '', sort_key or 'name')


def describe_search(tree: Optional[FolderNode], query: str, sort_key: str) -> str:
    if tree is None:
        return ""
    total = count_files(tree)
    if not query:
        return f"{total} files"
    shown = count_files(visible_tree(tree, query, sort_key))
    if not shown:
        return f'No files found matching "{query}"'
    return f"{shown} of {total} files"


def describe_file(node) -> str:
    return (
        f"### {node.name}\n"
        f"{node.file_type.upper()} | Modified by {node.modified_by} | "
        f"{node.created_at.strftime('%Y-%m-%d')}"
    )


def materialize_payload(node, directory: Optional[str] = None) -> str:
    """Write a file node's bytes to disk so a viewer component can serve it."""
    target_dir = directory or output_dir()
    path = os.path.join(target_dir, node.name)
    with open(path, 'wb') as f:
        f.write(node.payload)
    return path


def load_table_data(node) -> Dict[str, Any]:
    rows, columns = parse_csv_payload(node.payload)
    return {"rows": rows, "columns": columns, "name": node.name}


def reset_table_controls():
    """Search box, rows-per-page and filter value as a fresh QueryState expects them."""
    return "", settings.DEFAULT_ITEMS_PER_PAGE, ""


def _no_table(header, status, pdf_path=None, pdf_visible=False):
    hidden = gr.update(visible=False)
    return (None, None, header, status, pdf_path, hidden, gr.update(visible=pdf_visible),
            gr.update(choices=[], value=[]), *render_table(None, None), *reset_table_controls())


def handle_file_selection(tree: Optional[FolderNode], path: Optional[str]):
    """Hand the selected file to the CSV table or the PDF viewer.

    Returns (table data, query state, header, status, pdf file,
    csv panel, pdf panel, column choices, *rendered table,
    search term, rows per page, filter value).
    """
    if tree is None or not path:
        return _no_table("No file selected", "")

    node = find_node(tree, path)
    if node is None or node.is_folder:
        return _no_table("No file selected", f"{path} not found.")

    header = describe_file(node)

    if node.file_type == 'pdf':
        try:
            pdf_path = materialize_payload(node)
        except OSError as exc:
            return _no_table(header, f"Error opening PDF: {str(exc)}")
        return _no_table(header, "", pdf_path=pdf_path, pdf_visible=True)

    try:
        table_data = load_table_data(node)
    except ArchiveExplorerError as exc:
        logger.info("Cannot parse %s: %s", node.path, exc)
        return _no_table(header, f"{str(exc)}. Please check your CSV file format and try again.")

    state = QueryState()
    columns: List[str] = table_data["columns"]
    return (table_data, state, header, f"Loaded {len(table_data['rows'])} rows.", None,
            gr.update(visible=True), gr.update(visible=False),
            gr.update(choices=columns, value=columns), *render_table(table_data, state),
            *reset_table_controls())


def update_column_choices(table_data):
    """Refresh the filter and sort column dropdowns for a newly selected CSV."""
    columns = table_data["columns"] if table_data else []
    value = columns[0] if columns else None
    return gr.update(choices=columns, value=value), gr.update(choices=columns, value=value)
