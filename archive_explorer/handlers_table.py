from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import gradio as gr

from .export import export_filtered_rows, write_export_file
from .query import (
    OPERATOR_LABELS,
    ColumnFilter,
    QueryState,
    active_filter_count,
    build_view,
    clear_all,
    go_to_page,
    remove_column_filter,
    set_global_search,
    set_items_per_page,
    set_sort,
    set_visible_columns,
    upsert_column_filter,
)

logger = logging.getLogger(__name__)


def empty_table_update():
    return gr.update(value={"data": [], "headers": []})


def describe_filters(state: Optional[QueryState]) -> str:
    if state is None or not active_filter_count(state):
        return "No active filters."
    lines = []
    if state.search_term:
        lines.append(f"- Search: `{state.search_term}`")
    for f in state.filters:
        label = OPERATOR_LABELS.get(f.operator, f.operator)
        suffix = "" if f.value else " (inactive)"
        lines.append(f"- **{f.column}** {label.lower()} `{f.value}`{suffix}")
    if state.sort is not None:
        lines.append(f"- Sorted by **{state.sort.key}** ({state.sort.direction})")
    return "\n".join(lines)


def render_table(table_data: Optional[Dict[str, Any]], state: Optional[QueryState]):
    """Current page as (dataframe, row summary, page number, filter summary)."""
    if not table_data or state is None:
        return empty_table_update(), "", gr.update(value=1), describe_filters(None)

    rows = table_data["rows"]
    columns = table_data["columns"]
    view = build_view(rows, columns, state)

    summary = f"{view.filtered_count} of {view.total_rows} rows"
    active = active_filter_count(state)
    if active:
        summary += f" | {active} active"
    if view.filtered_count:
        summary += (
            f" | Showing {view.start_index + 1}-{view.end_index}"
            f" | Page {view.current_page} of {view.total_pages}"
        )

    table = gr.update(value={"data": view.as_table(), "headers": view.columns})
    page = gr.update(value=view.current_page, maximum=view.total_pages)
    return table, summary, page, describe_filters(state)


def _respond(table_data, state):
    return (state, *render_table(table_data, state))


def handle_search_change(table_data, state, term):
    state = set_global_search(state or QueryState(), term)
    return _respond(table_data, state)


def handle_add_filter(table_data, state, column, operator, value):
    state = state or QueryState()
    if not table_data or not column or column not in table_data["columns"]:
        return _respond(table_data, state)
    try:
        state = upsert_column_filter(state, ColumnFilter(column, value or '', operator or 'contains'))
    except ValueError as exc:
        logger.info("Ignoring filter on %s: %s", column, exc)
    return _respond(table_data, state)


def handle_remove_filter(table_data, state, column):
    state = state or QueryState()
    if column:
        state = remove_column_filter(state, column)
    return _respond(table_data, state)


def handle_clear_filters(table_data, state):
    state = clear_all(state or QueryState())
    return (*_respond(table_data, state), "")


def handle_sort(table_data, state, column):
    state = state or QueryState()
    if table_data and column in table_data["columns"]:
        state = set_sort(state, column)
    return _respond(table_data, state)


def handle_items_per_page(table_data, state, items_per_page):
    state = state or QueryState()
    try:
        state = set_items_per_page(state, items_per_page)
    except (TypeError, ValueError) as exc:
        logger.info("Ignoring page size %r: %s", items_per_page, exc)
    return _respond(table_data, state)


def _total_pages(table_data, state: QueryState) -> int:
    if not table_data:
        return 1
    return build_view(table_data["rows"], table_data["columns"], state).total_pages


def handle_page_change(table_data, state, page):
    state = state or QueryState()
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    state = go_to_page(state, page, _total_pages(table_data, state))
    return _respond(table_data, state)


def handle_previous_page(table_data, state):
    state = state or QueryState()
    return handle_page_change(table_data, state, state.current_page - 1)


def handle_next_page(table_data, state):
    state = state or QueryState()
    return handle_page_change(table_data, state, state.current_page + 1)


def handle_visible_columns(table_data, state, visible: List[str]):
    state = state or QueryState()
    if table_data:
        state = set_visible_columns(state, table_data["columns"], visible)
    return _respond(table_data, state)


def export_table_handler(table_data, state):
    if not table_data:
        return None, "No CSV file selected."

    payload = export_filtered_rows(
        table_data["rows"],
        table_data["columns"],
        state or QueryState(),
        table_data.get("name"),
    )
    try:
        path = write_export_file(payload)
    except OSError as exc:
        return None, f"Error during export: {str(exc)}"
    return path, f"Export successful! Saved to {path}"
