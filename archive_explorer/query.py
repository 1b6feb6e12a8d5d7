from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from . import settings
from .tabular import Row, coerce_value, format_value, is_numeric

OPERATOR_LABELS: Dict[str, str] = {
    'contains': "Contains",
    'equals': "Equals",
    'startsWith': "Starts with",
    'endsWith': "Ends with",
    'greater': "Greater than",
    'less': "Less than",
}
OPERATORS = tuple(OPERATOR_LABELS)


@dataclass(frozen=True)
class ColumnFilter:
    column: str
    value: str
    operator: str = 'contains'


@dataclass(frozen=True)
class SortConfig:
    key: str
    direction: str = 'asc'


@dataclass(frozen=True)
class QueryState:
    """Everything the table view depends on besides the rows themselves.

    Transitions below return a new state; rows are never touched.
    """
    search_term: str = ''
    filters: Tuple[ColumnFilter, ...] = ()
    sort: Optional[SortConfig] = None
    current_page: int = 1
    items_per_page: int = settings.DEFAULT_ITEMS_PER_PAGE
    hidden_columns: FrozenSet[str] = field(default_factory=frozenset)


@dataclass
class TableView:
    rows: List[Row]
    columns: List[str]
    total_rows: int
    filtered_count: int
    total_pages: int
    current_page: int
    items_per_page: int
    start_index: int
    end_index: int

    def as_table(self) -> List[List[Any]]:
        """Page rows projected onto the visible columns."""
        return [[row.get(col, '') for col in self.columns] for row in self.rows]


# --- state transitions ---

def set_global_search(state: QueryState, term: Optional[str]) -> QueryState:
    return replace(state, search_term=term or '', current_page=1)


def upsert_column_filter(state: QueryState, column_filter: ColumnFilter) -> QueryState:
    """Add a filter, replacing any existing filter on the same column in place."""
    if column_filter.operator not in OPERATOR_LABELS:
        raise ValueError(f"Unknown filter operator: {column_filter.operator}")

    filters = list(state.filters)
    for index, existing in enumerate(filters):
        if existing.column == column_filter.column:
            filters[index] = column_filter
            break
    else:
        filters.append(column_filter)
    return replace(state, filters=tuple(filters), current_page=1)


def remove_column_filter(state: QueryState, column: str) -> QueryState:
    filters = tuple(f for f in state.filters if f.column != column)
    return replace(state, filters=filters, current_page=1)


def clear_all(state: QueryState) -> QueryState:
    """Drop every column filter and the search term; sort is kept."""
    return replace(state, filters=(), search_term='', current_page=1)


def set_sort(state: QueryState, column: str) -> QueryState:
    current = state.sort
    if current is not None and current.key == column and current.direction == 'asc':
        direction = 'desc'
    else:
        direction = 'asc'
    return replace(state, sort=SortConfig(column, direction), current_page=1)


def set_items_per_page(state: QueryState, items_per_page: int) -> QueryState:
    items_per_page = int(items_per_page)
    if items_per_page < 1:
        raise ValueError("Items per page must be at least 1.")
    return replace(state, items_per_page=items_per_page, current_page=1)


def go_to_page(state: QueryState, page: int, total_pages: Optional[int] = None) -> QueryState:
    page = max(1, int(page))
    if total_pages is not None:
        page = min(page, max(1, total_pages))
    return replace(state, current_page=page)


def toggle_column_visibility(state: QueryState, column: str) -> QueryState:
    hidden = set(state.hidden_columns)
    if column in hidden:
        hidden.remove(column)
    else:
        hidden.add(column)
    return replace(state, hidden_columns=frozenset(hidden))


def set_visible_columns(state: QueryState, columns: List[str], visible: List[str]) -> QueryState:
    visible_set = set(visible or [])
    return replace(state, hidden_columns=frozenset(c for c in columns if c not in visible_set))


def visible_columns(columns: List[str], state: QueryState) -> List[str]:
    return [c for c in columns if c not in state.hidden_columns]


def active_filter_count(state: QueryState) -> int:
    return len(state.filters) + (1 if state.search_term else 0)


# --- evaluation ---

def _to_number(value: Any) -> Optional[float]:
    if is_numeric(value):
        return float(value)
    if isinstance(value, str):
        coerced = coerce_value(value.strip())
        if is_numeric(coerced):
            return float(coerced)
    return None


def matches_search(row: Row, term: str) -> bool:
    needle = term.lower()
    return any(needle in format_value(v).lower() for v in row.values())


def matches_filter(row: Row, column_filter: ColumnFilter) -> bool:
    operator = column_filter.operator
    raw = row.get(column_filter.column, '')

    if operator in ('greater', 'less'):
        left = _to_number(raw)
        right = _to_number(column_filter.value)
        if left is None or right is None:
            return False
        return left > right if operator == 'greater' else left < right

    cell = format_value(raw).lower()
    needle = column_filter.value.lower()
    if operator == 'equals':
        return cell == needle
    if operator == 'startsWith':
        return cell.startswith(needle)
    if operator == 'endsWith':
        return cell.endswith(needle)
    return needle in cell


def _is_numeric_column(rows: List[Row], key: str) -> bool:
    seen_number = False
    for row in rows:
        value = row.get(key, '')
        if is_numeric(value):
            seen_number = True
        elif value != '':
            return False
    return seen_number


def sort_rows(rows: List[Row], sort: Optional[SortConfig]) -> List[Row]:
    """Stable sort by one column.

    A column whose non-blank values are all numbers sorts numerically with
    blanks after the numbers; any other column sorts by lower-cased text.
    """
    if sort is None:
        return list(rows)

    key = sort.key
    if _is_numeric_column(rows, key):
        def sort_key(row):
            value = row.get(key, '')
            return (0, value) if is_numeric(value) else (1, 0)
    else:
        def sort_key(row):
            return format_value(row.get(key, '')).lower()

    return sorted(rows, key=sort_key, reverse=sort.direction == 'desc')


def apply_query(rows: List[Row], state: QueryState) -> List[Row]:
    """Search, then each filter in insertion order, then sort.

    Filters with an empty value are inactive.
    """
    result = list(rows)

    if state.search_term:
        result = [row for row in result if matches_search(row, state.search_term)]

    for column_filter in state.filters:
        if not column_filter.value:
            continue
        result = [row for row in result if matches_filter(row, column_filter)]

    return sort_rows(result, state.sort)


def count_pages(item_count: int, items_per_page: int) -> int:
    return max(1, math.ceil(item_count / max(1, items_per_page)))


def build_view(rows: List[Row], columns: List[str], state: QueryState) -> TableView:
    filtered = apply_query(rows, state)
    total_pages = count_pages(len(filtered), state.items_per_page)
    page = min(max(1, state.current_page), total_pages)

    start = (page - 1) * state.items_per_page
    end = start + state.items_per_page
    page_rows = filtered[start:end]

    return TableView(
        rows=page_rows,
        columns=visible_columns(columns, state),
        total_rows=len(rows),
        filtered_count=len(filtered),
        total_pages=total_pages,
        current_page=page,
        items_per_page=state.items_per_page,
        start_index=start,
        end_index=start + len(page_rows),
    )
