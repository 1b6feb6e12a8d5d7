from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Tuple, Union

from .errors import EmptyInputError
from .tokenizer import split_csv_line

Value = Union[int, float, str]
Row = Dict[str, Value]

_LINE_BREAK = re.compile(r'\r\n|\r|\n')
_INTEGER = re.compile(r'[+-]?[0-9]+')
_DECIMAL = re.compile(r'[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')


def strip_surrounding_quotes(value: str) -> str:
    """Remove one layer of surrounding double quotes, then trim."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value.strip()


def coerce_value(value: str) -> Value:
    """Return an int or float for decimal numeric text, otherwise the text.

    Only ASCII digits count. Hex, infinity, NaN, underscore-grouped and
    overflowing literals stay strings.
    """
    if not value:
        return value
    try:
        if _INTEGER.fullmatch(value):
            return int(value)
        if _DECIMAL.fullmatch(value):
            number = float(value)
            return number if math.isfinite(number) else value
    except ValueError:
        # int() refuses very long digit strings
        return value
    return value


def is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_value(value: Any) -> str:
    """Text form of a cell, used for search, string filters and export."""
    if value is None:
        return ''
    return str(value)


def split_lines(text: str) -> List[str]:
    return [line for line in _LINE_BREAK.split(text) if line.strip()]


def parse_csv_text(text: str, delimiter: str = ',') -> Tuple[List[Row], List[str]]:
    """Parse delimited text into typed rows and the ordered header columns.

    Every row carries every header column; missing trailing fields are ''.
    Rows whose fields are all empty are dropped.
    """
    lines = split_lines(text or '')
    if not lines:
        raise EmptyInputError("CSV file is empty")

    columns = [strip_surrounding_quotes(h) for h in split_csv_line(lines[0], delimiter)]

    rows: List[Row] = []
    for line in lines[1:]:
        fields = split_csv_line(line, delimiter)
        row: Row = {}
        for index, column in enumerate(columns):
            raw = fields[index] if index < len(fields) else ''
            row[column] = coerce_value(strip_surrounding_quotes(raw))
        if any(v != '' for v in row.values()):
            rows.append(row)

    return rows, columns


def parse_csv_payload(payload: bytes, encoding: str = 'utf-8-sig') -> Tuple[List[Row], List[str]]:
    """Decode a file payload and parse it as CSV."""
    if isinstance(payload, bytes):
        text = payload.decode(encoding, errors='replace')
    else:
        text = payload
    return parse_csv_text(text)
