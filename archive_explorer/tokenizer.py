from __future__ import annotations

from typing import List


def split_csv_line(line: str, delimiter: str = ',') -> List[str]:
    """Split one line of delimited text into trimmed fields.

    - A '"' toggles quoting; '""' inside quotes is a literal quote.
    - The delimiter only ends a field outside quotes.
    - Unbalanced quotes are not an error: the remainder of the line
      becomes the last field.
    """
    if line is None:
        return ['']

    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0

    while i < len(line):
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                buf.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append(''.join(buf).strip())
            buf = []
        else:
            buf.append(ch)
        i += 1

    fields.append(''.join(buf).strip())
    return fields
