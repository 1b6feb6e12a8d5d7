from __future__ import annotations

import io
import zipfile
from typing import Dict, List, Tuple, Union

import pytest


def build_zip(entries: List[Tuple[str, Union[str, bytes, None]]], date_time=(2024, 5, 1, 12, 0, 0)) -> bytes:
    """Create zip bytes with entries written in the given order.

    A name ending in '/' is written as a directory entry.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in entries:
            info = zipfile.ZipInfo(name, date_time=date_time)
            if name.endswith("/"):
                info.external_attr = 0o40775 << 16 | 0x10
                zf.writestr(info, b"")
            else:
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, content.encode("utf-8") if isinstance(content, str) else (content or b""))
    return buffer.getvalue()


@pytest.fixture
def sample_zip() -> bytes:
    return build_zip([
        ("a/", None),
        ("a/b.csv", "Name,Age\nAlice,30\n\"Bob, Jr\",25\n"),
        ("a/c.txt", "ignored"),
        ("d.pdf", b"%PDF-1.4 fake"),
    ])


@pytest.fixture
def people_csv() -> str:
    return "Name,Age\nAlice,30\n\"Bob, Jr\",25\n"


@pytest.fixture
def people_rows() -> Tuple[List[Dict], List[str]]:
    columns = ["Name", "Age", "City"]
    rows = [
        {"Name": "Alice", "Age": 30, "City": "Paris"},
        {"Name": "Bob", "Age": 25, "City": "Berlin"},
        {"Name": "carol", "Age": 41, "City": "paris"},
        {"Name": "Dan", "Age": 25, "City": "Oslo"},
        {"Name": "Eve", "Age": 19, "City": "Rome"},
        {"Name": "Frank", "Age": 52, "City": "Lisbon"},
        {"Name": "Grace", "Age": 30, "City": "Madrid"},
    ]
    return rows, columns
