import pytest

from archive_explorer.errors import EmptyInputError
from archive_explorer.tabular import coerce_value, parse_csv_payload, parse_csv_text


def test_parses_header_and_typed_rows(people_csv):
    rows, columns = parse_csv_text(people_csv)

    assert columns == ["Name", "Age"]
    assert rows == [{"Name": "Alice", "Age": 30}, {"Name": "Bob, Jr", "Age": 25}]
    assert isinstance(rows[0]["Age"], int)


def test_empty_input_raises():
    with pytest.raises(EmptyInputError):
        parse_csv_text("\n  \n\n")


def test_empty_input_is_a_value_error():
    with pytest.raises(ValueError):
        parse_csv_text("")


def test_header_only_gives_no_rows():
    rows, columns = parse_csv_text("a,b\n")
    assert rows == []
    assert columns == ["a", "b"]


def test_missing_trailing_fields_become_empty_strings():
    rows, _ = parse_csv_text("a,b,c\n1\n")
    assert rows == [{"a": 1, "b": "", "c": ""}]


def test_all_blank_rows_are_dropped():
    rows, _ = parse_csv_text("a,b\n,\n1,2\n , \n")
    assert rows == [{"a": 1, "b": 2}]


def test_blank_lines_and_crlf_are_ignored():
    rows, columns = parse_csv_text("a,b\r\n\r\n1,x\r\n2,y\r\n")
    assert columns == ["a", "b"]
    assert rows == [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]


def test_quoted_header_cells_are_unwrapped():
    _, columns = parse_csv_text('"First Name", "Last Name"\nA,B\n')
    assert columns == ["First Name", "Last Name"]


def test_row_order_is_preserved():
    rows, _ = parse_csv_text("n\n3\n1\n2\n")
    assert [r["n"] for r in rows] == [3, 1, 2]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", 42),
        ("-7", -7),
        ("3.5", 3.5),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("", ""),
        ("abc", "abc"),
        ("0x1A", "0x1A"),
        ("nan", "nan"),
        ("Infinity", "Infinity"),
        ("1_000", "1_000"),
        ("12 apples", "12 apples"),
        ("1e400", "1e400"),
        ("-1e400", "-1e400"),
        ("\u0661\u0662", "\u0661\u0662"),
        ("\u0967\u0968.5", "\u0967\u0968.5"),
    ],
)
def test_coerce_value(text, expected):
    assert coerce_value(text) == expected
    assert type(coerce_value(text)) is type(expected)


def test_parse_payload_decodes_bytes_and_bom():
    rows, columns = parse_csv_payload("\ufeffName,Age\nAlice,30\n".encode("utf-8"))
    assert columns == ["Name", "Age"]
    assert rows == [{"Name": "Alice", "Age": 30}]
