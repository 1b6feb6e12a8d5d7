from archive_explorer.tokenizer import split_csv_line


def test_plain_fields_are_trimmed():
    assert split_csv_line("a, b ,c") == ["a", "b", "c"]


def test_quoted_delimiter_stays_in_field():
    assert split_csv_line('"Bob, Jr",25') == ["Bob, Jr", "25"]


def test_escaped_quote_inside_quotes():
    assert split_csv_line('"say ""hi""",x') == ['say "hi"', "x"]


def test_trailing_delimiter_yields_empty_last_field():
    assert split_csv_line("a,b,") == ["a", "b", ""]


def test_empty_line_is_one_empty_field():
    assert split_csv_line("") == [""]


def test_unbalanced_quote_keeps_rest_of_line():
    assert split_csv_line('a,"b,c') == ["a", "b,c"]


def test_custom_delimiter():
    assert split_csv_line("a;b,c;d", delimiter=";") == ["a", "b,c", "d"]
