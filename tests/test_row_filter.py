import io
import re

from fb_scrape.row_filter import filter_rows


DATA = (
    "id,type,message\n"
    '1,status,"Tomatoes, again"\n'
    "2,comment,\n"
    "3,comment,no fruit here\n"
    '4,like,"tomato\nsoup"\n'
)


def test_keeps_matching_rows():
    out = io.StringIO()
    kept = filter_rows(io.StringIO(DATA), out, "message", "(?i)tomato")
    assert kept == 2
    assert out.getvalue() == 'id,type,message\n1,status,"Tomatoes, again"\n4,like,"tomato\nsoup"\n'


def test_empty_values_never_match():
    out = io.StringIO()
    assert filter_rows(io.StringIO(DATA), out, "message", re.compile(".*")) == 3


def test_unknown_field_keeps_header_only():
    out = io.StringIO()
    assert filter_rows(io.StringIO(DATA), out, "nope", ".") == 0
    assert out.getvalue() == "id,type,message\n"


def test_empty_input():
    out = io.StringIO()
    assert filter_rows(io.StringIO(""), out, "id", ".") == 0
    assert out.getvalue() == ""
