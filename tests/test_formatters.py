from __future__ import annotations

import json
from datetime import datetime

from parish_admin.reporting import CSVFormatter, HTMLFormatter, JSONFormatter
from parish_admin.reporting.formatters import cell_text

WHEN = datetime(2025, 1, 15, 9, 30, 0)


def test_csv_layout():
    records = [{"name": "Choir", "members": 12}, {"name": "Youth", "members": None}]
    text = CSVFormatter.format("Ministries", records, ["name", "members"], WHEN)
    assert text.split("\n") == [
        "Ministries",
        "Generated on: 2025-01-15 09:30:00",
        "",
        "name,members",
        "Choir,12",
        "Youth,",
        "",
    ]


def test_csv_quotes_only_when_needed():
    records = [
        {"a": "Bulawayo, Zimbabwe", "b": 'He said "amen"', "c": "line1\nline2", "d": "plain"},
    ]
    text = CSVFormatter.format("T", records, ["a", "b", "c", "d"], WHEN)
    body = text.split("\n", 4)[4]
    assert body == '"Bulawayo, Zimbabwe","He said ""amen""","line1\nline2",plain\n'


def test_csv_with_no_records_still_has_header():
    text = CSVFormatter.format("Empty", [], ["x", "y"], WHEN)
    assert text.endswith("\n\nx,y\n")


def test_cell_text_renders_nested_and_bool_values():
    assert cell_text(None) == ""
    assert cell_text(True) == "true"
    assert cell_text({"a": 1}) == '{"a": 1}'
    assert cell_text(3.5) == "3.5"


def test_json_document_shape():
    doc = json.loads(JSONFormatter.format("Users", [{"username": "mary"}], WHEN))
    assert list(doc) == ["title", "generated_on", "records"]
    assert doc["title"] == "Users"
    assert doc["generated_on"] == "2025-01-15T09:30:00"
    assert doc["records"] == [{"username": "mary"}]


def test_html_table_escapes_and_prints():
    html = HTMLFormatter().render_table(
        "Prayer <Intentions>",
        [{"intention": "<script>alert(1)</script>", "urgent": None}],
        ["intention", "urgent"],
        WHEN,
    )
    assert "<title>Prayer &lt;Intentions&gt;</title>" in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "<script>alert(1)</script>" not in html
    assert "<th>intention</th>" in html
    assert "<td></td>" in html
    assert "Generated on: 2025-01-15 09:30:00" in html
    assert "window.print()" in html


def test_html_summary_sections():
    html = HTMLFormatter().render_summary(
        "Analytics Summary Report",
        [{"heading": "User Statistics", "metrics": [("Total Users", 42)]}],
        WHEN,
    )
    assert "<h3>User Statistics</h3>" in html
    assert "<tr><td>Total Users</td><td>42</td></tr>" in html


def test_csv_field_with_delimiter_splits_back_into_two_fields():
    import csv

    text = CSVFormatter.format("T", [{"a": "1,2", "b": "x"}], ["a", "b"], WHEN)
    row_line = text.split("\n")[4]
    assert row_line == '"1,2",x'
    assert next(csv.reader([row_line])) == ["1,2", "x"]
