"""Data table filtering and rendering."""
from datetime import date
from types import SimpleNamespace

from db.models import Influencer
from views.data_table import Column, DataTable, filter_rows, to_text

ROWS = [
    {"name": "Alice", "city": "Lagos"},
    {"name": "Bob", "city": "Accra"},
]

COLUMNS = [Column("Name", "name"), Column("City", "city")]


def test_search_matches_any_field_case_insensitively():
    table = DataTable(ROWS, COLUMNS)
    assert table.set_search("la") == [ROWS[0]]
    assert table.set_search("ACCRA") == [ROWS[1]]


def test_empty_search_shows_everything():
    table = DataTable(ROWS, COLUMNS, search="bob")
    assert table.set_search("") == ROWS


def test_no_match_shows_nothing():
    table = DataTable(ROWS, COLUMNS, search="nairobi")
    assert table.visible_rows() == []
    assert table.to_text() == "No results."
    assert table.to_text("Nothing here.") == "Nothing here."


def test_filter_matches_fields_without_a_column():
    rows = [{"name": "Alice", "notes": "vegan recipes"}, {"name": "Bob", "notes": None}]
    assert filter_rows(rows, "vegan") == [rows[0]]


def test_render_uses_column_renderers():
    columns = [
        Column("Name", "name"),
        Column("Shout", lambda row: row["name"], render=lambda value, row: value.upper()),
    ]
    table = DataTable(ROWS, columns, search="bob")
    assert table.render() == [["Name", "Shout"], ["Bob", "BOB"]]


def test_cell_text_conversions():
    assert to_text(None) == ""
    assert to_text(date(2026, 3, 1)) == "2026-03-01"
    assert to_text(["fashion", "beauty"]) == "fashion, beauty"
    assert to_text({"instagram": "@alice"}) == "instagram: @alice"


def test_orm_and_plain_object_rows():
    influencer = Influencer(name="Alice", categories=["travel"], social_handles={})
    other = SimpleNamespace(name="Bob", categories=["food"])
    rows = filter_rows([influencer, other], "TRAVEL")
    assert rows == [influencer]


def test_text_rendering_aligns_columns():
    text = DataTable(ROWS, COLUMNS).to_text()
    assert text.splitlines() == [
        "Name   City",
        "-----  -----",
        "Alice  Lagos",
        "Bob    Accra",
    ]
