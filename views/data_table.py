"""Generic data table: column specs, free-text filtering and rendering.

Filtering is a linear case-insensitive substring scan over every field of
every row, recomputed on each change of the search text. Datasets are one
organization's worth of rows, so there is no index and no pagination.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Union

Accessor = Union[str, Callable[[Any], Any]]


@dataclass(frozen=True)
class Column:
    """One table column: a header, how to read the value, how to show it."""

    header: str
    accessor: Accessor
    render: Optional[Callable[[Any, Any], str]] = None  # (value, row) -> cell text

    def value(self, row: Any) -> Any:
        if callable(self.accessor):
            return self.accessor(row)
        if isinstance(row, Mapping):
            return row.get(self.accessor)
        return getattr(row, self.accessor, None)

    def cell(self, row: Any) -> str:
        value = self.value(row)
        if self.render is not None:
            return self.render(value, row)
        return to_text(value)


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set)):
        return ", ".join(to_text(v) for v in value)
    if isinstance(value, Mapping):
        return ", ".join(f"{k}: {to_text(v)}" for k, v in value.items())
    return str(value)


def row_values(row: Any) -> List[Any]:
    """Every field value of a row: mapping values, mapped ORM columns, or instance attributes."""
    if isinstance(row, Mapping):
        return list(row.values())
    mapper = getattr(row, "__mapper__", None)
    if mapper is not None:
        return [getattr(row, attr.key) for attr in mapper.column_attrs]
    return [v for k, v in vars(row).items() if not k.startswith("_")]


def filter_rows(rows: Iterable[Any], search: Optional[str]) -> List[Any]:
    """Keep rows where any field, as text, contains search (case-insensitive).

    An empty search keeps every row.
    """
    rows = list(rows)
    if not search:
        return rows
    needle = search.casefold()
    return [
        row for row in rows
        if any(needle in to_text(value).casefold() for value in row_values(row))
    ]


class DataTable:
    """A table of records with its own search text as view state."""

    def __init__(self, rows: Iterable[Any], columns: Sequence[Column], search: str = ""):
        self.rows = list(rows)
        self.columns = list(columns)
        self.search = search

    def set_search(self, search: str) -> List[Any]:
        self.search = search
        return self.visible_rows()

    def visible_rows(self) -> List[Any]:
        return filter_rows(self.rows, self.search)

    def render(self) -> List[List[str]]:
        """Header row followed by one list of cell strings per visible row."""
        header = [column.header for column in self.columns]
        return [header] + [
            [column.cell(row) for column in self.columns] for row in self.visible_rows()
        ]

    def to_text(self, empty_message: str = "No results.") -> str:
        """Fixed-width text rendering for terminals."""
        table = self.render()
        if len(table) == 1:
            return empty_message
        widths = [max(len(r[i]) for r in table) for i in range(len(self.columns))]
        lines = []
        for index, cells in enumerate(table):
            lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip())
            if index == 0:
                lines.append("  ".join("-" * w for w in widths))
        return "\n".join(lines)
