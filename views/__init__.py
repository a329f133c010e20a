"""Presentation helpers shared by the dashboard screens."""
from views.data_table import Column, DataTable, filter_rows, row_values

__all__ = ["Column", "DataTable", "filter_rows", "row_values"]
