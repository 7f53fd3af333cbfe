"""Export-Modul: Planungstabelle als Rich-Zeilen und Excel (openpyxl)."""

from export.excel_export import PlanExcelExporter
from export.grid_renderer import GridRow, render_grid_rows

__all__ = ["PlanExcelExporter", "GridRow", "render_grid_rows"]
