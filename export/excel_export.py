"""Excel-Export der Planungstabelle (openpyxl)."""

from pathlib import Path

from models.plan import PlanData
from planning.aggregation import is_over_allocated, remaining, round_hours, teacher_totals

from export.grid_renderer import GridRow, header_row, render_grid_rows
from export.helpers import COLORS, today_str


class PlanExcelExporter:
    """Exportiert einen PlanData-Snapshot in eine Excel-Datei mit 2 Blättern."""

    # Spaltenbreiten (Excel-Einheiten)
    COL_LABEL_W   = 38
    COL_TOTAL_W   = 14
    COL_TEACHER_W = 8

    # Zeilenhöhen (Punkte)
    ROW_HEADER_H  = 22

    def __init__(self, plan: PlanData, decimals: int = 1, warn_below: float = 1.0,
                 title: str = "Kursplanung"):
        self.plan       = plan
        self.decimals   = decimals
        self.warn_below = warn_below
        self.title      = title

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> None:
        """Erstellt die Excel-Datei mit den Blättern "Planung" und "Lehrkräfte"."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_planung(wb)
        self._sheet_lehrkraefte(wb)

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _center_align(self, wrap: bool = False):
        from openpyxl.styles import Alignment
        return Alignment(wrap_text=wrap, horizontal="center", vertical="center")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _write_header_row(self, ws, headers: list[str]) -> None:
        from openpyxl.styles import Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = self._center_align()
            cell.border = border
        ws.row_dimensions[1].height = self.ROW_HEADER_H

    def _value(self, text: str):
        """Zahlen als Zahl schreiben, damit Excel weiterrechnen kann."""
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return text

    # ─── Blatt: Planung ───────────────────────────────────────────────────────

    def _sheet_planung(self, wb) -> None:
        from openpyxl.styles import Font
        from openpyxl.utils import get_column_letter

        ws = wb.create_sheet("Planung")
        headers = header_row(self.plan)
        self._write_header_row(ws, headers)
        ws.column_dimensions["A"].width = self.COL_LABEL_W
        ws.column_dimensions["B"].width = self.COL_TOTAL_W
        for col in range(3, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = self.COL_TEACHER_W
        ws.freeze_panes = "C2"

        border = self._thin_border()
        rows = render_grid_rows(self.plan, self.decimals, self.warn_below)
        for r, row in enumerate(rows, 2):
            fill = self._row_fill(row)
            c = ws.cell(row=r, column=1, value=row.label)
            c.font = Font(bold=row.kind != "unit", size=9)
            c.border = border
            if fill:
                c.fill = self._fill(fill)

            c = ws.cell(row=r, column=2, value=self._value(row.total))
            c.alignment = self._center_align()
            c.border = border
            if row.over_budget:
                c.fill = self._fill(COLORS["over"])
                c.font = Font(bold=True, color="9C0006", size=9)
            elif fill:
                c.fill = self._fill(fill)

            for i, text in enumerate(row.cells):
                c = ws.cell(row=r, column=3 + i, value=self._value(text))
                c.alignment = self._center_align()
                c.border = border
                c.font = Font(size=9)
                status = row.status[i] if row.status else ""
                if status:
                    c.fill = self._fill(COLORS[status])
                elif row.kind == "unit" and text:
                    c.fill = self._fill(COLORS["assigned"])
                elif fill:
                    c.fill = self._fill(fill)

        foot = len(rows) + 3
        ws.cell(row=foot, column=1,
                value=f"{self.title} – erstellt am {today_str()}").font = Font(italic=True, size=8)

    def _row_fill(self, row: GridRow) -> str:
        if row.kind == "summary":
            return COLORS["summary"]
        if row.kind == "course":
            return COLORS["course"]
        return ""

    # ─── Blatt: Lehrkräfte ────────────────────────────────────────────────────

    def _sheet_lehrkraefte(self, wb) -> None:
        ws = wb.create_sheet("Lehrkräfte")
        self._write_header_row(ws, ["ID", "Name", "Kontingent", "Zugewiesen", "Rest"])
        for col, width in zip("ABCDE", (14, 28, 12, 12, 12)):
            ws.column_dimensions[col].width = width

        totals = teacher_totals(self.plan.teachers, self.plan.courses)
        border = self._thin_border()
        for r, teacher in enumerate(self.plan.teachers, 2):
            left = remaining(teacher, totals)
            values = [
                teacher.id,
                teacher.name,
                round_hours(teacher.allowance, self.decimals),
                round_hours(totals[teacher.id], self.decimals),
                round_hours(left, self.decimals) + 0.0,
            ]
            for col, value in enumerate(values, 1):
                c = ws.cell(row=r, column=col, value=value)
                c.border = border
            if is_over_allocated(left):
                ws.cell(row=r, column=5).fill = self._fill(COLORS["over"])
