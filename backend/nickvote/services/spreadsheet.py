from __future__ import annotations
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Iterable
from openpyxl import Workbook, load_workbook

from nickvote.errors import ValidationFailed
from nickvote.schemas.vote import StudentResult

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_FILENAME = "nickname-voting-results.xlsx"
EXPORT_SHEET = "Nickname Results"
CREDENTIALS_SHEET = "Passwords"

@dataclass(frozen=True)
class RosterRow:
    email: str
    name: str

@dataclass(frozen=True)
class CredentialRow:
    email: str
    name: str
    password: str

def _cell_text(value) -> str:
    return "" if value is None else str(value).strip()

def read_roster(path: str | Path) -> list[RosterRow]:
    """Read the first sheet of a roster workbook; header row must have Email and Name."""
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header = [_cell_text(h) for h in next(rows, ())]
        if "Email" not in header or "Name" not in header:
            raise ValidationFailed("Roster needs 'Email' and 'Name' columns")
        i_email, i_name = header.index("Email"), header.index("Name")

        out = []
        for n, row in enumerate(rows, start=2):
            email = _cell_text(row[i_email]) if i_email < len(row) else ""
            name = _cell_text(row[i_name]) if i_name < len(row) else ""
            if not email and not name:
                continue
            if not email or not name:
                raise ValidationFailed(f"Roster row {n} is missing Email or Name")
            out.append(RosterRow(email=email, name=name))
        return out
    finally:
        wb.close()

def write_credentials(path: str | Path, rows: Iterable[CredentialRow]) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = CREDENTIALS_SHEET
    ws.append(["email", "name", "password"])
    for r in rows:
        ws.append([r.email, r.name, r.password])
    wb.save(path)

def results_workbook(results: Iterable[StudentResult]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET
    ws.append(["Student Name", "Winning Nickname"])
    for r in results:
        ws.append([r.name, r.winning_nickname])
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()
