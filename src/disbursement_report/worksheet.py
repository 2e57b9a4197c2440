"""Assembly of one formatted worksheet inside a report workbook."""

from __future__ import annotations

from typing import Any, Sequence

from openpyxl.cell.cell import Cell
from openpyxl.styles import Border, Font, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from . import log
from .columns import build_columns
from .exceptions import InvalidCellValueError
from .models import ReportContext, TransactionRecord
from .rows import map_row


HEADER_ROW = 1
HEADER_FONT = Font(bold=True)
THIN = Side(style="thin")
CELL_BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)


def _write_cell(cell: Cell, key: str, value: Any, record: TransactionRecord) -> None:
    try:
        cell.value = value
    except (IllegalCharacterError, ValueError, TypeError) as exc:
        raise InvalidCellValueError(key, value, transaction_id=record.transaction_id) from exc
    # Pass-through text is data; a leading "=" must not turn it into a formula.
    if isinstance(value, str):
        cell.data_type = "s"


def build_worksheet(
    workbook: Workbook,
    sheet_name: str,
    records: Sequence[TransactionRecord],
    context: ReportContext,
) -> Worksheet:
    """Append a sheet named ``sheet_name`` listing ``records`` to ``workbook``.

    The header row is written in bold with the widths of the column schema,
    each record is mapped to a row in input order with text cells kept as
    plain strings, and finally every cell of every schema column, header
    included, receives a thin border.

    Args:
        workbook (Workbook): Workbook receiving the new sheet.
        sheet_name (str): Title of the sheet.
        records (Sequence[TransactionRecord]): Records in display order.
        context (ReportContext): Flags fixed for the whole sheet.

    Returns:
        Worksheet: The populated sheet.

    Raises:
        InvalidCellValueError: If a value cannot be stored in a cell, such as
            text with control characters or a list.
    """

    worksheet = workbook.create_sheet(title=sheet_name)
    columns = build_columns(context)

    for column_index, column in enumerate(columns, start=1):
        cell = worksheet.cell(row=HEADER_ROW, column=column_index, value=column.header)
        cell.font = HEADER_FONT
        worksheet.column_dimensions[get_column_letter(column_index)].width = column.width

    for index, record in enumerate(records):
        row = map_row(record, index, context)
        row_index = HEADER_ROW + 1 + index
        for column_index, column in enumerate(columns, start=1):
            _write_cell(worksheet.cell(row=row_index, column=column_index), column.key, row[column.key], record)

    last_row = worksheet.max_row
    for column_index in range(1, len(columns) + 1):
        for row_index in range(HEADER_ROW, last_row + 1):
            worksheet.cell(row=row_index, column=column_index).border = CELL_BORDER

    log.debug(
        "Built sheet '%s' with %d column(s) and %d row(s)",
        sheet_name,
        len(columns),
        len(records),
    )
    return worksheet
