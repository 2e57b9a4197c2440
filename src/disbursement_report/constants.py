"""Enumerations and fixed values shared across the disbursement report modules.

Keeps sheet names, transaction types and presentation constants in one place
so the column schema, row mapping and workbook assembly agree on them.
"""

from __future__ import annotations

from datetime import timedelta, timezone
from enum import Enum


XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLSX_EXTENSION = ".xlsx"

# Every rendered timestamp is shown in Western Indonesia Time.
REPORT_TIMEZONE = timezone(timedelta(hours=7))
REPORT_UTC_OFFSET = "+07:00"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILENAME_DATE_FORMAT = "%d-%m-%Y"

REFUND_ID_SEPARATOR = ";"
DEFAULT_REPORT_LABEL = "Disbursement Report"


class TransactionType(str, Enum):
    """Enumerate the transaction types shown in the report."""

    PURCHASE = "Purchase"
    REFUND = "Refund"


class SheetName(str, Enum):
    """Enumerate the worksheet names of the disbursement report, in order."""

    TRANSACTION = "Transaction"
    REFUND = "Refund"
    LEDGER = "Ledger"


__all__ = [
    "XLSX_MIME_TYPE",
    "XLSX_EXTENSION",
    "REPORT_TIMEZONE",
    "REPORT_UTC_OFFSET",
    "DATE_FORMAT",
    "FILENAME_DATE_FORMAT",
    "REFUND_ID_SEPARATOR",
    "DEFAULT_REPORT_LABEL",
    "TransactionType",
    "SheetName",
]
