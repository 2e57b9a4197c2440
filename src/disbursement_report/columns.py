"""Column schema of the disbursement report worksheets."""

from __future__ import annotations

from typing import List

from .constants import TransactionType
from .models import ColumnDefinition, ReportContext


FIXED_COLUMNS: tuple[ColumnDefinition, ...] = (
    ColumnDefinition("NO", "no", 5),
    ColumnDefinition("MERCHANT NAME", "merchantName", 25),
    ColumnDefinition("TRANSACTION DATE", "transactionDate", 25),
    ColumnDefinition("TRANSIDMERCHANT", "transactionId", 25),
    ColumnDefinition("CUSTOMER NAME", "customerName", 25),
    ColumnDefinition("AMOUNT", "amount", 25),
    ColumnDefinition("FEE", "fee", 25),
    ColumnDefinition("TAX", "feeTax", 25),
    ColumnDefinition("MERCHANT SUPPORT", "merchantSupport", 25),
    ColumnDefinition("PAY TO MERCHANT", "payToMerchant", 25),
    ColumnDefinition("PAY OUT DATE", "payoutDate", 25),
    ColumnDefinition("TRANSACTION TYPE", "transactionType", 25),
    ColumnDefinition("TENURE", "transactionLoanTenure", 25),
)

REFUND_IDS_COLUMN = ColumnDefinition("REFUND_IDS_SEPARATED_BY_SEMICOLON", "refundIds", 30)
# Only some merchant integrations send a terminal id, for their own reconciliation.
TERMINAL_ID_COLUMN = ColumnDefinition("TERMINAL_ID", "terminalId", 30)


def build_columns(context: ReportContext) -> List[ColumnDefinition]:
    """Return the ordered column schema for a sheet built under ``context``.

    The thirteen fixed columns always come first. The refund id column is
    appended for refund sheets, then the terminal id column when the sheet's
    data carries terminal ids.
    """

    columns = list(FIXED_COLUMNS)
    if context.transaction_type == TransactionType.REFUND:
        columns.append(REFUND_IDS_COLUMN)
    if context.has_transaction_with_terminal_id:
        columns.append(TERMINAL_ID_COLUMN)
    return columns
