"""Mapping of transaction records onto formatted worksheet rows."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .constants import REFUND_ID_SEPARATOR, TransactionType
from .exceptions import MissingRequiredFieldError
from .formatters import AmountLike, format_date, format_money
from .models import ReportContext, TransactionRecord


Row = Dict[str, Any]


def _required(record: TransactionRecord, attribute: str, key: str) -> Any:
    value = getattr(record, attribute)
    if value is None:
        raise MissingRequiredFieldError(key, transaction_id=record.transaction_id)
    return value


def _coalesce_to_zero(value: Optional[AmountLike]) -> AmountLike:
    return 0 if value is None else value


def map_row(record: TransactionRecord, index: int, context: ReportContext) -> Row:
    """Produce the formatted row for ``record`` at position ``index``.

    The returned mapping carries exactly the keys of
    :func:`disbursement_report.columns.build_columns` for the same context:
    ``refundIds`` only under a refund context and ``terminalId`` only when the
    sheet shows terminal ids.

    Args:
        record (TransactionRecord): Transaction to render.
        index (int): Zero-based position of the record within its sheet.
        context (ReportContext): Flags of the sheet being built.

    Returns:
        dict[str, Any]: Cell values keyed by column key.

    Raises:
        MissingRequiredFieldError: If an amount or date the row needs is absent.
        InvalidDateError: If a transaction or payout date cannot be parsed.
        InvalidAmountError: If an amount is not a finite number.
    """

    transaction_type = record.transaction_type
    row: Row = {
        "no": index + 1,
        "merchantName": record.merchant_name,
        "transactionDate": format_date(_required(record, "transaction_date", "transactionDate")),
        "transactionId": record.transaction_id,
        "customerName": record.customer_name,
        "amount": format_money(_required(record, "amount", "amount")),
        "fee": format_money(_required(record, "fee", "fee")),
        "feeTax": format_money(_coalesce_to_zero(record.fee_tax)),
        "merchantSupport": format_money(_coalesce_to_zero(record.merchant_support)),
        "payToMerchant": format_money(_required(record, "pay_to_merchant", "payToMerchant")),
        "payoutDate": format_date(_required(record, "payout_date", "payoutDate")),
        "transactionType": transaction_type.value if transaction_type is not None else None,
        "transactionLoanTenure": record.transaction_loan_tenure,
    }

    if context.transaction_type == TransactionType.REFUND:
        row["refundIds"] = REFUND_ID_SEPARATOR.join(str(refund_id) for refund_id in record.refund_ids)

    if context.has_transaction_with_terminal_id:
        row["terminalId"] = record.terminal_id

    return row
