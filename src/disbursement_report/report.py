"""Construction of the three-sheet disbursement report workbook.

The report lists purchases on a ``Transaction`` sheet, refunds on a
``Refund`` sheet, and both merged in chronological order on a ``Ledger``
sheet. Building each sheet is split into two phases: the records are scanned
once to freeze a :class:`~disbursement_report.models.ReportContext`, and only
then are rows emitted, so a conditional column can never appear halfway down
a sheet.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from openpyxl.workbook import Workbook

from . import log
from .constants import SheetName, TransactionType
from .formatters import AmountLike, TimestampLike, parse_timestamp
from .models import PaymentSummary, ReportContext, TransactionRecord
from .worksheet import build_worksheet


@dataclass(frozen=True)
class ReportSummary:
    """Figures describing one disbursement report, taken from its payment summary."""

    merchant_name: Optional[str]
    merchant_email: Optional[str]
    report_date: Optional[TimestampLike]
    disbursed_amount: Optional[AmountLike]
    purchase_records: tuple[TransactionRecord, ...]
    total_purchase_count: int
    total_purchase_amount: Optional[AmountLike]
    refund_records: tuple[TransactionRecord, ...]
    total_refund_count: int
    total_refund_amount: AmountLike


def summarize(summary: PaymentSummary) -> ReportSummary:
    """Derive the report figures from a payment summary.

    Merchant details, report date and disbursed amount come from the purchase
    report, which always exists. A missing refund report counts as zero
    refunds with a zero total.
    """

    purchase_report = summary.purchase_report
    refund_report = summary.refund_report

    refund_records = refund_report.details if refund_report is not None else ()
    total_refund_amount: AmountLike = Decimal("0")
    if refund_report is not None and refund_report.details_total_amount is not None:
        total_refund_amount = refund_report.details_total_amount

    return ReportSummary(
        merchant_name=purchase_report.merchant_name,
        merchant_email=purchase_report.merchant_email,
        report_date=purchase_report.date,
        disbursed_amount=purchase_report.disbursement_amount,
        purchase_records=purchase_report.details,
        total_purchase_count=len(purchase_report.details),
        total_purchase_amount=purchase_report.details_total_amount,
        refund_records=refund_records,
        total_refund_count=len(refund_records),
        total_refund_amount=total_refund_amount,
    )


def tag_records(records: Iterable[TransactionRecord], transaction_type: TransactionType) -> List[TransactionRecord]:
    """Return copies of ``records`` carrying ``transaction_type``."""

    return [replace(record, transaction_type=transaction_type) for record in records]


def has_transaction_with_terminal_id(records: Iterable[TransactionRecord]) -> bool:
    """Return ``True`` when at least one record carries a terminal id."""

    return any(record.terminal_id is not None for record in records)


def merge_ledger(
    purchases: Sequence[TransactionRecord],
    refunds: Sequence[TransactionRecord],
) -> List[TransactionRecord]:
    """Merge purchases and refunds into ascending transaction date order.

    ``sorted`` is stable and purchases are concatenated first, so a purchase
    and a refund sharing the same instant keep purchase-before-refund order.

    Raises:
        InvalidDateError: If a transaction date cannot be parsed.
    """

    return sorted([*purchases, *refunds], key=lambda record: parse_timestamp(record.transaction_date))


def build_report(
    purchase_records: Sequence[TransactionRecord],
    refund_records: Optional[Sequence[TransactionRecord]] = None,
) -> Workbook:
    """Build the disbursement report workbook.

    Args:
        purchase_records (Sequence[TransactionRecord]): Purchase details.
        refund_records (Sequence[TransactionRecord] | None): Refund details;
            ``None`` is treated as no refunds.

    Returns:
        Workbook: New workbook holding the ``Transaction``, ``Refund`` and
            ``Ledger`` sheets in that order.

    Raises:
        ReportError: Any formatting or missing-field error aborts the whole
            report; no partially built workbook is returned.
    """

    workbook = Workbook()
    # Drop the default sheet openpyxl creates so ours are the only ones.
    if workbook.active is not None and workbook.active.title == "Sheet":
        workbook.remove(workbook.active)

    purchases = tag_records(purchase_records, TransactionType.PURCHASE)
    refunds = tag_records(refund_records or (), TransactionType.REFUND)

    purchase_context = ReportContext(
        transaction_type=TransactionType.PURCHASE,
        has_transaction_with_terminal_id=has_transaction_with_terminal_id(purchases),
    )
    build_worksheet(workbook, SheetName.TRANSACTION.value, purchases, purchase_context)

    refund_context = ReportContext(
        transaction_type=TransactionType.REFUND,
        has_transaction_with_terminal_id=has_transaction_with_terminal_id(refunds),
    )
    build_worksheet(workbook, SheetName.REFUND.value, refunds, refund_context)

    # The ledger never shows terminal ids, whatever the records carry.
    ledger_context = ReportContext(has_transaction_with_terminal_id=False)
    build_worksheet(workbook, SheetName.LEDGER.value, merge_ledger(purchases, refunds), ledger_context)

    log.info(
        "Built disbursement report with %d purchase(s) and %d refund(s)",
        len(purchases),
        len(refunds),
    )
    return workbook


def build_report_from_summary(summary: ReportSummary) -> Workbook:
    """Build the report workbook for the records of ``summary``."""

    return build_report(summary.purchase_records, summary.refund_records)
