"""Typed views of the payment summary consumed by the report builder.

The upstream service delivers a JSON document with a purchase report and an
optional refund report. This module owns the boundary between that camelCase
payload and the immutable dataclasses used by the rest of the package:

1. Record types: :class:`TransactionRecord`, :class:`SubReport`,
   :class:`PaymentSummary`.
2. Presentation types: :class:`ColumnDefinition` and :class:`ReportContext`.
3. Deserialisation: turning raw mappings (or a JSON file) into the above.

Amounts and timestamps are kept as delivered; they are validated when the
formatters render them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from . import log
from .constants import TransactionType
from .exceptions import InvalidPayloadError, MissingRequiredFieldError
from .formatters import AmountLike, TimestampLike


REQUIRED_RECORD_KEYS: tuple[str, ...] = (
    "merchantName",
    "transactionId",
    "transactionDate",
    "amount",
    "fee",
    "payToMerchant",
    "payoutDate",
)


@dataclass(frozen=True)
class TransactionRecord:
    """One purchase or refund event as listed in a disbursement report."""

    merchant_name: str
    transaction_id: str
    transaction_date: TimestampLike
    customer_name: Optional[str]
    amount: AmountLike
    fee: AmountLike
    pay_to_merchant: AmountLike
    payout_date: TimestampLike
    fee_tax: Optional[AmountLike] = None
    merchant_support: Optional[AmountLike] = None
    transaction_loan_tenure: Any = None
    transaction_type: Optional[TransactionType] = None
    refund_ids: tuple[str, ...] = ()
    terminal_id: Optional[str] = None


@dataclass(frozen=True)
class ColumnDefinition:
    """Header label, row key and display width of one worksheet column."""

    header: str
    key: str
    width: int


@dataclass(frozen=True)
class ReportContext:
    """Per-sheet flags deciding which conditional columns are present."""

    transaction_type: Optional[TransactionType] = None
    has_transaction_with_terminal_id: bool = False


@dataclass(frozen=True)
class SubReport:
    """Purchase or refund half of a payment summary."""

    merchant_name: Optional[str]
    merchant_email: Optional[str]
    date: Optional[TimestampLike]
    disbursement_amount: Optional[AmountLike]
    details: tuple[TransactionRecord, ...]
    details_total_amount: Optional[AmountLike]


@dataclass(frozen=True)
class PaymentSummary:
    """Complete payment summary; ``refund_report`` is ``None`` without refunds."""

    purchase_report: SubReport
    refund_report: Optional[SubReport] = None


def parse_transaction_record(raw: Mapping[str, Any]) -> TransactionRecord:
    """Convert one camelCase transaction detail into a :class:`TransactionRecord`.

    Required keys must be present and non-null. Optional monetary fields stay
    ``None`` when absent so the row mapper can coalesce them explicitly. Any
    ``transactionType`` present in the payload is ignored; the type is
    assigned by the report builder.

    Args:
        raw (Mapping[str, Any]): Transaction detail from the payment summary.

    Returns:
        TransactionRecord: Immutable record holding the raw values.

    Raises:
        InvalidPayloadError: If ``raw`` is not a mapping.
        MissingRequiredFieldError: If a required key is absent or null.
    """

    if not isinstance(raw, Mapping):
        raise InvalidPayloadError(f"Transaction detail must be an object, got {type(raw).__name__}")

    transaction_id = raw.get("transactionId")
    for key in REQUIRED_RECORD_KEYS:
        if raw.get(key) is None:
            raise MissingRequiredFieldError(
                key,
                transaction_id=str(transaction_id) if transaction_id is not None else None,
            )

    refund_ids_raw = raw.get("refundIds")
    if refund_ids_raw is None:
        refund_ids: tuple[str, ...] = ()
    elif isinstance(refund_ids_raw, (list, tuple)):
        refund_ids = tuple(str(refund_id) for refund_id in refund_ids_raw)
    else:
        raise InvalidPayloadError(
            f"refundIds of transaction {transaction_id} must be a list, got {type(refund_ids_raw).__name__}"
        )

    terminal_id = raw.get("terminalId")

    return TransactionRecord(
        merchant_name=str(raw["merchantName"]),
        transaction_id=str(transaction_id),
        transaction_date=raw["transactionDate"],
        customer_name=raw.get("customerName"),
        amount=raw["amount"],
        fee=raw["fee"],
        pay_to_merchant=raw["payToMerchant"],
        payout_date=raw["payoutDate"],
        fee_tax=raw.get("feeTax"),
        merchant_support=raw.get("merchantSupport"),
        transaction_loan_tenure=raw.get("transactionLoanTenure"),
        refund_ids=refund_ids,
        terminal_id=str(terminal_id) if terminal_id is not None else None,
    )


def parse_transaction_records(raw_details: Optional[Sequence[Any]]) -> tuple[TransactionRecord, ...]:
    """Parse a list of transaction details; ``None`` yields an empty tuple."""

    if raw_details is None:
        return ()
    if not isinstance(raw_details, (list, tuple)):
        raise InvalidPayloadError(
            f"merchantDisbursementDetails must be a list, got {type(raw_details).__name__}"
        )
    return tuple(parse_transaction_record(raw) for raw in raw_details)


def parse_sub_report(raw: Mapping[str, Any]) -> SubReport:
    """Convert a purchase or refund report object into a :class:`SubReport`."""

    if not isinstance(raw, Mapping):
        raise InvalidPayloadError(f"Report must be an object, got {type(raw).__name__}")

    return SubReport(
        merchant_name=raw.get("merchantName"),
        merchant_email=raw.get("merchantEmail"),
        date=raw.get("date"),
        disbursement_amount=raw.get("merchantDisbursementAmount"),
        details=parse_transaction_records(raw.get("merchantDisbursementDetails")),
        details_total_amount=raw.get("merchantDisbursementDetailsTotalAmount"),
    )


def parse_payment_summary(payload: Mapping[str, Any]) -> PaymentSummary:
    """Convert the upstream payment summary into a :class:`PaymentSummary`.

    Args:
        payload (Mapping[str, Any]): Decoded JSON with ``purchaseReport`` and
            an optional ``refundReport``.

    Returns:
        PaymentSummary: Typed summary; ``refund_report`` is ``None`` when the
            payload carries no refund report.

    Raises:
        InvalidPayloadError: If the payload is not an object or lacks the
            purchase report.
        MissingRequiredFieldError: If any transaction detail is incomplete.
    """

    if not isinstance(payload, Mapping):
        raise InvalidPayloadError(f"Payment summary must be an object, got {type(payload).__name__}")

    purchase_raw = payload.get("purchaseReport")
    if purchase_raw is None:
        raise InvalidPayloadError("Payment summary has no purchaseReport")

    refund_raw = payload.get("refundReport")
    summary = PaymentSummary(
        purchase_report=parse_sub_report(purchase_raw),
        refund_report=parse_sub_report(refund_raw) if refund_raw is not None else None,
    )
    log.debug(
        "Parsed payment summary with %d purchase(s) and %s",
        len(summary.purchase_report.details),
        f"{len(summary.refund_report.details)} refund(s)" if summary.refund_report else "no refund report",
    )
    return summary


def load_payment_summary(path: Path) -> PaymentSummary:
    """Read a payment summary JSON file and parse it.

    Raises:
        FileNotFoundError: If ``path`` does not exist after expansion.
        InvalidPayloadError: If the file is not valid JSON or not a summary.
    """

    path = Path(path).expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Payment summary not found: {path}")

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidPayloadError(f"Payment summary {path} is not valid JSON: {exc}") from exc

    log.info("Loaded payment summary from '%s'", path)
    return parse_payment_summary(payload)
