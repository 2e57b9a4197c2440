"""Exception hierarchy for disbursement report generation."""

from __future__ import annotations

from typing import Any, Optional


class ReportError(Exception):
    """Base exception for all report generation errors."""


class InvalidDateError(ReportError, ValueError):
    """Raised when a timestamp cannot be parsed into a calendar date/time."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid Indonesia date of {value!r}")


class InvalidAmountError(ReportError, ValueError):
    """Raised when a monetary value is not a finite number."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid amount of {value!r}")


class MissingRequiredFieldError(ReportError, KeyError):
    """Raised when a transaction record lacks a field the report needs."""

    def __init__(self, field: str, *, transaction_id: Optional[str] = None) -> None:
        self.field = field
        self.transaction_id = transaction_id
        message = f"Missing required field '{field}'"
        if transaction_id is not None:
            message += f" on transaction {transaction_id}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise wrap the message in quotes.
        return str(self.args[0])


class InvalidPayloadError(ReportError):
    """Raised when the payment summary payload is structurally unusable."""


class InvalidCellValueError(ReportError, ValueError):
    """Raised when a row value cannot be stored in a worksheet cell."""

    def __init__(self, field: str, value: Any, *, transaction_id: Optional[str] = None) -> None:
        self.field = field
        self.value = value
        self.transaction_id = transaction_id
        message = f"Cannot write {value!r} to column '{field}'"
        if transaction_id is not None:
            message += f" of transaction {transaction_id}"
        super().__init__(message)
