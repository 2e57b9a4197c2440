"""Shared pytest fixtures and utilities for disbursement report tests."""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Iterator

import pytest

# Ensure source packages are importable without installation.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from disbursement_report import models  # noqa: E402

_BASE_RECORD = models.TransactionRecord(
    merchant_name="Toko Maju",
    transaction_id="TRX-0001",
    transaction_date="2023-01-01T03:00:00Z",
    customer_name="Budi Santoso",
    amount=Decimal("150000"),
    fee=Decimal("1500.5"),
    pay_to_merchant=Decimal("148499.5"),
    payout_date="2023-01-03T03:00:00Z",
    transaction_loan_tenure="3",
)

_BASE_DETAIL: dict[str, Any] = {
    "merchantName": "Toko Maju",
    "transactionId": "TRX-0001",
    "transactionDate": "2023-01-01T03:00:00Z",
    "customerName": "Budi Santoso",
    "amount": 150000,
    "fee": 1500.5,
    "feeTax": 165.06,
    "merchantSupport": 0,
    "payToMerchant": 148334.44,
    "payoutDate": "2023-01-03T03:00:00Z",
    "transactionLoanTenure": 3,
}


@pytest.fixture(scope="session", autouse=True)
def _restore_sys_path() -> Iterator[None]:
    """Ensure sys.path modifications are undone after the test session."""

    original = sys.path.copy()
    try:
        yield
    finally:
        sys.path[:] = original


@pytest.fixture
def make_record() -> Callable[..., models.TransactionRecord]:
    """Factory producing transaction records with sensible defaults."""

    def _make(**overrides: Any) -> models.TransactionRecord:
        return replace(_BASE_RECORD, **overrides)

    return _make


@pytest.fixture
def make_detail() -> Callable[..., dict[str, Any]]:
    """Factory producing raw camelCase transaction details."""

    def _make(**overrides: Any) -> dict[str, Any]:
        detail = dict(_BASE_DETAIL)
        detail.update(overrides)
        return detail

    return _make


@pytest.fixture
def summary_payload(make_detail: Callable[..., dict[str, Any]]) -> dict[str, Any]:
    """Payment summary with two purchases and one refund."""

    return {
        "purchaseReport": {
            "merchantName": "Toko Maju",
            "merchantEmail": "finance@tokomaju.co.id",
            "date": "2023-01-05T00:00:00Z",
            "merchantDisbursementAmount": 250000,
            "merchantDisbursementDetails": [
                make_detail(transactionId="TRX-0001", transactionDate="2023-01-02T03:00:00Z"),
                make_detail(transactionId="TRX-0002", transactionDate="2023-01-03T03:00:00Z"),
            ],
            "merchantDisbursementDetailsTotalAmount": 300000,
        },
        "refundReport": {
            "merchantName": "Toko Maju",
            "merchantEmail": "finance@tokomaju.co.id",
            "date": "2023-01-05T00:00:00Z",
            "merchantDisbursementAmount": 250000,
            "merchantDisbursementDetails": [
                make_detail(
                    transactionId="TRX-0003",
                    transactionDate="2023-01-01T03:00:00Z",
                    amount=-50000,
                    refundIds=["RF-1", "RF-2"],
                ),
            ],
            "merchantDisbursementDetailsTotalAmount": -50000,
        },
    }


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[Any, str], Path]:
    """Write ``payload`` as JSON into the temp folder and return its path."""

    def _write(payload: Any, name: str = "summary.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Write a config.ini pointing reports to a ``reports`` folder."""

    path = tmp_path / "config.ini"
    path.write_text("[Report]\nLabel = Test Disbursement Report\nOutputDirectory = reports\n", encoding="utf-8")
    return path
