"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from fintrack_gateway.api.main import create_app
from fintrack_gateway.domain.models import Transaction, TransactionType


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """
    Three months (Jan-Mar 2025) of steady activity starting from a 10,000 balance.

    Each month: 5,000 salary, 1,500 rent, 500 dining, 1,000 invested.
    Month-end balances: 12,000 / 14,000 / 16,000.
    """
    transactions = []
    balance = 10_000.0

    for month in (1, 2, 3):
        entries = [
            (1, 5000.0, TransactionType.INCOME, "salary"),
            (5, 1500.0, TransactionType.EXPENSE, "rent"),
            (15, 500.0, TransactionType.EXPENSE, "dining"),
            (20, 1000.0, TransactionType.INVESTMENT, "investment"),
        ]
        for day, amount, txn_type, category in entries:
            balance += amount if txn_type == TransactionType.INCOME else -amount
            transactions.append(
                Transaction(
                    transaction_id=f"{category}_{month}",
                    date=date(2025, month, day),
                    amount=amount,
                    type=txn_type,
                    category=category,
                    status="completed",
                    balance=balance,
                )
            )

    return transactions


@pytest.fixture
def sample_transaction_payload(sample_transactions: list[Transaction]) -> list[dict]:
    """sample_transactions serialized as an API request body"""
    return [
        {
            "transaction_id": t.transaction_id,
            "date": t.date.isoformat(),
            "amount": t.amount,
            "type": t.type.value,
            "category": t.category,
            "status": t.status,
            "balance": t.balance,
        }
        for t in sample_transactions
    ]
