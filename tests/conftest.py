from datetime import datetime

import pytest

from fakes import FakeExecutor, FakeTextClient


@pytest.fixture
def now():
    return datetime(2025, 9, 17, 10, 30)


@pytest.fixture
def expenses():
    return [
        {"amount": 100, "reason": "Milk packet", "category": "Groceries", "date": "02/09/2025",
         "paymentMethod": "UPI", "type": "debit", "userId": "u1"},
        {"amount": 250.5, "reason": "Train ticket", "category": "Travel", "date": "05/09/2025",
         "paymentMethod": "Card", "type": "debit", "userId": "u1"},
        {"amount": 49.5, "reason": "milk shake", "category": "Groceries", "date": "10/09/2025",
         "paymentMethod": "UPI", "type": "debit", "userId": "u1"},
    ]


@pytest.fixture
def fake_client():
    return FakeTextClient()


@pytest.fixture
def fake_executor():
    return FakeExecutor()
