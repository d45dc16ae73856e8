from decimal import Decimal

import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient

from budgeting import services


@pytest.fixture
def user(db):
    return User.objects.create_user(username='alice', email='alice@example.com', password='pass12345')


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username='bob', email='bob@example.com', password='pass12345')


@pytest.fixture
def june(user):
    """June 2025 with 3000 income, 500 Spent and 200 Savings planned."""
    record, _ = services.upsert_income(user, 6, 2025, Decimal('3000'))
    services.create_category(user, record.pk, 'Rent', Decimal('500'), 'Spent')
    services.create_category(user, record.pk, 'Emergency fund', Decimal('200'), 'Savings')
    record.refresh_from_db()
    return record


@pytest.fixture
def flat_june(user):
    """June 2025 with nothing planned: 1500 / 30 = 50 a day."""
    record, _ = services.upsert_income(user, 6, 2025, Decimal('1500'))
    return record


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client
