"""
transactions 앱 테스트용 공통 fixture
"""
import pytest
from datetime import datetime
from decimal import Decimal
from django.contrib.auth.models import User
from django.utils import timezone

from apps.transactions.models import Transaction


@pytest.fixture
def test_user(db):
    """테스트용 사용자"""
    return User.objects.create_user(username='tester', password='pass')


@pytest.fixture
def other_user(db):
    """다른 사용자 (권한 테스트용)"""
    return User.objects.create_user(username='other', password='pass')


@pytest.fixture
def auth_client(client, test_user):
    """로그인된 클라이언트"""
    client.login(username='tester', password='pass')
    return client


@pytest.fixture
def make_tx(test_user):
    """
    거래 생성 헬퍼

        make_tx('income', '1000', datetime(2024, 1, 15))
        make_tx('expense', '50', datetime(2024, 1, 20), category='Food', user=other_user)
    """
    def _make(type, amount, when, category=None, description='', user=None):
        return Transaction.objects.create(
            user=user or test_user,
            type=type,
            amount=Decimal(amount),
            date=timezone.make_aware(when) if timezone.is_naive(when) else when,
            category=category,
            description=description,
        )
    return _make


@pytest.fixture
def january_2024(make_tx):
    """2024년 1월: 수입 1000 (15일), 지출 400 (20일)"""
    return [
        make_tx('income', '1000', datetime(2024, 1, 15, 10, 0)),
        make_tx('expense', '400', datetime(2024, 1, 20, 12, 0)),
    ]
