from datetime import date, datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.transactions.forms import (
    CategoryBreakdownForm,
    DateRangeForm,
    TransactionFilterForm,
    TransactionForm,
    TransactionListForm,
    TransactionUpdateForm,
)
from apps.transactions.services import month_bounds


class TestDateRangeForm:
    def test_plain_dates(self):
        form = DateRangeForm({'from': '2024-01-01', 'to': '2024-01-31'})

        assert form.is_valid()
        assert form.cleaned_data['from'] == date(2024, 1, 1)
        assert form.cleaned_data['to'] == date(2024, 1, 31)

    def test_datetime_values(self):
        form = DateRangeForm({'from': '2024-01-01T08:00:00', 'to': '2024-01-31 18:30'})

        assert form.is_valid()
        assert isinstance(form.cleaned_data['from'], datetime)
        assert timezone.localtime(form.cleaned_data['to']).hour == 18

    def test_both_required(self):
        form = DateRangeForm({})

        assert not form.is_valid()
        assert set(form.errors) == {'from', 'to'}

    def test_garbage(self):
        form = DateRangeForm({'from': 'yesterday', 'to': '2024-01-31'})

        assert not form.is_valid()
        assert 'from' in form.errors


class TestTransactionListForm:
    def test_defaults(self):
        form = TransactionListForm({'from': '2024-01-01', 'to': '2024-01-31'})

        assert form.is_valid()
        assert form.cleaned_data['limit'] == 10
        assert form.cleaned_data['offset'] == 0

    @pytest.mark.parametrize('params', [{'limit': '0'}, {'limit': '101'}, {'offset': '-1'}, {'limit': 'x'}])
    def test_invalid_page(self, params):
        form = TransactionListForm({'from': '2024-01-01', 'to': '2024-01-31', **params})

        assert not form.is_valid()
        assert set(params) <= set(form.errors)


class TestCategoryBreakdownForm:
    def test_type_required(self):
        form = CategoryBreakdownForm({'from': '2024-01-01', 'to': '2024-01-31'})
        assert not form.is_valid()
        assert 'type' in form.errors

    def test_invalid_type(self):
        form = CategoryBreakdownForm({'from': '2024-01-01', 'to': '2024-01-31', 'type': 'transfer'})
        assert not form.is_valid()

    def test_valid(self):
        form = CategoryBreakdownForm({'from': '2024-01-01', 'to': '2024-01-31', 'type': 'expense'})
        assert form.is_valid()
        assert form.cleaned_data['type'] == 'expense'


@pytest.mark.django_db
class TestTransactionForm:
    def test_valid(self):
        form = TransactionForm(data={
            'type': 'expense',
            'category': 'Food',
            'amount': '12.50',
            'description': '',
            'date': '2024-01-15T12:30',
        })

        assert form.is_valid(), form.errors
        assert form.cleaned_data['amount'] == Decimal('12.50')
        assert form.cleaned_data['description'] == ''

    def test_blank_category_is_none(self):
        form = TransactionForm(data={'type': 'income', 'category': '', 'amount': '1', 'date': '2024-01-15T12:30'})

        assert form.is_valid(), form.errors
        assert form.cleaned_data['category'] is None

    @pytest.mark.parametrize('amount, expected', [
        ('19.999', Decimal('19.999')),
        ('0.005', Decimal('0.005')),
        ('0.30000000000000004', Decimal('0.3')),
    ])
    def test_fractional_amount(self, amount, expected):
        form = TransactionForm(data={'type': 'expense', 'amount': amount, 'date': '2024-01-15T12:30'})

        assert form.is_valid(), form.errors
        assert form.cleaned_data['amount'] == expected

    @pytest.mark.parametrize('amount', ['0', '-3', '0.00'])
    def test_non_positive_amount(self, amount):
        form = TransactionForm(data={'type': 'expense', 'amount': amount, 'date': '2024-01-15T12:30'})

        assert not form.is_valid()
        assert 'amount' in form.errors

    def test_invalid_type(self):
        form = TransactionForm(data={'type': 'transfer', 'amount': '5', 'date': '2024-01-15T12:30'})

        assert not form.is_valid()
        assert 'type' in form.errors

    def test_required_fields(self):
        form = TransactionForm(data={})

        assert not form.is_valid()
        assert {'type', 'amount', 'date'} <= set(form.errors)


class TestTransactionUpdateForm:
    def test_only_sent_fields_are_changes(self):
        form = TransactionUpdateForm({'amount': 500})

        assert form.is_valid()
        assert form.get_changes() == {'amount': Decimal('500')}

    def test_null_category_clears_it(self):
        form = TransactionUpdateForm({'category': None})

        assert form.is_valid()
        assert form.get_changes() == {'category': None}

    def test_empty_body_has_no_changes(self):
        form = TransactionUpdateForm({})

        assert form.is_valid()
        assert form.get_changes() == {}

    def test_fractional_amount(self):
        form = TransactionUpdateForm({'amount': 0.1 + 0.2})

        assert form.is_valid(), form.errors
        assert form.get_changes() == {'amount': Decimal('0.3')}

    def test_unknown_fields(self):
        form = TransactionUpdateForm({'user': 2, 'amount': 5})

        assert not form.is_valid()
        assert 'user' in str(form.non_field_errors())

    @pytest.mark.parametrize('data', [{'amount': 0}, {'amount': -1}, {'type': 'transfer'}, {'date': 'soon'}])
    def test_invalid_values(self, data):
        form = TransactionUpdateForm(data)

        assert not form.is_valid()
        assert set(data) <= set(form.errors)


class TestTransactionFilterForm:
    def test_defaults_to_current_month(self):
        form = TransactionFilterForm({})

        assert form.get_date_range() == month_bounds(timezone.localdate())

    def test_explicit_dates(self):
        form = TransactionFilterForm({'date_from': '2024-01-01', 'date_to': '2024-01-31'})

        assert form.get_date_range() == (date(2024, 1, 1), date(2024, 1, 31))

    def test_invalid_date_falls_back_per_field(self):
        form = TransactionFilterForm({'date_from': 'not-a-date', 'date_to': '2024-01-31'})

        default_from, _ = month_bounds(timezone.localdate())
        assert form.get_date_range() == (default_from, date(2024, 1, 31))
