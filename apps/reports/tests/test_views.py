from datetime import date, datetime
from unittest import mock

import pytest
from django.contrib.messages import get_messages
from django.urls import reverse
from django.utils import timezone

from apps.transactions.services import month_bounds

REPORT_URL = '/reports/'
JANUARY = {'date_from': '2024-01-01', 'date_to': '2024-01-31'}


@pytest.mark.django_db
class TestReportView:
    def test_requires_login(self, client):
        response = client.get(REPORT_URL)

        assert response.status_code == 302
        assert '/accounts/login/' in response.url

    def test_root_redirects_to_report(self, auth_client):
        response = auth_client.get('/')

        assert response.status_code == 302
        assert response.url == reverse('reports:report')

    def test_defaults(self, auth_client):
        response = auth_client.get(REPORT_URL)

        assert response.status_code == 200
        assert response.context['report_type'] == 'monthly'
        assert (response.context['date_from'], response.context['date_to']) == month_bounds(timezone.localdate())

    def test_monthly_report(self, auth_client, january_2024):
        response = auth_client.get(REPORT_URL, {'report_type': 'monthly', **JANUARY})

        [row] = response.context['monthly_rows']
        assert row['month'] == 'Jan 2024'
        assert row['net_display'] == '+$600.00'
        assert response.context['totals']['net_display'] == '+$600.00'
        assert 'category_bars' not in response.context
        assert '+$600.00' in response.content.decode()

    def test_monthly_report_only_own_rows(self, auth_client, other_user, make_tx):
        make_tx('income', '500', datetime(2024, 1, 10, 9, 0), user=other_user)

        response = auth_client.get(REPORT_URL, {'report_type': 'monthly', **JANUARY})

        assert response.context['monthly_rows'] == []

    def test_category_report_uses_expenses_only(self, auth_client, january_2024):
        response = auth_client.get(REPORT_URL, {'report_type': 'category', **JANUARY})

        bars = {bar['label']: bar for bar in response.context['category_bars']}
        assert set(bars) == {'Food', 'Uncategorized'}
        assert bars['Food']['total_display'] == '80$'
        assert 'monthly_rows' not in response.context
        assert 'width: 0.80%' in response.content.decode()

    @pytest.mark.parametrize('report_type', ['detailed', 'trend'])
    def test_placeholder_reports_issue_no_query(self, auth_client, report_type):
        with mock.patch('apps.reports.views.services') as services:
            response = auth_client.get(REPORT_URL, {'report_type': report_type, **JANUARY})

        assert response.status_code == 200
        assert response.context['placeholder']['title'].endswith('Report')
        assert not services.monthly_summary.called
        assert not services.category_breakdown.called
        assert not services.type_totals.called
        assert 'Generate Full Report' in response.content.decode()

    def test_invalid_report_type_falls_back_to_monthly(self, auth_client):
        response = auth_client.get(REPORT_URL, {'report_type': 'pie'})

        assert response.context['report_type'] == 'monthly'

    def test_invalid_dates_fall_back_to_current_month(self, auth_client):
        response = auth_client.get(REPORT_URL, {'date_from': '31/01/2024', 'date_to': 'x'})

        assert (response.context['date_from'], response.context['date_to']) == month_bounds(timezone.localdate())

    def test_explicit_dates(self, auth_client):
        response = auth_client.get(REPORT_URL, JANUARY)

        assert response.context['date_from'] == date(2024, 1, 1)
        assert response.context['date_to'] == date(2024, 1, 31)


@pytest.mark.django_db
class TestReportExport:
    def test_export_redirects_back_with_filters(self, auth_client):
        response = auth_client.post(
            reverse('reports:report_export', args=['csv']),
            {'report_type': 'category', **JANUARY},
        )

        assert response.status_code == 302
        assert response.url == f"{REPORT_URL}?report_type=category&date_from=2024-01-01&date_to=2024-01-31"
        assert 'Content-Disposition' not in response

    @pytest.mark.parametrize('fmt', ['csv', 'pdf'])
    def test_export_flashes_and_logs(self, auth_client, fmt):
        with mock.patch('apps.reports.views.logger') as logger:
            response = auth_client.post(
                reverse('reports:report_export', args=[fmt]),
                {'report_type': 'monthly', **JANUARY},
            )

        logger.info.assert_called_once_with(f"Exporting monthly report as {fmt.upper()}")
        messages = [str(m) for m in get_messages(response.wsgi_request)]
        assert messages == [f"Report exported as {fmt.upper()}!"]

    def test_unknown_format(self, auth_client):
        response = auth_client.post(reverse('reports:report_export', args=['xlsx']))

        assert response.status_code == 404

    def test_get_not_allowed(self, auth_client):
        response = auth_client.get(reverse('reports:report_export', args=['csv']))

        assert response.status_code == 405

    def test_requires_login(self, client):
        response = client.post(reverse('reports:report_export', args=['csv']))

        assert response.status_code == 302
        assert '/accounts/login/' in response.url
