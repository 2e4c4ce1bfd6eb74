import logging
from urllib.parse import urlencode

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import Http404
from django.shortcuts import render, redirect
from django.urls import reverse
from django.views.decorators.http import require_POST

from apps.transactions import services
from apps.transactions.models import TYPE_EXPENSE
from .forms import ReportFilterForm, REPORT_TYPE_CHOICES, REPORT_MONTHLY, REPORT_CATEGORY
from .utils import PLACEHOLDERS, build_monthly_rows, build_totals, build_category_bars

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ('csv', 'pdf')


def _report_querystring(report_type, date_from, date_to):
    return urlencode({
        'report_type': report_type,
        'date_from': date_from.isoformat(),
        'date_to': date_to.isoformat(),
    })


@login_required
def report(request):
    """
    리포트 화면

    선택한 리포트 유형에 필요한 조회만 실행합니다.
        monthly  → 월별 수입/지출 + 기간 합계
        category → 지출 카테고리별 합계 (막대)
        detailed / trend → 조회 없음 (안내 문구)
    """
    form = ReportFilterForm(request.GET)
    report_type = form.get_report_type()
    date_from, date_to = form.get_date_range()

    context = {
        'form': form,
        'report_type': report_type,
        'report_types': REPORT_TYPE_CHOICES,
        'date_from': date_from,
        'date_to': date_to,
    }

    if report_type == REPORT_MONTHLY:
        context['monthly_rows'] = build_monthly_rows(
            services.monthly_summary(request.user, date_from, date_to)
        )
        context['totals'] = build_totals(services.type_totals(request.user, date_from, date_to))
    elif report_type == REPORT_CATEGORY:
        context['category_bars'] = build_category_bars(
            services.category_breakdown(request.user, date_from, date_to, TYPE_EXPENSE)
        )
    else:
        context['placeholder'] = PLACEHOLDERS[report_type]

    return render(request, 'reports/report.html', context)


@login_required
@require_POST
def report_export(request, fmt):
    """
    리포트 내보내기 (stub)

    파일은 만들지 않고 요청만 기록한 뒤 같은 조건의 리포트 화면으로 돌아갑니다.
    """
    if fmt not in EXPORT_FORMATS:
        raise Http404(f"Unsupported export format: {fmt}")

    form = ReportFilterForm(request.POST)
    report_type = form.get_report_type()
    date_from, date_to = form.get_date_range()

    logger.info(f"Exporting {report_type} report as {fmt.upper()}")
    messages.info(request, f"Report exported as {fmt.upper()}!")

    return redirect(f"{reverse('reports:report')}?{_report_querystring(report_type, date_from, date_to)}")
