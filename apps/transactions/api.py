"""
거래 JSON API

services 모듈 위의 얇은 어댑터입니다. 입력은 폼으로 파싱/검증하고,
실제 처리는 전부 services 함수가 담당합니다.

    GET    /api/transactions/?from=2024-01-01&to=2024-01-31&limit=10&offset=0
    POST   /api/transactions/                      (JSON 본문)
    PATCH  /api/transactions/<id>/                 (JSON 본문, 보낸 필드만 수정)
    DELETE /api/transactions/<id>/
    GET    /api/transactions/summary/category/?from=...&to=...&type=expense
    GET    /api/transactions/summary/monthly/?from=...&to=...
"""
import logging

from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_http_methods

from apps.core.http import json_endpoint, parse_json_body
from . import services
from .forms import (
    CategoryBreakdownForm,
    DateRangeForm,
    TransactionForm,
    TransactionListForm,
    TransactionUpdateForm,
)

logger = logging.getLogger(__name__)


def _money(value):
    # JSON 숫자로 내보냄
    return float(value)


def serialize_transaction(tx):
    return {
        'id': tx.pk,
        'type': tx.type,
        'category': tx.category,
        'amount': _money(tx.amount),
        'description': tx.description,
        'date': timezone.localtime(tx.date).isoformat(),
    }


def _validated(form):
    """폼 검증 실패 시 필드별 ValidationError (json_endpoint 가 400 으로 변환)"""
    if not form.is_valid():
        raise ValidationError(form.errors.as_data())
    return form.cleaned_data


# ============================================================
# 거래 목록 / 생성
# ============================================================

@json_endpoint
@require_http_methods(['GET', 'POST'])
def transaction_collection(request):
    if request.method == 'POST':
        data = _validated(TransactionForm(parse_json_body(request)))
        tx = services.create_transaction(request.user, **data)
        return JsonResponse(serialize_transaction(tx), status=201)

    params = _validated(TransactionListForm(request.GET))
    page = services.list_transactions(
        request.user,
        params['from'],
        params['to'],
        limit=params['limit'],
        offset=params['offset'],
    )
    return JsonResponse({
        'items': [serialize_transaction(tx) for tx in page['items']],
        'total_count': page['total_count'],
    })


# ============================================================
# 거래 수정 / 삭제
# ============================================================

@json_endpoint
@require_http_methods(['PATCH', 'DELETE'])
def transaction_item(request, pk):
    if request.method == 'DELETE':
        deleted = services.delete_transaction(request.user, pk)
        return JsonResponse({'deleted': deleted})

    form = TransactionUpdateForm(parse_json_body(request))
    _validated(form)
    updated = services.update_transaction(request.user, pk, **form.get_changes())
    return JsonResponse({'updated': updated})


# ============================================================
# 집계
# ============================================================

@json_endpoint
@require_GET
def category_summary(request):
    params = _validated(CategoryBreakdownForm(request.GET))
    rows = services.category_breakdown(request.user, params['from'], params['to'], params['type'])
    return JsonResponse(
        [{'category': row['category'], 'total': _money(row['total'])} for row in rows],
        safe=False,
    )


@json_endpoint
@require_GET
def monthly_summary(request):
    params = _validated(DateRangeForm(request.GET))
    rows = services.monthly_summary(request.user, params['from'], params['to'])
    return JsonResponse(
        [
            {'month': row['month'], 'income': _money(row['income']), 'expense': _money(row['expense'])}
            for row in rows
        ],
        safe=False,
    )
