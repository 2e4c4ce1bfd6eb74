import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import render, redirect, get_object_or_404
from django.utils import timezone

from . import services
from .forms import TransactionForm, TransactionFilterForm
from .models import Transaction, TYPE_EXPENSE

logger = logging.getLogger(__name__)


def _page_number(value):
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


# ============================================================
# Transaction
# ============================================================

@login_required
def transaction_list(request):
    """거래 목록 (기간 필터 + 페이지네이션)"""
    filter_form = TransactionFilterForm(request.GET)
    date_from, date_to = filter_form.get_date_range()

    page_size = services.DEFAULT_PAGE_SIZE
    page = _page_number(request.GET.get('page'))
    result = services.list_transactions(
        request.user, date_from, date_to,
        limit=page_size, offset=(page - 1) * page_size,
    )
    total_count = result['total_count']
    num_pages = max((total_count + page_size - 1) // page_size, 1)

    # 범위를 벗어난 페이지 번호는 마지막 페이지로
    if page > num_pages:
        page = num_pages
        result = services.list_transactions(
            request.user, date_from, date_to,
            limit=page_size, offset=(page - 1) * page_size,
        )

    query_params = request.GET.copy()
    query_params.pop('page', None)

    context = {
        'transactions': result['items'],
        'total_count': total_count,
        'page': page,
        'num_pages': num_pages,
        'has_previous': page > 1,
        'has_next': page < num_pages,
        'filter_form': filter_form,
        'date_from': date_from,
        'date_to': date_to,
        'querystring': query_params.urlencode(),
    }
    return render(request, 'transactions/transaction_list.html', context)


@login_required
def transaction_create(request):
    """거래 생성"""
    if request.method == 'POST':
        form = TransactionForm(request.POST)
        if form.is_valid():
            services.create_transaction(request.user, **form.cleaned_data)
            messages.success(request, 'Transaction created.')
            return redirect('transactions:transaction_list')
    else:
        initial = {
            'date': timezone.localtime().replace(second=0, microsecond=0),
            'type': TYPE_EXPENSE,
        }
        form = TransactionForm(initial=initial)

    context = {
        'form': form,
        'title': 'New transaction',
    }
    return render(request, 'transactions/transaction_form.html', context)


@login_required
def transaction_update(request, pk):
    """
    거래 수정

    실제로 바뀐 필드(changed_data)만 update_transaction 에 넘깁니다.
    """
    transaction = get_object_or_404(Transaction.objects.owned_by(request.user), pk=pk)

    if request.method == 'POST':
        form = TransactionForm(request.POST, instance=transaction)
        if form.is_valid():
            changes = {name: form.cleaned_data[name] for name in form.changed_data}
            updated = services.update_transaction(request.user, pk, **changes)
            if updated:
                messages.success(request, 'Transaction updated.')
            else:
                messages.warning(request, 'Transaction not found.')
            return redirect('transactions:transaction_list')
    else:
        form = TransactionForm(instance=transaction)

    context = {
        'form': form,
        'transaction': transaction,
        'title': 'Edit transaction',
    }
    return render(request, 'transactions/transaction_form.html', context)


@login_required
def transaction_delete(request, pk):
    """거래 삭제 (하드 삭제)"""
    transaction = get_object_or_404(Transaction.objects.owned_by(request.user), pk=pk)

    if request.method == 'POST':
        deleted = services.delete_transaction(request.user, pk)
        if deleted:
            messages.success(request, 'Transaction deleted.')
        else:
            messages.warning(request, 'Transaction not found.')
        return redirect('transactions:transaction_list')

    return render(request, 'transactions/transaction_confirm_delete.html', {'transaction': transaction})
