"""
리포트 화면용 행 가공

services 의 집계 결과(Decimal)를 템플릿이 그대로 출력할 수 있는 형태로 바꿉니다.
계산은 모두 Decimal 로 하고, 표시 문자열만 여기서 만듭니다.
"""
from decimal import Decimal, ROUND_HALF_UP

from .forms import REPORT_DETAILED, REPORT_TREND

UNCATEGORIZED_LABEL = 'Uncategorized'

# 상세/추세 리포트는 아직 조회 없이 안내 문구만 표시
PLACEHOLDERS = {
    REPORT_DETAILED: {
        'title': 'Detailed Transaction Report',
        'description': 'Complete list of all transactions in the selected period',
        'body': 'This report will include all transaction details for the selected period.',
    },
    REPORT_TREND: {
        'title': 'Trend Analysis Report',
        'description': 'Financial trends and patterns over time',
        'body': 'This report will show spending trends, patterns, and forecasts.',
    },
}


def format_money(value):
    """Decimal('1234.5') → '$1,234.50'"""
    return f"${value:,.2f}"


def format_net(value):
    """순이익 표시: 양수면 '+' 접두사 ('+$600.00'), 0/음수는 그대로 ('$-100.00')"""
    prefix = '+' if value > 0 else ''
    return f"{prefix}${value:,.2f}"


def _net_class(value):
    return 'positive' if value > 0 else 'negative'


def _with_net(income, expense):
    net_income = income - expense
    return {
        'income': income,
        'expense': expense,
        'net_income': net_income,
        'income_display': format_money(income),
        'expense_display': format_money(expense),
        'net_display': format_net(net_income),
        'net_class': _net_class(net_income),
    }


def build_monthly_rows(rows):
    """
    월별 집계 → 표 행

    [{'month': 'Jan 2024', 'income': Decimal('1000'), 'expense': Decimal('400')}]
      → [{'month': 'Jan 2024', ..., 'net_income': Decimal('600'), 'net_display': '+$600.00',
          'net_class': 'positive'}]
    """
    return [{'month': row['month'], **_with_net(row['income'], row['expense'])} for row in rows]


def build_totals(totals):
    """type_totals() 결과 → 표 합계(footer) 행"""
    return _with_net(totals['income'], totals['expense'])


def build_category_bars(rows):
    """
    카테고리별 집계 → 막대

    - 막대 너비는 total / 100 (%) 이므로 10000 을 넘으면 100% 를 넘어감 (표시상 문제만 있음)
    - 라벨 금액은 정수로 반올림해서 '80$' 형태
    - 카테고리 NULL 은 화면에서만 'Uncategorized' 로 표시
    """
    bars = []
    for row in rows:
        total = row['total']
        width = total / Decimal('100')
        bars.append({
            'category': row['category'],
            'label': row['category'] if row['category'] is not None else UNCATEGORIZED_LABEL,
            'total': total,
            'total_display': f"{total.quantize(Decimal('1'), rounding=ROUND_HALF_UP)}$",
            'width': width,
            'width_css': f"{width:.2f}%",
        })
    return bars
