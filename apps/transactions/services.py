"""
거래 조회/집계 서비스

뷰(HTML), JSON API, 리포트 화면이 모두 이 모듈의 함수만 사용합니다.

규칙:
    1. 모든 함수는 첫 번째 인자로 호출자(user)를 명시적으로 받음
       → 인증되지 않은 호출자는 DB 접근 전에 AuthError
    2. 조회/수정/삭제 조건에는 항상 user 가 포함됨
       → 다른 사용자의 거래는 구조적으로 접근 불가
    3. 입력 검증은 DB 접근 전에 수행 (ValidationError)
    4. 수정/삭제 대상이 없으면 (없는 id / 남의 id) 에러 없이 0건 처리
       → 호출자는 "없음"과 "권한 없음"을 구분할 수 없음 (반환된 건수로만 확인)

기간(date_from ~ date_to)은 양 끝을 포함합니다.
date 로 넘기면 date_from 은 그날 00:00, date_to 는 그날 23:59:59.999999 로 확장됩니다.
"""
import calendar
import logging
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import transaction as db_transaction
from django.db.models import Sum
from django.db.models.functions import ExtractMonth, ExtractYear
from django.utils import timezone

from apps.core.auth import require_user
from .models import Transaction, TYPE_INCOME, TYPE_EXPENSE, AMOUNT_DECIMAL_PLACES

logger = logging.getLogger(__name__)

# 페이지 크기
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

TRANSACTION_TYPES = (TYPE_INCOME, TYPE_EXPENSE)

# 수정 가능한 필드 (id, user 는 변경 불가)
UPDATABLE_FIELDS = ('type', 'category', 'amount', 'description', 'date')

# 금액 반올림 단위 (0.000001)
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)

# 월 이름 (로케일과 무관하게 고정)
MONTH_NAMES = [
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
]


# ============================================================
# 날짜 헬퍼
# ============================================================

def _make_aware(value):
    if timezone.is_naive(value):
        return timezone.make_aware(value, timezone.get_current_timezone())
    return value


def day_start(value):
    """date → 그날 00:00 (현재 시간대), datetime 은 그대로"""
    if isinstance(value, datetime):
        return _make_aware(value)
    return _make_aware(datetime.combine(value, time.min))


def day_end(value):
    """date → 그날 23:59:59.999999 (현재 시간대), datetime 은 그대로"""
    if isinstance(value, datetime):
        return _make_aware(value)
    return _make_aware(datetime.combine(value, time.max))


def month_bounds(day):
    """해당 월의 첫날/마지막날 (date, date)"""
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last_day)


def _owned_in_range(user, date_from, date_to):
    """호출자 소유 + 기간 필터가 걸린 기본 쿼리셋"""
    errors = {}
    if date_from is None:
        errors['from'] = 'This field is required.'
    if date_to is None:
        errors['to'] = 'This field is required.'
    if errors:
        raise ValidationError(errors)

    return Transaction.objects.owned_by(user).by_date_range(day_start(date_from), day_end(date_to))


# ============================================================
# 입력 검증
# ============================================================

def _clean_page(limit, offset):
    errors = {}
    try:
        if isinstance(limit, bool):
            raise ValueError
        limit = int(limit)
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValueError
    except (TypeError, ValueError):
        errors['limit'] = f'Limit must be an integer between 1 and {MAX_PAGE_SIZE}.'
    try:
        if isinstance(offset, bool):
            raise ValueError
        offset = int(offset)
        if offset < 0:
            raise ValueError
    except (TypeError, ValueError):
        errors['offset'] = 'Offset must be an integer greater than or equal to 0.'
    if errors:
        raise ValidationError(errors)
    return limit, offset


def quantize_amount(value):
    """
    금액을 저장 자릿수(소수점 이하 6자리)로 반올림

        19.999               → Decimal('19.999000')
        0.1 + 0.2 (float)    → Decimal('0.300000')

    숫자로 해석할 수 없거나 너무 큰 값은 그대로 돌려줌 (필드 검증에서 에러 처리)
    """
    if value is None or isinstance(value, bool):
        return value
    try:
        # float 오차 방지 (문자열 거쳐서 Decimal)
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            return value
        return amount.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return value


def _clean_pk(pk):
    try:
        return int(pk)
    except (TypeError, ValueError):
        raise ValidationError({'id': 'Id must be an integer.'})


def _normalize(name, value):
    """빈 카테고리는 NULL, 빈 설명은 '', date 는 시간대 포함 datetime 으로, 금액은 저장 자릿수로 반올림"""
    if name == 'category' and value == '':
        value = None
    elif name == 'amount':
        value = quantize_amount(value)
    elif name == 'description' and value is None:
        value = ''
    elif name == 'date' and isinstance(value, date):
        value = day_start(value)
    return value


def _clean_changes(changes):
    """
    부분 수정 입력 검증

    넘어온 키(=변경할 필드 집합)만 검증/반환합니다.
    모델 필드 정의(choices, 최소 금액, 자릿수 등)를 그대로 사용합니다.
    """
    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError({name: 'This field cannot be updated.' for name in unknown})

    cleaned = {}
    errors = {}
    for name, value in changes.items():
        field = Transaction._meta.get_field(name)
        try:
            cleaned[name] = field.clean(_normalize(name, value), None)
        except ValidationError as e:
            errors[name] = e.messages
    if errors:
        raise ValidationError(errors)

    if 'date' in cleaned:
        cleaned['date'] = _make_aware(cleaned['date'])
    return cleaned


# ============================================================
# CRUD
# ============================================================

def list_transactions(user, date_from, date_to, limit=DEFAULT_PAGE_SIZE, offset=0):
    """
    기간 내 거래 목록 (최신순) + 전체 건수

    Returns:
        {'items': [Transaction, ...], 'total_count': int}
        total_count 는 페이지네이션 전 전체 건수 (페이저 구성용)
    """
    require_user(user)
    limit, offset = _clean_page(limit, offset)

    qs = _owned_in_range(user, date_from, date_to).order_by('-date', '-id')
    total_count = qs.count()
    items = list(qs[offset:offset + limit])

    return {'items': items, 'total_count': total_count}


@db_transaction.atomic
def create_transaction(user, type, amount, date, category=None, description=''):
    """거래 생성 (금액 <= 0, 잘못된 유형은 저장 전에 ValidationError)"""
    require_user(user)

    tx = Transaction(
        user=user,
        type=type,
        amount=_normalize('amount', amount),
        date=_normalize('date', date),
        category=_normalize('category', category),
        description=_normalize('description', description),
    )
    # user 는 require_user 로 이미 검증됨
    tx.full_clean(exclude=['user'])
    tx.date = _make_aware(tx.date)
    tx.save()

    logger.info(f"거래 생성: user={user.id}, id={tx.pk}, type={tx.type}, amount={tx.amount}")
    return tx


def update_transaction(user, pk, /, **changes):
    """
    거래 부분 수정

    키워드로 넘긴 필드만 변경되고 나머지는 그대로 유지됩니다.
        update_transaction(user, 3, amount=Decimal('500'))

    Returns:
        조건(id + 소유자)에 맞은 거래 건수 (0 또는 1)
        0 이면 없는 id 이거나 다른 사용자의 거래 (에러 없음)
    """
    require_user(user)
    pk = _clean_pk(pk)
    cleaned = _clean_changes(changes)

    qs = Transaction.objects.owned_by(user).filter(pk=pk)
    if not cleaned:
        # 변경할 필드가 없으면 쓰기 없이 매칭 건수만 반환
        return qs.count()

    cleaned['updated_at'] = timezone.now()
    updated = qs.update(**cleaned)

    logger.info(f"거래 수정: user={user.id}, id={pk}, fields={sorted(changes)}, updated={updated}")
    return updated


def delete_transaction(user, pk):
    """
    거래 삭제 (하드 삭제)

    Returns:
        삭제된 건수 (0 또는 1), 없는 id / 남의 id 는 0
    """
    require_user(user)
    pk = _clean_pk(pk)

    deleted, _ = Transaction.objects.owned_by(user).filter(pk=pk).delete()

    logger.info(f"거래 삭제: user={user.id}, id={pk}, deleted={deleted}")
    return deleted


# ============================================================
# 집계
# ============================================================

def category_breakdown(user, date_from, date_to, type):
    """
    카테고리별 합계

    - 카테고리 값 그대로 그룹핑 (대소문자/공백 정규화 없음)
    - 카테고리가 없는 거래(NULL)도 하나의 그룹으로 포함

    Returns:
        [{'category': 'Food', 'total': Decimal('80.00')}, ...]
    """
    require_user(user)
    if type not in TRANSACTION_TYPES:
        raise ValidationError({'type': f"Select a valid choice. '{type}' is not one of the available choices."})

    rows = (
        _owned_in_range(user, date_from, date_to)
        .filter(type=type)
        .values('category')
        .annotate(total=Sum('amount'))
        .order_by('category')
    )
    result = [{'category': row['category'], 'total': row['total']} for row in rows]

    logger.debug(f"카테고리별 집계: user={user.id}, type={type}, groups={len(result)}")
    return result


def monthly_summary(user, date_from, date_to):
    """
    월별 수입/지출 합계

    (연, 월, 유형) 단위로 DB 에서 한 번에 집계한 뒤 월별 한 줄로 합칩니다.
    연/월 추출은 ORM(ExtractYear/ExtractMonth)이 현재 시간대 기준으로 처리합니다.

    Returns:
        [{'month': 'Jan 2024', 'income': Decimal, 'expense': Decimal}, ...]
        데이터가 있는 월만, 오래된 월부터. 한쪽 유형이 없으면 0.
    """
    require_user(user)

    rows = (
        _owned_in_range(user, date_from, date_to)
        .annotate(year=ExtractYear('date'), month=ExtractMonth('date'))
        .values('year', 'month', 'type')
        .annotate(total=Sum('amount'))
        .order_by('year', 'month')
    )

    # 예시 결과:
    # [
    #     {'year': 2024, 'month': 1, 'type': 'income', 'total': 1000},
    #     {'year': 2024, 'month': 1, 'type': 'expense', 'total': 400},
    #     ...
    # ]
    buckets = {}
    for row in rows:
        key = (row['year'], row['month'])
        bucket = buckets.setdefault(key, {
            'month': f"{MONTH_NAMES[row['month'] - 1]} {row['year']}",
            'income': Decimal('0'),
            'expense': Decimal('0'),
        })
        bucket[row['type']] = row['total']

    logger.debug(f"월별 집계: user={user.id}, months={len(buckets)}")
    return [buckets[key] for key in sorted(buckets)]


def type_totals(user, date_from, date_to):
    """
    기간 전체의 유형별 합계

    Returns:
        {'income': Decimal, 'expense': Decimal}
    """
    require_user(user)

    qs = _owned_in_range(user, date_from, date_to)
    return {
        TYPE_INCOME: qs.income().aggregate(total=Sum('amount'))['total'] or Decimal('0'),
        TYPE_EXPENSE: qs.expense().aggregate(total=Sum('amount'))['total'] or Decimal('0'),
    }
