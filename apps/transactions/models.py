from django.db import models
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError

from apps.core.auth import require_user
from apps.core.models import TimeStampedModel


# 상수
TYPE_INCOME = 'income'
TYPE_EXPENSE = 'expense'

# 금액 저장 자릿수 (소수점 이하 6자리까지, 그 이하는 반올림)
AMOUNT_MAX_DIGITS = 24
AMOUNT_DECIMAL_PLACES = 6


def validate_positive_amount(value):
    """금액은 0 보다 커야 함 (0.01 미만의 양수도 허용)"""
    if value is not None and value <= 0:
        raise ValidationError('Ensure this value is greater than 0.', code='min_value')


class TransactionQuerySet(models.QuerySet):
    """Transaction 전용 QuerySet (헬퍼 메서드)"""
    def owned_by(self, user): return self.filter(user=require_user(user))
    def income(self): return self.filter(type=TYPE_INCOME)
    def expense(self): return self.filter(type=TYPE_EXPENSE)
    def by_date_range(self, start, end): return self.filter(date__gte=start, date__lte=end)


class Transaction(TimeStampedModel):
    """거래 내역 (핵심 모델)"""
    TYPE_CHOICES = [(TYPE_INCOME, 'Income'), (TYPE_EXPENSE, 'Expense')]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='transactions', db_index=True)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, db_index=True)
    # 카테고리는 자유 입력 라벨 (없으면 NULL, 집계 시 NULL 도 하나의 그룹)
    category = models.CharField(max_length=50, null=True, blank=True)
    amount = models.DecimalField(
        max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES,
        validators=[validate_positive_amount],
    )
    description = models.TextField(blank=True, default='')
    date = models.DateTimeField(db_index=True)

    objects = TransactionQuerySet.as_manager()

    class Meta:
        db_table = 'transactions'
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['user', '-date'], name='tx_user_date_idx'),
            models.Index(fields=['user', 'type', '-date'], name='tx_user_type_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='transaction_amount_positive'),
            models.CheckConstraint(
                condition=models.Q(type__in=[TYPE_INCOME, TYPE_EXPENSE]),
                name='transaction_type_valid'
            ),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.amount:,.2f} ({self.date.date()})"

    @property
    def signed_amount(self):
        """수입은 +, 지출은 - 부호를 붙인 금액"""
        return self.amount if self.type == TYPE_INCOME else -self.amount
