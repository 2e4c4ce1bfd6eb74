from datetime import date, datetime
from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone

from .models import AMOUNT_DECIMAL_PLACES, AMOUNT_MAX_DIGITS, Transaction, validate_positive_amount
from .services import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, UPDATABLE_FIELDS, month_bounds, quantize_amount


class DateBoundField(forms.DateTimeField):
    """
    기간 경계 입력 필드

    - '2024-01-31'          → date (하루 전체로 해석됨)
    - '2024-01-31T18:00:00' → datetime (그 시각 그대로)
    """

    def to_python(self, value):
        if isinstance(value, datetime):
            return super().to_python(value)
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return date.fromisoformat(value.strip())
            except ValueError:
                pass
        return super().to_python(value)


class AmountField(forms.DecimalField):
    """금액 입력 필드 (저장 자릿수보다 긴 소수는 거절하지 않고 반올림)"""

    def to_python(self, value):
        return quantize_amount(super().to_python(value))


class DateRangeForm(forms.Form):
    """조회 기간 (from ~ to, 양 끝 포함)"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # 'from' 은 파이썬 예약어라 클래스 속성으로 선언할 수 없음
        self.fields['from'] = DateBoundField()
        self.fields['to'] = DateBoundField()


class TransactionListForm(DateRangeForm):
    limit = forms.IntegerField(required=False, min_value=1, max_value=MAX_PAGE_SIZE)
    offset = forms.IntegerField(required=False, min_value=0)

    def clean_limit(self):
        limit = self.cleaned_data.get('limit')
        return DEFAULT_PAGE_SIZE if limit is None else limit

    def clean_offset(self):
        offset = self.cleaned_data.get('offset')
        return 0 if offset is None else offset


class CategoryBreakdownForm(DateRangeForm):
    type = forms.ChoiceField(choices=Transaction.TYPE_CHOICES)


class TransactionForm(forms.ModelForm):
    """거래 입력/수정 폼"""

    class Meta:
        model = Transaction
        fields = ['type', 'category', 'amount', 'description', 'date']
        widgets = {
            'date': forms.DateTimeInput(attrs={'type': 'datetime-local'}, format='%Y-%m-%dT%H:%M'),
            'description': forms.Textarea(attrs={'rows': 3}),
            'amount': forms.NumberInput(attrs={'step': 'any', 'min': '0'}),
            'category': forms.TextInput(attrs={'placeholder': 'e.g. Food', 'list': 'category-list'}),
        }
        field_classes = {
            'amount': AmountField,
        }
        labels = {
            'type': 'Type',
            'category': 'Category',
            'amount': 'Amount',
            'description': 'Description',
            'date': 'Date',
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['category'].required = False
        self.fields['description'].required = False


class TransactionUpdateForm(forms.Form):
    """
    부분 수정 폼 (JSON API 용)

    보낸 키만 변경 대상입니다. get_changes() 가 "보낸 필드 → 값" 만 돌려줍니다.
        {"amount": 500}            → {'amount': Decimal('500')}
        {"category": null}         → {'category': None}  (카테고리 제거)
        {}                         → {}                  (변경 없음)
    """
    type = forms.ChoiceField(choices=Transaction.TYPE_CHOICES, required=False)
    category = forms.CharField(max_length=50, required=False, empty_value=None)
    amount = AmountField(
        max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES,
        validators=[validate_positive_amount], required=False,
    )
    description = forms.CharField(required=False)
    date = forms.DateTimeField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        unknown = sorted(set(self.data) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown or read-only fields: {', '.join(unknown)}")
        return cleaned_data

    def get_changes(self):
        return {
            name: self.cleaned_data.get(name)
            for name in UPDATABLE_FIELDS
            if name in self.data
        }


class TransactionFilterForm(forms.Form):
    """
    화면용 기간 필터 (GET 쿼리스트링)

    값이 없거나 형식이 잘못된 날짜는 이번 달 첫날/마지막날로 대체됩니다.
    """
    date_from = forms.DateField(
        required=False, label='From',
        widget=forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
    )
    date_to = forms.DateField(
        required=False, label='To',
        widget=forms.DateInput(attrs={'type': 'date'}, format='%Y-%m-%d'),
    )

    def get_date_range(self):
        default_from, default_to = month_bounds(timezone.localdate())
        # is_valid() 가 False 여도 통과한 필드는 cleaned_data 에 남아 있음
        self.is_valid()
        cleaned = getattr(self, 'cleaned_data', {})
        return (
            cleaned.get('date_from') or default_from,
            cleaned.get('date_to') or default_to,
        )
