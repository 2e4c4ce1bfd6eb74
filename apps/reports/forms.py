from django import forms

from apps.transactions.forms import TransactionFilterForm

REPORT_MONTHLY = 'monthly'
REPORT_CATEGORY = 'category'
REPORT_DETAILED = 'detailed'
REPORT_TREND = 'trend'

REPORT_TYPE_CHOICES = [
    (REPORT_MONTHLY, 'Monthly Summary'),
    (REPORT_CATEGORY, 'Category Breakdown'),
    (REPORT_DETAILED, 'Detailed Transactions'),
    (REPORT_TREND, 'Trend Analysis'),
]


class ReportFilterForm(TransactionFilterForm):
    """리포트 설정 (유형 + 기간), 잘못된 값은 기본값으로 대체"""
    report_type = forms.ChoiceField(choices=REPORT_TYPE_CHOICES, required=False, label='Report type')

    def get_report_type(self):
        self.is_valid()
        cleaned = getattr(self, 'cleaned_data', {})
        return cleaned.get('report_type') or REPORT_MONTHLY
