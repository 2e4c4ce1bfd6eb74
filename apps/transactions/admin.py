from django.contrib import admin
from django.utils.html import format_html

from .models import Transaction, TYPE_INCOME


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """
    거래 내역 관리
    """
    list_display = [
        'date',
        'get_type_display_colored',
        'get_amount_display',
        'category',
        'user',
    ]

    date_hierarchy = 'date'

    list_filter = ['type']

    search_fields = ['category', 'description', 'user__username']

    list_select_related = ['user']

    readonly_fields = ['created_at', 'updated_at']

    @admin.display(description='Type', ordering='type')
    def get_type_display_colored(self, obj):
        if obj.type == TYPE_INCOME:
            return format_html('<span style="color:blue; font-weight:bold;">{}</span>', obj.get_type_display())
        return format_html('<span style="color:red; font-weight:bold;">{}</span>', obj.get_type_display())

    @admin.display(description='Amount', ordering='amount')
    def get_amount_display(self, obj):
        # 수입 +, 지출 -
        sign = '+' if obj.signed_amount > 0 else '-'
        formatted = f"{sign}${obj.amount:,.2f}"
        if obj.signed_amount > 0:
            return format_html('<span style="color:blue;">{}</span>', formatted)
        return format_html('<span style="color:red;">{}</span>', formatted)
