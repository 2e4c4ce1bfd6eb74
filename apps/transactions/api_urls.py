from django.urls import path
from . import api

app_name = 'transactions_api'

urlpatterns = [
    path('', api.transaction_collection, name='collection'),
    path('<int:pk>/', api.transaction_item, name='item'),

    # 집계
    path('summary/category/', api.category_summary, name='category_summary'),
    path('summary/monthly/', api.monthly_summary, name='monthly_summary'),
]
