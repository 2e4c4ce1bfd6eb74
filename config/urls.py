from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='reports:report', permanent=False), name='home'),

    path('admin/', admin.site.urls),
    # 로그인/로그아웃은 django.contrib.auth 기본 뷰 사용
    path('accounts/', include('django.contrib.auth.urls')),
    path('transactions/', include('apps.transactions.urls')),
    path('api/transactions/', include('apps.transactions.api_urls')),
    path('reports/', include('apps.reports.urls')),
]
