from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    path('', views.report, name='report'),
    path('export/<str:fmt>/', views.report_export, name='report_export'),
]
