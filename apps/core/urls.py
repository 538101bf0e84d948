from django.urls import path
from . import views


app_name = 'core'

urlpatterns = [
    path('', views.dashboard_view, name='dashboard'),
    path('select-staff/', views.select_staff_view, name='select_staff'),
]

# Mounted under /api/ with the "api" namespace
api_urlpatterns = [
    path('env-check/', views.env_check_view, name='env_check'),
    path('test-backend/', views.test_backend_view, name='test_backend'),
    path('check-enquiries/', views.check_enquiries_view, name='check_enquiries'),
]
