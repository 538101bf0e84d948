from django.urls import path
from . import views

app_name = 'customers'

urlpatterns = [
    path('', views.customer_list_view, name='customer_list'),
    path('new/', views.customer_create_view, name='customer_create'),
    path('lookup/', views.customer_lookup_view, name='customer_lookup'),
    path('<uuid:pk>/', views.customer_detail_view, name='customer_detail'),
]
