from django.urls import path
from . import views

app_name = 'enquiries'

urlpatterns = [
    path('', views.enquiry_list_view, name='enquiry_list'),
    path('new/', views.enquiry_create_view, name='enquiry_create'),
    path('export/', views.enquiry_export_view, name='enquiry_export'),
    path('<uuid:pk>/', views.enquiry_detail_view, name='enquiry_detail'),
    path('<uuid:pk>/edit/', views.enquiry_edit_view, name='enquiry_edit'),
]
