from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from apps.core.urls import api_urlpatterns
from apps.core.views import home_view

# Main URL Configuration
# Everything under /dashboard/ is behind the route guard (CRM_PROTECTED_PATHS)

urlpatterns = [
    path('', home_view, name='home'),
    path('admin/', admin.site.urls),
    path('', include('apps.accounts.urls')),
    path('dashboard/', include('apps.core.urls')),
    path('dashboard/enquiries/', include('apps.enquiries.urls')),
    path('dashboard/customers/', include('apps.customers.urls')),
    path('api/', include((api_urlpatterns, 'api'))),
]

if settings.DEBUG:
    # Static files (CSS, JS, images)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
