# WSGI configuration
#
# Serves HTTP only (gunicorn config.wsgi:application). The enquiry list's
# live updates need the ASGI application in asgi.py.
# ==============================================================================

import os
from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_wsgi_application()
