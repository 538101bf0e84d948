# ASGI configuration
#
# HTTP goes to Django, WebSocket connections to the Channels consumers.
# Run: daphne config.asgi:application --bind 0.0.0.0 --port 8000
# ==============================================================================

import os
from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import AllowedHostsOriginValidator
from channels.sessions import SessionMiddlewareStack

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

# Initialize Django ASGI application early
# This ensures the AppRegistry is populated before importing code that may import ORM models
django_asgi_app = get_asgi_application()

# Import routing after Django setup
from apps.enquiries.routing import websocket_urlpatterns  # noqa: E402


application = ProtocolTypeRouter({
    'http': django_asgi_app,

    # SessionMiddlewareStack exposes the Django session as scope['session'];
    # the feed consumer checks it for a backend session
    'websocket': AllowedHostsOriginValidator(
        SessionMiddlewareStack(
            URLRouter(websocket_urlpatterns)
        )
    ),
})
