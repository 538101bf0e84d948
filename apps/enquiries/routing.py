from django.urls import path

from . import consumers

websocket_urlpatterns = [
    path('ws/enquiries/', consumers.EnquiryFeedConsumer.as_asgi()),
]
