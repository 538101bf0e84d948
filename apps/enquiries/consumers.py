"""
WebSocket feed of enquiry changes

The enquiry list page opens /ws/enquiries/ and re-fetches its rows whenever
an enquiry.changed event arrives.
"""

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from apps.accounts.session import SESSION_KEY
from apps.gateway.utils import is_backend_configured
from .signals import ENQUIRY_GROUP

logger = logging.getLogger(__name__)


class EnquiryFeedConsumer(AsyncJsonWebsocketConsumer):

    async def connect(self):
        if not await self.has_session():
            logger.debug("Refusing enquiry feed: no backend session")
            await self.close()
            return

        await self.channel_layer.group_add(ENQUIRY_GROUP, self.channel_name)
        await self.accept()

    async def disconnect(self, code):
        await self.channel_layer.group_discard(ENQUIRY_GROUP, self.channel_name)

    async def enquiry_changed(self, event):
        await self.send_json({
            'action': event['action'],
            'id': event['id'],
            'status': event.get('status'),
            'assigned_to': event.get('assigned_to'),
        })

    @database_sync_to_async
    def has_session(self):
        # Demo mode has no sessions to check
        if not is_backend_configured():
            return True
        session = self.scope.get('session')
        return bool(session is not None and session.get(SESSION_KEY))
