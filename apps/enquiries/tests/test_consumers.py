"""
Live Enquiry Feed Tests
=======================

Test Coverage:
1. EnquiryFeedConsumer - session check, group membership
2. broadcast_enquiry_change - row_written -> channel group
"""

from unittest.mock import AsyncMock, MagicMock, patch

from asgiref.sync import sync_to_async
from channels.testing import WebsocketCommunicator
from django.test import SimpleTestCase, override_settings

from apps.accounts.session import SESSION_KEY
from apps.accounts.tests.mixins import DATABASE_GATEWAY
from apps.enquiries.consumers import EnquiryFeedConsumer
from apps.enquiries.signals import broadcast_enquiry_change

IN_MEMORY_LAYER = {'default': {'BACKEND': 'channels.layers.InMemoryChannelLayer'}}

ROW = {'id': 'e1', 'status': 'Quote', 'assigned_to': 'Amit'}


def feed_with_session(session):
    """Consumer app with a ready-made session in its scope"""
    consumer = EnquiryFeedConsumer.as_asgi()

    async def app(scope, receive, send):
        return await consumer(dict(scope, session=session), receive, send)

    return app


@override_settings(CRM_GATEWAY_BACKEND=DATABASE_GATEWAY, CHANNEL_LAYERS=IN_MEMORY_LAYER)
class EnquiryFeedConsumerTest(SimpleTestCase):
    # channels closes stale DB connections on each message; allow it to touch the connection
    databases = {'default'}

    async def test_signed_in_client_receives_changes(self):
        communicator = WebsocketCommunicator(
            feed_with_session({SESSION_KEY: {'access_token': 'token'}}),
            '/ws/enquiries/'
        )
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        await sync_to_async(broadcast_enquiry_change)(sender=None, table='enquiries', action='update', row=ROW)

        message = await communicator.receive_json_from()
        self.assertEqual(message, {'action': 'update', 'id': 'e1', 'status': 'Quote', 'assigned_to': 'Amit'})

        await communicator.disconnect()

    async def test_customer_writes_not_broadcast(self):
        communicator = WebsocketCommunicator(
            feed_with_session({SESSION_KEY: {'access_token': 'token'}}),
            '/ws/enquiries/'
        )
        await communicator.connect()

        await sync_to_async(broadcast_enquiry_change)(sender=None, table='customers', action='insert', row={'id': 'c1'})

        self.assertTrue(await communicator.receive_nothing())
        await communicator.disconnect()

    async def test_client_without_session_refused(self):
        communicator = WebsocketCommunicator(feed_with_session({}), '/ws/enquiries/')

        connected, _ = await communicator.connect()

        self.assertFalse(connected)


class BroadcastFailureTest(SimpleTestCase):

    @patch('apps.enquiries.signals.get_channel_layer')
    def test_dead_channel_layer_is_logged(self, mock_layer):
        mock_layer.return_value = MagicMock(group_send=AsyncMock(side_effect=ConnectionError('redis down')))

        with self.assertLogs('apps.enquiries.signals', level='ERROR'):
            broadcast_enquiry_change(sender=None, table='enquiries', action='insert', row=ROW)
