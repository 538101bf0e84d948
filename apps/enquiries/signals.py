import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.dispatch import receiver

from apps.gateway.base import ENQUIRIES
from apps.gateway.signals import row_written

logger = logging.getLogger(__name__)

# Channels group every open enquiry list joins
ENQUIRY_GROUP = 'enquiries'


@receiver(row_written)
def broadcast_enquiry_change(sender, table, action, row, **kwargs):
    """Tell open enquiry lists that an enquiry was inserted or updated"""

    if table != ENQUIRIES:
        return

    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    try:
        async_to_sync(channel_layer.group_send)(ENQUIRY_GROUP, {
            'type': 'enquiry.changed',
            'action': action,
            'id': row.get('id'),
            'status': row.get('status'),
            'assigned_to': row.get('assigned_to'),
        })
    except Exception as e:
        # The write itself succeeded; a dead channel layer only costs live updates
        logger.error(f"Could not broadcast enquiry {row.get('id')}: {e}")
