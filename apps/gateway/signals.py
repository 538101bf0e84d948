from django.core.signals import setting_changed
from django.dispatch import Signal, receiver

# Sent after a row is inserted or updated through a gateway.
# Arguments: table, action ('insert' or 'update'), row
row_written = Signal()

GATEWAY_SETTINGS = {'CRM_GATEWAY_BACKEND', 'BACKEND_URL', 'BACKEND_KEY', 'BACKEND_TIMEOUT'}


@receiver(setting_changed)
def reset_gateway(sender, setting, **kwargs):
    if setting in GATEWAY_SETTINGS:
        from .utils import get_gateway
        get_gateway.cache_clear()
