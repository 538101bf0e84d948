"""
Helpers for getting the configured gateway
"""
import functools
import logging

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def get_gateway():
    """
    Process-wide gateway built from settings.CRM_GATEWAY_BACKEND

    Returns:
        An unbound gateway; use gateway.bind(session) to act for a visitor
    """
    backend_class = import_string(settings.CRM_GATEWAY_BACKEND)
    gateway = backend_class()
    logger.info(
        f"Gateway {backend_class.__name__} loaded (configured={gateway.is_configured})"
    )
    return gateway


def is_backend_configured():
    return get_gateway().is_configured
