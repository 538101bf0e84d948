import logging

from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# Sent by SessionContext after sign-in and sign-out.
# Arguments: request, user (identity dict or None), action ('sign_in' or 'sign_out')
session_changed = Signal()


@receiver(session_changed)
def log_session_change(sender, request, user, action, **kwargs):
    email = (user or {}).get('email', 'unknown')
    if action == 'sign_in':
        logger.info(f"Signed in: {email} from {get_client_ip(request)}")
    else:
        logger.info(f"Signed out: {email}")


def get_client_ip(request):

    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        # First address in the proxy chain is the client
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
