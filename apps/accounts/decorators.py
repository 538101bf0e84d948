# Decorators in this file:
# 1. backend_required - refuse writes while the backend is unconfigured
# 2. ajax_required - only AJAX requests allowed
# ==============================================================================

import logging
from functools import wraps

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger(__name__)


def backend_required(redirect_to='core:dashboard'):
    """
    Decorator: block POST requests in demo mode (no backend configured)

    GET requests still render, so forms can be shown disabled.

    Usage:
        @backend_required('enquiries:enquiry_list')
        def enquiry_create_view(request):
            ...
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if request.method == 'POST' and not request.crm.configured:
                logger.warning(f"Refused {request.path}: backend not configured")
                messages.error(
                    request,
                    _('The backend is not configured. Forms are disabled in demo mode.')
                )
                return redirect(redirect_to)
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


def ajax_required(view_func):
    """
    Decorator: only AJAX requests (X-Requested-With or JSON Accept header)
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        is_ajax = (
            request.headers.get('X-Requested-With') == 'XMLHttpRequest'
            or 'application/json' in request.headers.get('Accept', '')
        )
        if not is_ajax:
            return JsonResponse({'success': False, 'error': 'AJAX request required'}, status=400)
        return view_func(request, *args, **kwargs)

    return wrapper
