"""
Session context and route guard middleware

Order in settings.MIDDLEWARE matters: both need SessionMiddleware, and the
guard needs the context.
"""

import logging
from urllib.parse import urlencode

from django.conf import settings
from django.http import HttpResponse
from django.shortcuts import redirect

from apps.gateway.utils import get_gateway
from .session import SessionContext

logger = logging.getLogger(__name__)


class SessionContextMiddleware:
    """Attach a SessionContext to every request as request.crm"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.crm = SessionContext(request, get_gateway())
        return self.get_response(request)


class RouteGuardMiddleware:
    """
    Redirect before the view runs:

    - no session + protected path  -> login page (401 for ?partial=1 fragments)
    - session    + login page      -> dashboard
    - backend unconfigured/unreachable, or any error -> let the request through
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.check(request)
        if response is not None:
            return response
        return self.get_response(request)

    @staticmethod
    def is_protected(path):
        for prefix in settings.CRM_PROTECTED_PATHS:
            if path.startswith(prefix) or path == prefix.rstrip('/'):
                return True
        return False

    @staticmethod
    def is_login(path):
        return path.rstrip('/') == settings.LOGIN_URL.rstrip('/')

    def check(self, request):
        path = request.path_info
        protected = self.is_protected(path)
        login_page = self.is_login(path)

        if not (protected or login_page):
            return None

        try:
            context = request.crm
            if not context.configured:
                return None

            user = context.user
            if context.backend_unreachable:
                logger.warning(f"Backend unreachable, allowing {path}")
                return None

            if user is None and protected and request.GET.get('partial'):
                # Fragment fetches must not receive the login page as rows
                logger.debug(f"No session, refusing fragment {path}")
                return HttpResponse(status=401)

            if user is None and protected:
                logger.debug(f"No session, redirecting {path} to login")
                return redirect(f"{settings.LOGIN_URL}?{urlencode({'next': request.get_full_path()})}")

            if user is not None and login_page:
                logger.debug("Session exists, redirecting to dashboard")
                return redirect(settings.LOGIN_REDIRECT_URL)

        except Exception:
            logger.exception(f"Route guard failed for {path}, allowing request")

        return None
