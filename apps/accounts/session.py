"""
Per-request session context

SessionContextMiddleware attaches one SessionContext to every request as
`request.crm`. It holds the backend session stored in the Django session,
resolves the signed-in user on first access and hands views a gateway bound
to that session.
"""

import logging
from typing import Dict, Optional

from apps.core.utils import clear_selected_staff, get_selected_staff
from apps.gateway.base import BackendSession
from apps.gateway.exceptions import AuthError, BackendError
from .signals import session_changed

logger = logging.getLogger(__name__)

SESSION_KEY = 'backend_session'

_UNRESOLVED = object()


class SessionContext:

    def __init__(self, request, gateway):
        self.request = request
        self._gateway = gateway
        self.configured = gateway.is_configured
        self.backend_unreachable = False
        # Unconfigured backend: no user, no network calls
        self._user = _UNRESOLVED if self.configured else None

    def __repr__(self):
        return f'<SessionContext configured={self.configured} loading={self.loading}>'

    @property
    def backend_session(self) -> Optional[BackendSession]:
        return BackendSession.from_dict(self.request.session.get(SESSION_KEY))

    @property
    def loading(self) -> bool:
        return self._user is _UNRESOLVED

    @property
    def user(self) -> Optional[Dict]:
        if self._user is _UNRESOLVED:
            self._user = self._resolve_user()
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def gateway(self):
        """Gateway acting for the signed-in visitor"""
        return self._gateway.bind(self.backend_session)

    @property
    def selected_staff(self) -> Optional[str]:
        return get_selected_staff(self.request)

    def _store(self, session: BackendSession):
        self.request.session[SESSION_KEY] = session.as_dict()

    def _clear(self):
        self.request.session.pop(SESSION_KEY, None)

    def _resolve_user(self) -> Optional[Dict]:
        session = self.backend_session
        if session is None:
            return None

        try:
            return self._gateway.get_user(session)
        except AuthError:
            pass
        except BackendError as e:
            logger.error(f"Could not check session: {e.message}")
            self.backend_unreachable = True
            return None

        # Access token rejected - try the refresh token once
        try:
            refreshed = self._gateway.refresh(session)
        except AuthError:
            logger.info("Stored session expired, clearing it")
            self._clear()
            return None
        except BackendError as e:
            logger.error(f"Could not refresh session: {e.message}")
            self.backend_unreachable = True
            return None

        self._store(refreshed)
        return refreshed.user or None

    def sign_in(self, email: str, password: str) -> Dict:
        """
        Sign in with email and password

        Raises:
            AuthError: credentials rejected
            BackendError: backend not configured or unreachable
        """
        session = self._gateway.sign_in(email, password)

        # New session key on privilege change
        self.request.session.cycle_key()
        self._store(session)
        self._user = session.user

        session_changed.send(sender=self.__class__, request=self.request, user=session.user, action='sign_in')
        return session.user

    def sign_out(self):
        """Drop the backend session and the selected staff member"""
        session = self.backend_session
        user = session.user if session else None

        if session is not None and self.configured:
            try:
                self._gateway.sign_out(session)
            except BackendError as e:
                logger.warning(f"Backend sign-out failed: {e.message}")

        self._clear()
        clear_selected_staff(self.request)
        self._user = None

        session_changed.send(sender=self.__class__, request=self.request, user=user, action='sign_out')
