"""
This module talks to a Supabase-style backend over HTTP.

Rows go through PostgREST ({BACKEND_URL}/rest/v1/<table>), sessions through
GoTrue ({BACKEND_URL}/auth/v1/...). Every request carries the project's
public key in the `apikey` header and a bearer token: the visitor's access
token when the gateway is bound to a session, the public key otherwise.

Features:
- Equality filters and a single sort key on selects
- Insert/update returning the written row
- Password sign-in, sign-out, current user, token refresh
- Compensating deletes when a transaction block fails
"""

import logging
from typing import Dict, List, Optional

import requests
from django.conf import settings

from ..base import BackendSession, BaseGateway
from ..exceptions import AuthError, BackendError, NotFoundError

logger = logging.getLogger(__name__)


class RestGateway(BaseGateway):

    def __init__(self, session: Optional[BackendSession] = None, base_url: Optional[str] = None,
                 api_key: Optional[str] = None, timeout: Optional[int] = None):
        super().__init__(session)
        self.base_url = (base_url if base_url is not None else settings.BACKEND_URL).rstrip('/')
        self.api_key = api_key if api_key is not None else settings.BACKEND_KEY
        self.timeout = timeout or settings.BACKEND_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url) and bool(self.api_key) and self.base_url.startswith('http')

    def _get_headers(self, token: Optional[str] = None, prefer: Optional[str] = None) -> Dict[str, str]:

        if token is None:
            token = self.session.access_token if self.session else self.api_key

        headers = {
            'Content-Type': 'application/json',
            'apikey': self.api_key,
            'Authorization': f'Bearer {token}',
        }
        if prefer:
            headers['Prefer'] = prefer
        return headers

    def _make_request(self, method: str, path: str, params: Optional[Dict] = None, data=None,
                      token: Optional[str] = None, prefer: Optional[str] = None):

        if not self.is_configured:
            raise BackendError('Backend is not configured')

        url = f"{self.base_url}{path}"

        try:
            logger.debug(f"Making {method} request to {url}")
            response = requests.request(
                method,
                url,
                headers=self._get_headers(token=token, prefer=prefer),
                params=params,
                json=data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            error_message = "Request timeout - backend did not respond"
            logger.error(error_message)
            raise BackendError(error_message)
        except requests.exceptions.ConnectionError:
            error_message = "Connection error - could not reach backend"
            logger.error(error_message)
            raise BackendError(error_message)
        except requests.exceptions.RequestException as e:
            error_message = f"Request error: {e}"
            logger.error(error_message)
            raise BackendError(error_message)

        logger.debug(f"Response status: {response.status_code}")

        if response.status_code in (200, 201, 204):
            if response.status_code == 204 or not response.content:
                return None
            return response.json()

        error_message = self._error_message(response)
        logger.error(f"Backend error on {method} {path}: {error_message}")

        if response.status_code in (400, 401, 403) and path.startswith('/auth/'):
            raise AuthError(error_message, status_code=response.status_code)
        raise BackendError(error_message, status_code=response.status_code)

    @staticmethod
    def _error_message(response) -> str:
        error_message = f"Backend returned {response.status_code}"
        try:
            error_data = response.json()
        except ValueError:
            return response.text or error_message
        if isinstance(error_data, dict):
            for key in ('error_description', 'msg', 'message', 'error'):
                if error_data.get(key):
                    return str(error_data[key])
        return error_message

    # ROWS

    @staticmethod
    def _filter_params(filters: Dict) -> Dict[str, str]:
        params = {}
        for column, value in filters.items():
            params[column] = 'is.null' if value is None else f'eq.{value}'
        return params

    def _select(self, table, filters, order_by, descending) -> List[Dict]:
        params = {'select': '*'}
        params.update(self._filter_params(filters))
        if order_by:
            params['order'] = f"{order_by}.{'desc' if descending else 'asc'}"
        return self._make_request('GET', f'/rest/v1/{table}', params=params) or []

    def _get(self, table, pk) -> Dict:
        rows = self._select(table, {'id': pk}, None, False)
        if not rows:
            raise NotFoundError(table, pk)
        return rows[0]

    def _insert(self, table, values) -> Dict:
        rows = self._make_request(
            'POST',
            f'/rest/v1/{table}',
            params={'select': '*'},
            data=values,
            prefer='return=representation',
        )
        if not rows:
            raise BackendError(f'Insert into {table} returned no row')
        return rows[0]

    def _update(self, table, pk, values) -> Dict:
        rows = self._make_request(
            'PATCH',
            f'/rest/v1/{table}',
            params={'id': f'eq.{pk}', 'select': '*'},
            data=values,
            prefer='return=representation',
        )
        if not rows:
            raise NotFoundError(table, pk)
        return rows[0]

    def _compensate(self, journal):
        for table, action, row in journal:
            if action != 'insert':
                continue
            try:
                self._make_request('DELETE', f'/rest/v1/{table}', params={'id': f"eq.{row['id']}"})
                logger.warning(f"Rolled back {table} row {row['id']}")
            except BackendError as e:
                logger.error(f"Could not roll back {table} row {row['id']}: {e.message}")

    # AUTH

    @staticmethod
    def _identity(user: Dict) -> Dict:
        return {'id': user.get('id', ''), 'email': user.get('email', '')}

    def _session_from_tokens(self, data: Dict) -> BackendSession:
        return BackendSession(
            access_token=data['access_token'],
            refresh_token=data.get('refresh_token', ''),
            user=self._identity(data.get('user') or {}),
        )

    def sign_in(self, email: str, password: str) -> BackendSession:
        logger.info(f"Signing in {email}")
        data = self._make_request(
            'POST',
            '/auth/v1/token',
            params={'grant_type': 'password'},
            data={'email': email, 'password': password},
            token=self.api_key,
        )
        if not data or not data.get('access_token'):
            raise AuthError('Invalid login credentials')
        return self._session_from_tokens(data)

    def sign_out(self, session: BackendSession) -> None:
        try:
            self._make_request('POST', '/auth/v1/logout', token=session.access_token)
        except AuthError:
            # token already expired; nothing to revoke
            pass

    def get_user(self, session: BackendSession) -> Optional[Dict]:
        data = self._make_request('GET', '/auth/v1/user', token=session.access_token)
        return self._identity(data) if data else None

    def refresh(self, session: BackendSession) -> BackendSession:
        if not session.refresh_token:
            raise AuthError('Session expired')
        data = self._make_request(
            'POST',
            '/auth/v1/token',
            params={'grant_type': 'refresh_token'},
            data={'refresh_token': session.refresh_token},
            token=self.api_key,
        )
        if not data or not data.get('access_token'):
            raise AuthError('Session expired')
        return self._session_from_tokens(data)
