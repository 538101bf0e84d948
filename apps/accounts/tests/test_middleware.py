"""
Route Guard Tests
=================

Decision table of RouteGuardMiddleware.check():

| session      | path          | result             |
|--------------|---------------|--------------------|
| none         | /dashboard/*  | redirect to login  |
| present      | /login/       | redirect dashboard |
| unconfigured | any           | allow              |
| unreachable  | any           | allow              |
| check raises | any           | allow              |
"""

from django.http import HttpResponse
from django.test import SimpleTestCase, RequestFactory

from apps.accounts.middleware import RouteGuardMiddleware

IDENTITY = {'id': 'u1', 'email': 'amit@example.com'}


class StubContext:

    def __init__(self, user=None, configured=True, unreachable=False):
        self._user = user
        self.configured = configured
        self.backend_unreachable = unreachable
        self.user_checked = False

    @property
    def user(self):
        self.user_checked = True
        return self._user


class BrokenContext(StubContext):

    @property
    def user(self):
        raise RuntimeError('session store down')


class RouteGuardMiddlewareTest(SimpleTestCase):

    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = RouteGuardMiddleware(lambda request: HttpResponse('view'))

    def _request(self, path, context):
        request = self.factory.get(path)
        request.crm = context
        return request

    def test_protected_path_without_session_redirects_to_login(self):
        response = self.middleware(self._request('/dashboard/enquiries/', StubContext()))

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, '/login/?next=%2Fdashboard%2Fenquiries%2F')

    def test_fragment_without_session_is_refused(self):
        response = self.middleware(self._request('/dashboard/enquiries/?partial=1', StubContext()))

        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.has_header('Location'))

    def test_dashboard_root_without_slash_is_protected(self):
        response = self.middleware(self._request('/dashboard', StubContext()))

        self.assertEqual(response.status_code, 302)

    def test_protected_path_with_session_allowed(self):
        response = self.middleware(self._request('/dashboard/', StubContext(user=IDENTITY)))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b'view')

    def test_login_page_with_session_redirects_to_dashboard(self):
        response = self.middleware(self._request('/login/', StubContext(user=IDENTITY)))

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, '/dashboard/')

    def test_login_page_without_session_allowed(self):
        response = self.middleware(self._request('/login/', StubContext()))

        self.assertEqual(response.status_code, 200)

    def test_unconfigured_backend_allows_everything(self):
        context = StubContext(configured=False)

        response = self.middleware(self._request('/dashboard/', context))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(context.user_checked)

    def test_unreachable_backend_fails_open(self):
        response = self.middleware(self._request('/dashboard/', StubContext(unreachable=True)))

        self.assertEqual(response.status_code, 200)

    def test_error_during_check_fails_open(self):
        with self.assertLogs('apps.accounts.middleware', level='ERROR'):
            response = self.middleware(self._request('/dashboard/', BrokenContext()))

        self.assertEqual(response.status_code, 200)

    def test_public_paths_not_checked(self):
        context = StubContext()

        response = self.middleware(self._request('/api/env-check/', context))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(context.user_checked)
