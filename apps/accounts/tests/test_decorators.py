"""
Tests for Custom Decorators
============================

Test Cases:
1. backend_required decorator
2. ajax_required decorator
"""

from types import SimpleNamespace

from django.contrib.messages import get_messages
from django.contrib.messages.middleware import MessageMiddleware
from django.contrib.sessions.middleware import SessionMiddleware
from django.http import HttpResponse
from django.test import TestCase, RequestFactory

from apps.accounts.decorators import ajax_required, backend_required


class BackendRequiredDecoratorTest(TestCase):
    """Test @backend_required decorator"""

    def setUp(self):
        self.factory = RequestFactory()

        @backend_required('enquiries:enquiry_list')
        def dummy_view(request):
            return HttpResponse('Success')

        self.dummy_view = dummy_view

    def _add_middleware(self, request, configured):
        """Helper to add required middleware"""
        middleware = SessionMiddleware(lambda x: None)
        middleware.process_request(request)
        request.session.save()

        middleware = MessageMiddleware(lambda x: None)
        middleware.process_request(request)

        request.crm = SimpleNamespace(configured=configured)

    def test_post_allowed_when_configured(self):
        request = self.factory.post('/dashboard/enquiries/new/')
        self._add_middleware(request, configured=True)

        response = self.dummy_view(request)

        self.assertEqual(response.status_code, 200)

    def test_post_refused_in_demo_mode(self):
        request = self.factory.post('/dashboard/enquiries/new/')
        self._add_middleware(request, configured=False)

        response = self.dummy_view(request)

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, '/dashboard/enquiries/')
        messages = [str(m) for m in get_messages(request)]
        self.assertTrue(any('demo mode' in m for m in messages))

    def test_get_allowed_in_demo_mode(self):
        """Forms still render (disabled) without a backend"""
        request = self.factory.get('/dashboard/enquiries/new/')
        self._add_middleware(request, configured=False)

        response = self.dummy_view(request)

        self.assertEqual(response.status_code, 200)


class AjaxRequiredDecoratorTest(TestCase):
    """Test @ajax_required decorator"""

    def setUp(self):
        self.factory = RequestFactory()

        @ajax_required
        def dummy_view(request):
            return HttpResponse('Success')

        self.dummy_view = dummy_view

    def test_plain_request_rejected(self):
        response = self.dummy_view(self.factory.get('/dashboard/customers/lookup/'))

        self.assertEqual(response.status_code, 400)

    def test_ajax_request_allowed(self):
        request = self.factory.get('/dashboard/customers/lookup/', HTTP_X_REQUESTED_WITH='XMLHttpRequest')

        response = self.dummy_view(request)

        self.assertEqual(response.status_code, 200)
