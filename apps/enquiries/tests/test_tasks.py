"""
Reminder Task Tests
===================
"""

import datetime
from unittest.mock import patch

from django.test import TestCase, override_settings
from django.utils import timezone

from apps.accounts.tests.mixins import DATABASE_GATEWAY
from apps.enquiries.pipeline import create_enquiry
from apps.enquiries.tasks import send_reminder_notifications
from apps.gateway.backends.database import DatabaseGateway
from apps.gateway.exceptions import BackendError


@override_settings(CRM_GATEWAY_BACKEND=DATABASE_GATEWAY)
class SendReminderNotificationsTest(TestCase):

    def setUp(self):
        gateway = DatabaseGateway()
        today = timezone.localdate()

        def data(phone, status='Lead', reminder_date=None):
            return {
                'date': today,
                'segment': 'Agri',
                'customer_name': f'Customer {phone}',
                'phone': phone,
                'location': 'Raipur',
                'requirement_details': 'seeds',
                'status': status,
                'remarks': '',
                'reminder_date': reminder_date,
            }

        create_enquiry(gateway, data('1', reminder_date=today), 'Amit')
        create_enquiry(gateway, data('2', status='Quote', reminder_date=today - datetime.timedelta(days=2)), 'Prateek')
        create_enquiry(gateway, data('3', reminder_date=today + datetime.timedelta(days=1)), 'Amit')
        create_enquiry(gateway, data('4', status='Won', reminder_date=today), 'Amit')
        create_enquiry(gateway, data('5'), 'Amit')

    def test_due_reminders_logged(self):
        with self.assertLogs('apps.enquiries.tasks', level='INFO') as logs:
            result = send_reminder_notifications()

        self.assertEqual(result, '2 reminders logged.')
        self.assertEqual(len(logs.records), 2)
        self.assertTrue(any('Reminder for Prateek' in line for line in logs.output))

    @patch('apps.enquiries.tasks.fetch_enquiries')
    def test_backend_failure_reported(self, mock_fetch):
        mock_fetch.side_effect = BackendError('Connection error - could not reach backend')

        result = send_reminder_notifications()

        self.assertEqual(result, 'Reminder check failed: Connection error - could not reach backend')
