"""
Enquiry Pipeline Tests
======================

Test Coverage:
1. In-memory filters - assignee, status, search, due reminders
2. Pipeline stats
3. create_enquiry / update_enquiry against the database gateway
"""

import datetime

from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from apps.enquiries.choices import Status
from apps.enquiries.pipeline import (
    Enquiry, create_enquiry, due_reminders, enquiry_values, fetch_customer_enquiries,
    fetch_enquiries, filter_by_assignee, filter_by_status, pipeline_stats,
    search_enquiries, update_enquiry,
)
from apps.gateway.backends.database import DatabaseGateway
from apps.gateway.exceptions import BackendError
from apps.gateway.models import Customer, Enquiry as EnquiryRow


def make_enquiry(pk, **fields):
    row = {
        'id': pk,
        'date': '2024-01-10',
        'segment': 'Agri',
        'customer_name': 'Test Co',
        'phone': '9999999999',
        'location': 'Raipur',
        'requirement_details': 'seeds',
        'status': 'Lead',
        'assigned_to': 'Amit',
        'created_at': '2024-01-10T10:00:00+00:00',
    }
    row.update(fields)
    return Enquiry.from_row(row)


def scenario_data(**overrides):
    data = {
        'date': datetime.date(2024, 1, 10),
        'segment': 'Agri',
        'customer_name': 'Test Co',
        'phone': '9999999999',
        'location': 'Raipur',
        'requirement_details': 'seeds',
        'status': 'Lead',
        'remarks': '',
        'reminder_date': None,
    }
    data.update(overrides)
    return data


class EnquiryFromRowTest(SimpleTestCase):

    def test_parses_dates(self):
        enquiry = make_enquiry('e1', reminder_date='2024-01-15', updated_at=None)

        self.assertEqual(enquiry.date, datetime.date(2024, 1, 10))
        self.assertEqual(enquiry.reminder_date, datetime.date(2024, 1, 15))
        self.assertEqual(enquiry.created_at.year, 2024)
        self.assertIsNone(enquiry.updated_at)

    def test_null_columns_become_empty(self):
        enquiry = make_enquiry('e1', remarks=None, assigned_to=None, customer_id=None)

        self.assertEqual(enquiry.remarks, '')
        self.assertEqual(enquiry.assigned_to, '')
        self.assertIsNone(enquiry.customer_id)

    def test_active_statuses(self):
        self.assertTrue(make_enquiry('e1', status='Quote').is_active)
        self.assertFalse(make_enquiry('e2', status='Won').is_active)
        self.assertFalse(make_enquiry('e3', status='Loss').is_active)

    def test_values_serialise_dates_and_blank_reminder(self):
        values = enquiry_values(scenario_data(reminder_date=''))

        self.assertEqual(values['date'], '2024-01-10')
        self.assertIsNone(values['reminder_date'])
        self.assertEqual(values['remarks'], '')


class EnquiryFiltersTest(SimpleTestCase):

    def setUp(self):
        # Newest first, as fetch_enquiries returns them
        self.enquiries = [
            make_enquiry('e3', assigned_to='Prateek', status='Quote', customer_name='Green Fields', location='Bilaspur'),
            make_enquiry('e2', assigned_to='Amit', status='Won', requirement_details='Drip irrigation kit'),
            make_enquiry('e1', assigned_to='Amit', status='Lead', phone='9876543210'),
        ]

    def test_filter_by_assignee(self):
        result = filter_by_assignee(self.enquiries, 'Amit')

        self.assertEqual([e.id for e in result], ['e2', 'e1'])
        self.assertTrue(all(e.assigned_to == 'Amit' for e in result))

    def test_no_assignee_returns_full_list_in_order(self):
        self.assertEqual([e.id for e in filter_by_assignee(self.enquiries, None)], ['e3', 'e2', 'e1'])
        self.assertEqual([e.id for e in filter_by_assignee(self.enquiries, '')], ['e3', 'e2', 'e1'])

    def test_assignee_match_is_exact(self):
        self.assertEqual(filter_by_assignee(self.enquiries, 'amit'), [])

    def test_filter_by_status(self):
        self.assertEqual([e.id for e in filter_by_status(self.enquiries, 'Won')], ['e2'])
        self.assertEqual(len(filter_by_status(self.enquiries, '')), 3)

    def test_search_is_case_insensitive(self):
        self.assertEqual([e.id for e in search_enquiries(self.enquiries, 'green')], ['e3'])
        self.assertEqual([e.id for e in search_enquiries(self.enquiries, 'BILASPUR')], ['e3'])
        self.assertEqual([e.id for e in search_enquiries(self.enquiries, 'drip')], ['e2'])

    def test_search_by_phone(self):
        self.assertEqual([e.id for e in search_enquiries(self.enquiries, '98765')], ['e1'])

    def test_search_without_match(self):
        self.assertEqual(search_enquiries(self.enquiries, 'tractor'), [])

    def test_blank_search_returns_all(self):
        self.assertEqual(len(search_enquiries(self.enquiries, '  ')), 3)


class DueRemindersTest(SimpleTestCase):

    def test_only_active_enquiries_due_on_or_before_date(self):
        today = datetime.date(2024, 1, 15)
        enquiries = [
            make_enquiry('late', reminder_date='2024-01-12'),
            make_enquiry('today', reminder_date='2024-01-15', status='Quote'),
            make_enquiry('future', reminder_date='2024-01-20'),
            make_enquiry('closed', reminder_date='2024-01-10', status='Won'),
            make_enquiry('none', reminder_date=None),
        ]

        due = due_reminders(enquiries, today)

        self.assertEqual([e.id for e in due], ['late', 'today'])


class PipelineStatsTest(SimpleTestCase):

    def test_counts_and_conversion_rate(self):
        enquiries = [
            make_enquiry('1', status='Lead'),
            make_enquiry('2', status='Enquiry'),
            make_enquiry('3', status='Won'),
            make_enquiry('4', status='Loss'),
            make_enquiry('5', status='Quote'),
            make_enquiry('6', status='Won'),
        ]

        stats = pipeline_stats(enquiries)

        self.assertEqual(stats['total'], 6)
        self.assertEqual(stats['active'], 3)
        self.assertEqual(stats['won'], 2)
        self.assertEqual(stats['conversion_rate'], 33)

        by_status = {entry['status']: entry['count'] for entry in stats['by_status']}
        self.assertEqual(by_status, {'Lead': 1, 'Enquiry': 1, 'Quote': 1, 'Won': 2, 'Loss': 1})

    def test_empty_pipeline(self):
        stats = pipeline_stats([])

        self.assertEqual(stats['total'], 0)
        self.assertEqual(stats['conversion_rate'], 0)
        self.assertEqual(len(stats['by_status']), len(Status.choices))


class CreateEnquiryTest(TestCase):
    """create_enquiry links enquiries to customers by phone"""

    def setUp(self):
        self.gateway = DatabaseGateway()

    def test_new_phone_creates_customer(self):
        """Empty customer table -> one customer, one linked Lead"""
        enquiry, created = create_enquiry(self.gateway, scenario_data(), 'Amit')

        self.assertTrue(created)
        self.assertEqual(Customer.objects.count(), 1)
        customer = Customer.objects.get()
        self.assertEqual((customer.name, customer.phone, customer.location), ('Test Co', '9999999999', 'Raipur'))

        self.assertEqual(enquiry.customer_id, str(customer.pk))
        self.assertEqual(enquiry.status, Status.LEAD)
        self.assertEqual(enquiry.assigned_to, 'Amit')
        self.assertEqual(enquiry.date, datetime.date(2024, 1, 10))

    def test_existing_phone_reuses_customer(self):
        existing = Customer.objects.create(name='Test Company Pvt Ltd', phone='9999999999', location='Raipur')

        enquiry, created = create_enquiry(self.gateway, scenario_data(customer_name='Test Co'), 'Prateek')

        self.assertFalse(created)
        self.assertEqual(Customer.objects.count(), 1)
        self.assertEqual(enquiry.customer_id, str(existing.pk))
        # Enquiry keeps the name it was entered with
        self.assertEqual(enquiry.customer_name, 'Test Co')

    def test_failed_enquiry_leaves_no_orphan_customer(self):
        with self.assertRaises(BackendError):
            create_enquiry(self.gateway, scenario_data(requirement_details=''), 'Amit')

        self.assertEqual(Customer.objects.count(), 0)
        self.assertEqual(EnquiryRow.objects.count(), 0)

    def test_fetch_enquiries_newest_first(self):
        first, _ = create_enquiry(self.gateway, scenario_data(), 'Amit')
        second, _ = create_enquiry(self.gateway, scenario_data(phone='8888888888'), 'Prateek')
        EnquiryRow.objects.filter(pk=first.id).update(created_at=timezone.now() - datetime.timedelta(hours=1))

        ids = [e.id for e in fetch_enquiries(self.gateway)]

        self.assertEqual(ids, [second.id, first.id])

    def test_customer_enquiries_by_date(self):
        older, _ = create_enquiry(self.gateway, scenario_data(date=datetime.date(2024, 1, 1)), 'Amit')
        newer, _ = create_enquiry(self.gateway, scenario_data(date=datetime.date(2024, 3, 1)), 'Amit')
        create_enquiry(self.gateway, scenario_data(phone='8888888888'), 'Amit')

        ids = [e.id for e in fetch_customer_enquiries(self.gateway, older.customer_id)]

        self.assertEqual(ids, [newer.id, older.id])


class UpdateEnquiryTest(TestCase):

    def setUp(self):
        self.gateway = DatabaseGateway()
        self.enquiry, _ = create_enquiry(self.gateway, scenario_data(), 'Amit')

    def test_full_replacement(self):
        data = scenario_data(status='Won', remarks='PO received', reminder_date=datetime.date(2024, 2, 1))
        data['assigned_to'] = 'Prateek'

        updated = update_enquiry(self.gateway, self.enquiry.id, data)

        self.assertEqual(updated.status, 'Won')
        self.assertEqual(updated.remarks, 'PO received')
        self.assertEqual(updated.assigned_to, 'Prateek')
        self.assertEqual(updated.reminder_date, datetime.date(2024, 2, 1))
        self.assertGreaterEqual(updated.updated_at, self.enquiry.updated_at)

    def test_any_status_transition_allowed(self):
        data = scenario_data(status='Loss')
        data['assigned_to'] = 'Amit'
        update_enquiry(self.gateway, self.enquiry.id, data)

        data['status'] = 'Lead'
        updated = update_enquiry(self.gateway, self.enquiry.id, data)

        self.assertEqual(updated.status, 'Lead')
