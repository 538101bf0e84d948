import logging
from collections import defaultdict

from celery import shared_task
from django.utils import timezone

from apps.gateway.exceptions import BackendError
from apps.gateway.utils import get_gateway
from .pipeline import due_reminders, fetch_enquiries

logger = logging.getLogger(__name__)


@shared_task
def send_reminder_notifications():
    """Log open enquiries whose reminder date has come, grouped by assignee"""
    today = timezone.localdate()

    try:
        enquiries = fetch_enquiries(get_gateway())
    except BackendError as e:
        logger.error(f"Reminder check failed: {e.message}")
        return f'Reminder check failed: {e.message}'

    by_staff = defaultdict(list)
    for enquiry in due_reminders(enquiries, today):
        by_staff[enquiry.assigned_to or 'Unassigned'].append(enquiry)

    reminders_logged = 0

    for staff, items in by_staff.items():
        for enquiry in items:
            logger.info(
                f"Reminder for {staff}: {enquiry.customer_name} ({enquiry.phone}) "
                f"- {enquiry.status}, due {enquiry.reminder_date}"
            )
            reminders_logged += 1

    return f'{reminders_logged} reminders logged.'
