"""
Enquiry pipeline

Field schema of an enquiry, the status/segment vocabularies and the
operations the enquiry views run against a gateway. Enquiries are always
fetched whole (newest first) and filtered in memory afterwards.
"""

import datetime
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from django.conf import settings
from django.urls import reverse
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.customers.directory import link_or_create_customer
from apps.gateway.base import ENQUIRIES
from .choices import ACTIVE_STATUSES, STATUS_BADGES, Status

logger = logging.getLogger(__name__)

# Columns written from the enquiry form
FORM_FIELDS = (
    'date', 'segment', 'customer_name', 'phone', 'location',
    'requirement_details', 'status', 'remarks', 'reminder_date',
)


def staff_choices() -> List[Tuple[str, str]]:
    return [(name, name) for name in settings.CRM_STAFF]


def is_staff_name(name: Optional[str]) -> bool:
    return bool(name) and name in settings.CRM_STAFF


def _to_date(value) -> Optional[datetime.date]:
    if not value:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return parse_date(str(value)[:10])


def _to_datetime(value) -> Optional[datetime.datetime]:
    if not value:
        return None
    if isinstance(value, datetime.datetime):
        return value
    return parse_datetime(str(value))


@dataclass
class Enquiry:
    id: str
    date: Optional[datetime.date]
    segment: str
    customer_name: str
    phone: str
    location: str
    requirement_details: str
    status: str
    remarks: str = ''
    reminder_date: Optional[datetime.date] = None
    assigned_to: str = ''
    customer_id: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    @classmethod
    def from_row(cls, row: Dict) -> 'Enquiry':
        return cls(
            id=str(row['id']),
            date=_to_date(row.get('date')),
            segment=row.get('segment') or '',
            customer_name=row.get('customer_name') or '',
            phone=row.get('phone') or '',
            location=row.get('location') or '',
            requirement_details=row.get('requirement_details') or '',
            status=row.get('status') or Status.LEAD,
            remarks=row.get('remarks') or '',
            reminder_date=_to_date(row.get('reminder_date')),
            assigned_to=row.get('assigned_to') or '',
            customer_id=str(row['customer_id']) if row.get('customer_id') else None,
            created_at=_to_datetime(row.get('created_at')),
            updated_at=_to_datetime(row.get('updated_at')),
        )

    def form_initial(self) -> Dict:
        initial = {name: getattr(self, name) for name in FORM_FIELDS}
        initial['assigned_to'] = self.assigned_to
        return initial

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def status_badge(self) -> str:
        return STATUS_BADGES.get(self.status, 'bg-secondary')

    def get_absolute_url(self) -> str:
        return reverse('enquiries:enquiry_detail', kwargs={'pk': self.id})


def enquiry_values(data: Dict) -> Dict:
    """Form data -> row values (ISO dates, empty reminder stored as null)"""
    values = {}
    for name in FORM_FIELDS:
        value = data.get(name)
        if isinstance(value, datetime.date):
            value = value.isoformat()
        values[name] = value
    values['remarks'] = values.get('remarks') or ''
    values['reminder_date'] = values.get('reminder_date') or None
    return values


# READS

def fetch_enquiries(gateway) -> List[Enquiry]:
    rows = gateway.select(ENQUIRIES, order_by='created_at', descending=True)
    return [Enquiry.from_row(row) for row in rows]


def fetch_enquiry(gateway, pk) -> Enquiry:
    return Enquiry.from_row(gateway.get(ENQUIRIES, pk))


def fetch_customer_enquiries(gateway, customer_id) -> List[Enquiry]:
    rows = gateway.select(ENQUIRIES, filters={'customer_id': customer_id}, order_by='date', descending=True)
    return [Enquiry.from_row(row) for row in rows]


# IN-MEMORY FILTERS

def filter_by_assignee(enquiries: Iterable[Enquiry], staff: Optional[str]) -> List[Enquiry]:
    """Exact match on assigned_to; no staff selected means the full list"""
    if not staff:
        return list(enquiries)
    return [enquiry for enquiry in enquiries if enquiry.assigned_to == staff]


def filter_by_status(enquiries: Iterable[Enquiry], status: Optional[str]) -> List[Enquiry]:
    if not status:
        return list(enquiries)
    return [enquiry for enquiry in enquiries if enquiry.status == status]


def search_enquiries(enquiries: Iterable[Enquiry], term: Optional[str]) -> List[Enquiry]:
    term = (term or '').strip()
    if not term:
        return list(enquiries)

    needle = term.lower()
    return [
        enquiry for enquiry in enquiries
        if needle in enquiry.customer_name.lower()
        or term in enquiry.phone
        or needle in enquiry.location.lower()
        or needle in enquiry.requirement_details.lower()
    ]


def due_reminders(enquiries: Iterable[Enquiry], on_date: datetime.date) -> List[Enquiry]:
    """Open enquiries whose reminder date is on or before on_date"""
    due = [
        enquiry for enquiry in enquiries
        if enquiry.is_active and enquiry.reminder_date and enquiry.reminder_date <= on_date
    ]
    return sorted(due, key=lambda enquiry: enquiry.reminder_date)


def pipeline_stats(enquiries: Iterable[Enquiry]) -> Dict:
    enquiries = list(enquiries)
    total = len(enquiries)
    counts = Counter(enquiry.status for enquiry in enquiries)

    won = counts.get(Status.WON, 0)
    by_status = []
    for status in Status:
        count = counts.get(status, 0)
        by_status.append({
            'status': status.value,
            'label': status.label,
            'count': count,
            'badge': STATUS_BADGES[status],
            'percentage': (count / total * 100) if total > 0 else 0,
        })

    return {
        'total': total,
        'active': sum(counts.get(status, 0) for status in ACTIVE_STATUSES),
        'won': won,
        'conversion_rate': round(won / total * 100) if total > 0 else 0,
        'by_status': by_status,
    }


# WRITES

def create_enquiry(gateway, data: Dict, assignee: str) -> Tuple[Enquiry, bool]:
    """
    Create an enquiry, linking it to the customer with the same phone

    A customer is created from the enquiry's name/phone/location when no
    customer has that phone. Both writes run in one gateway transaction so a
    failed enquiry insert leaves no orphan customer behind.

    Returns:
        (enquiry, customer_created)
    """
    with gateway.transaction() as tx:
        customer_id, customer_created = link_or_create_customer(
            tx,
            name=data['customer_name'],
            phone=data['phone'],
            location=data.get('location', ''),
        )
        values = enquiry_values(data)
        values['customer_id'] = customer_id
        values['assigned_to'] = assignee
        row = tx.insert(ENQUIRIES, values)

    logger.info(
        f"Enquiry {row['id']} created for {assignee} "
        f"(customer {customer_id}, new={customer_created})"
    )
    return Enquiry.from_row(row), customer_created


def update_enquiry(gateway, pk, data: Dict) -> Enquiry:
    """Replace every editable column of the enquiry"""
    values = enquiry_values(data)
    values['assigned_to'] = data.get('assigned_to') or ''
    values['updated_at'] = timezone.now().isoformat()

    row = gateway.update(ENQUIRIES, pk, values)
    logger.info(f"Enquiry {pk} updated (status={row.get('status')})")
    return Enquiry.from_row(row)

