"""
Customer directory

Customers are keyed by phone number for create-or-reuse when an enquiry is
entered. The phone match is an application convention, not a database
constraint.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from django.urls import reverse
from django.utils.dateparse import parse_datetime

from apps.gateway.base import CUSTOMERS

logger = logging.getLogger(__name__)


@dataclass
class Customer:
    id: str
    name: str
    phone: str
    location: str = ''
    created_at: Optional[datetime.datetime] = None

    @classmethod
    def from_row(cls, row: Dict) -> 'Customer':
        created_at = row.get('created_at')
        if created_at and not isinstance(created_at, datetime.datetime):
            created_at = parse_datetime(str(created_at))
        return cls(
            id=str(row['id']),
            name=row.get('name') or '',
            phone=row.get('phone') or '',
            location=row.get('location') or '',
            created_at=created_at or None,
        )

    def as_json(self) -> Dict:
        return {'id': self.id, 'name': self.name, 'phone': self.phone, 'location': self.location}

    def get_absolute_url(self) -> str:
        return reverse('customers:customer_detail', kwargs={'pk': self.id})


def fetch_customers(gateway) -> List[Customer]:
    rows = gateway.select(CUSTOMERS, order_by='name')
    return [Customer.from_row(row) for row in rows]


def fetch_customer(gateway, pk) -> Customer:
    return Customer.from_row(gateway.get(CUSTOMERS, pk))


def find_customer_by_phone(gateway, phone) -> Optional[Customer]:
    rows = gateway.select(CUSTOMERS, filters={'phone': phone})
    return Customer.from_row(rows[0]) if rows else None


def create_customer(gateway, data: Dict) -> Customer:
    row = gateway.insert(CUSTOMERS, {
        'name': data['name'],
        'phone': data['phone'],
        'location': data.get('location') or '',
    })
    logger.info(f"Customer {row['id']} created ({row.get('phone')})")
    return Customer.from_row(row)


def link_or_create_customer(gateway, name, phone, location='') -> Tuple[str, bool]:
    """
    Customer id for an enquiry's phone number

    Reuses the first customer with exactly this phone; otherwise inserts a new
    customer from the enquiry's name/phone/location.

    Returns:
        (customer_id, created)
    """
    existing = find_customer_by_phone(gateway, phone)
    if existing:
        logger.debug(f"Phone {phone} matched customer {existing.id}")
        return existing.id, False

    customer = create_customer(gateway, {'name': name, 'phone': phone, 'location': location})
    return customer.id, True


def search_customers(customers: Iterable[Customer], term: Optional[str]) -> List[Customer]:
    """
    Case-insensitive match on name and location, substring match on phone
    """
    term = (term or '').strip()
    if not term:
        return list(customers)

    needle = term.lower()
    return [
        customer for customer in customers
        if needle in customer.name.lower()
        or term in customer.phone
        or needle in customer.location.lower()
    ]


def match_customer_by_name(customers: Iterable[Customer], name: Optional[str]) -> Optional[Customer]:
    """First customer whose name equals `name` (duplicates are not disambiguated)"""
    if not name:
        return None
    for customer in customers:
        if customer.name == name:
            return customer
    return None
