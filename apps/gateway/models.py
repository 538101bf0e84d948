"""
Tables used by the database gateway backend.

They mirror the hosted backend's `customers` and `enquiries` tables so both
gateway backends hand out rows of the same shape.
"""
import uuid

from django.db import models

from apps.enquiries.choices import Segment, Status


class Customer(models.Model):

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, help_text="Customer or company name")
    phone = models.CharField(max_length=20, db_index=True, help_text='Used to match enquiries to an existing customer')
    location = models.CharField(max_length=200, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'customers'
        ordering = ['name']
        verbose_name = 'Customer'
        verbose_name_plural = 'Customers'

    def __str__(self):
        return f'{self.name} ({self.phone})'


class Enquiry(models.Model):

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    date = models.DateField(help_text='Business date of the enquiry')
    segment = models.CharField(max_length=20, choices=Segment.choices, default=Segment.AGRI)

    # Customer details are copied at creation and not kept in sync
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='enquiries')
    customer_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20)
    location = models.CharField(max_length=200, blank=True)

    requirement_details = models.TextField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.LEAD, db_index=True)
    remarks = models.TextField(blank=True, default='')
    reminder_date = models.DateField(null=True, blank=True)
    assigned_to = models.CharField(max_length=50, blank=True, default='', db_index=True, help_text='Staff member tag')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'enquiries'
        ordering = ['-created_at']
        verbose_name = 'Enquiry'
        verbose_name_plural = 'Enquiries'

    def __str__(self):
        return f'{self.customer_name} - {self.status}'
