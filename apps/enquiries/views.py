import csv
import logging

import openpyxl
from openpyxl.styles import Font, PatternFill
from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import render, redirect
from django.utils import timezone

from apps.accounts.decorators import backend_required
from apps.core.utils import set_selected_staff
from apps.customers.directory import fetch_customers, match_customer_by_name
from apps.gateway.exceptions import BackendError, NotFoundError
from .forms import EnquiryFilterForm, EnquiryForm
from .pipeline import (
    fetch_enquiries, fetch_enquiry, filter_by_assignee, filter_by_status,
    search_enquiries, pipeline_stats, create_enquiry, update_enquiry,
)

logger = logging.getLogger(__name__)

EXPORT_HEADERS = [
    'Date', 'Segment', 'Customer Name', 'Phone', 'Location',
    'Requirement Details', 'Status', 'Assigned To', 'Reminder Date', 'Remarks',
]


def _load_enquiries(request):
    """Every enquiry visible to the visitor, newest first ([] if the backend fails)"""
    try:
        return fetch_enquiries(request.crm.gateway)
    except BackendError as e:
        logger.error(f"Could not load enquiries: {e.message}")
        # Row fragments never render messages
        if not request.GET.get('partial'):
            messages.error(request, 'Could not load enquiries. Please try again.')
        return []


def _filtered_enquiries(request):
    """
    Apply the selected staff member, search term and status filter

    Returns:
        (enquiries, staff_enquiries, filter_form, search_query)
    """
    staff = request.crm.selected_staff
    staff_enquiries = filter_by_assignee(_load_enquiries(request), staff)
    enquiries = staff_enquiries

    filter_form = EnquiryFilterForm(request.GET)
    search_query = ''

    if filter_form.is_valid():
        search_query = filter_form.cleaned_data.get('search', '').strip()
        enquiries = search_enquiries(enquiries, search_query)

        if filter_form.cleaned_data.get('status'):
            enquiries = filter_by_status(enquiries, filter_form.cleaned_data['status'])

    return enquiries, staff_enquiries, filter_form, search_query


def enquiry_list_view(request):
    enquiries, staff_enquiries, filter_form, search_query = _filtered_enquiries(request)

    context = {
        'enquiries': enquiries,
        'filter_form': filter_form,
        'search_query': search_query,
        'total_count': len(staff_enquiries),
        'stats': pipeline_stats(staff_enquiries),
        'selected_staff': request.crm.selected_staff,
        'configured': request.crm.configured,
    }

    # Live updates re-fetch only the table body
    if request.GET.get('partial'):
        return render(request, 'enquiries/_enquiry_rows.html', context)

    return render(request, 'enquiries/enquiry_list.html', context)


@backend_required('enquiries:enquiry_list')
def enquiry_create_view(request):
    gateway = request.crm.gateway

    try:
        customers = fetch_customers(gateway)
    except BackendError as e:
        # Autocomplete is optional; the form still works without it
        logger.warning(f"Could not load customers for autocomplete: {e.message}")
        customers = []

    if request.method == 'POST':
        form = EnquiryForm(request.POST)

        if form.is_valid():
            assignee = form.cleaned_data['assigned_to']
            set_selected_staff(request, assignee)

            try:
                enquiry, customer_created = create_enquiry(gateway, form.cleaned_data, assignee)

            except BackendError as e:
                logger.error(f"Error creating enquiry: {e.message}")
                messages.error(request, 'Failed to create enquiry. Please try again.')

            else:
                if customer_created:
                    messages.info(request, f'New customer "{enquiry.customer_name}" added to the directory')
                messages.success(request, 'Enquiry created successfully!')
                return redirect('enquiries:enquiry_list')

        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        initial = {'assigned_to': request.crm.selected_staff or ''}

        # Prefill from the customer directory (?customer_name=...)
        customer = match_customer_by_name(customers, request.GET.get('customer_name'))
        if customer is not None:
            initial.update({
                'customer_name': customer.name,
                'phone': customer.phone,
                'location': customer.location,
            })

        form = EnquiryForm(initial=initial, disabled=not request.crm.configured)

    context = {
        'form': form,
        'customers_json': [customer.as_json() for customer in customers],
        'form_title': 'New Enquiry',
        'submit_text': 'Create Enquiry',
        'cancel_url': 'enquiries:enquiry_list',
        'configured': request.crm.configured,
    }
    return render(request, 'enquiries/enquiry_form.html', context)


def enquiry_detail_view(request, pk):
    try:
        enquiry = fetch_enquiry(request.crm.gateway, pk)
    except NotFoundError:
        messages.error(request, 'Enquiry not found')
        return redirect('enquiries:enquiry_list')
    except BackendError as e:
        logger.error(f"Could not load enquiry {pk}: {e.message}")
        messages.error(request, 'Could not load the enquiry. Please try again.')
        return redirect('enquiries:enquiry_list')

    context = {
        'enquiry': enquiry,
    }
    return render(request, 'enquiries/enquiry_detail.html', context)


@backend_required('enquiries:enquiry_list')
def enquiry_edit_view(request, pk):
    gateway = request.crm.gateway

    try:
        enquiry = fetch_enquiry(gateway, pk)
    except NotFoundError:
        messages.error(request, 'Enquiry not found')
        return redirect('enquiries:enquiry_list')
    except BackendError as e:
        logger.error(f"Could not load enquiry {pk}: {e.message}")
        messages.error(request, 'Could not load the enquiry. Please try again.')
        return redirect('enquiries:enquiry_list')

    if request.method == 'POST':
        form = EnquiryForm(request.POST)

        if form.is_valid():
            try:
                enquiry = update_enquiry(gateway, pk, form.cleaned_data)

            except BackendError as e:
                logger.error(f"Error updating enquiry {pk}: {e.message}")
                messages.error(request, 'Failed to update enquiry. Please try again.')

            else:
                messages.success(request, 'Enquiry updated successfully!')
                return redirect('enquiries:enquiry_detail', pk=enquiry.id)

        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        # GET - show form with current data
        form = EnquiryForm(initial=enquiry.form_initial(), disabled=not request.crm.configured)

    context = {
        'form': form,
        'enquiry': enquiry,
        'customers_json': [],
        'form_title': f'Edit Enquiry: {enquiry.customer_name}',
        'submit_text': 'Save Changes',
        'cancel_url': 'enquiries:enquiry_detail',
        'cancel_url_kwargs': {'pk': enquiry.id},
        'configured': request.crm.configured,
    }
    return render(request, 'enquiries/enquiry_form.html', context)


def _export_row(enquiry):
    return [
        enquiry.date.isoformat() if enquiry.date else '',
        enquiry.segment,
        enquiry.customer_name,
        enquiry.phone,
        enquiry.location,
        enquiry.requirement_details,
        enquiry.status,
        enquiry.assigned_to,
        enquiry.reminder_date.isoformat() if enquiry.reminder_date else '',
        enquiry.remarks,
    ]


def enquiry_export_view(request):
    export_format = request.GET.get('format', 'excel')
    enquiries, _staff_enquiries, _filter_form, _search_query = _filtered_enquiries(request)
    stamp = timezone.now().strftime("%Y%m%d_%H%M%S")

    if export_format == 'excel':
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Enquiries"

        # Write headers with styling
        for col, header in enumerate(EXPORT_HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = PatternFill(start_color="0D6EFD", end_color="0D6EFD", fill_type="solid")

        for row, enquiry in enumerate(enquiries, start=2):
            for col, value in enumerate(_export_row(enquiry), start=1):
                ws.cell(row=row, column=col, value=value)

        # Adjust column widths
        for col in ws.columns:
            max_length = max(len(str(cell.value or '')) for cell in col)
            ws.column_dimensions[col[0].column_letter].width = min(max_length + 2, 50)

        response = HttpResponse(
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        response['Content-Disposition'] = f'attachment; filename="enquiries_{stamp}.xlsx"'
        wb.save(response)

        return response

    elif export_format == 'csv':
        response = HttpResponse(content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = f'attachment; filename="enquiries_{stamp}.csv"'

        # Write BOM for Excel UTF-8 compatibility
        response.write('\ufeff')

        writer = csv.writer(response)
        writer.writerow(EXPORT_HEADERS)
        for enquiry in enquiries:
            writer.writerow(_export_row(enquiry))

        return response

    else:
        messages.error(request, 'Invalid export format')
        return redirect('enquiries:enquiry_list')
