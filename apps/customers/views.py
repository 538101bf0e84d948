import logging

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import render, redirect
from django.views.decorators.http import require_GET

from apps.accounts.decorators import ajax_required, backend_required
from apps.enquiries.pipeline import fetch_customer_enquiries, pipeline_stats
from apps.gateway.exceptions import BackendError, NotFoundError
from .directory import (
    create_customer, fetch_customer, fetch_customers, find_customer_by_phone,
    match_customer_by_name, search_customers,
)
from .forms import CustomerForm

logger = logging.getLogger(__name__)


def customer_list_view(request):
    search_query = request.GET.get('search', '').strip()

    try:
        customers = fetch_customers(request.crm.gateway)
    except BackendError as e:
        logger.error(f"Could not load customers: {e.message}")
        messages.error(request, 'Could not load customers. Please try again.')
        customers = []

    total_count = len(customers)
    customers = search_customers(customers, search_query)

    context = {
        'customers': customers,
        'search_query': search_query,
        'total_count': total_count,
        'configured': request.crm.configured,
    }
    return render(request, 'customers/customer_list.html', context)


@backend_required('customers:customer_list')
def customer_create_view(request):
    if request.method == 'POST':
        form = CustomerForm(request.POST)

        if form.is_valid():
            gateway = request.crm.gateway
            try:
                existing = find_customer_by_phone(gateway, form.cleaned_data['phone'])
                if existing is not None:
                    messages.warning(request, f'A customer with this phone already exists: {existing.name}')
                    return redirect('customers:customer_detail', pk=existing.id)

                customer = create_customer(gateway, form.cleaned_data)

            except BackendError as e:
                logger.error(f"Error creating customer: {e.message}")
                messages.error(request, 'Failed to create customer. Please try again.')

            else:
                messages.success(request, f'Customer "{customer.name}" created successfully')
                return redirect('customers:customer_detail', pk=customer.id)

        else:
            messages.error(request, 'Please correct the errors in the form')

    else:
        form = CustomerForm(disabled=not request.crm.configured)

    context = {
        'form': form,
        'form_title': 'New Customer',
        'submit_text': 'Create',
        'cancel_url': 'customers:customer_list',
        'configured': request.crm.configured,
    }
    return render(request, 'customers/customer_form.html', context)


def customer_detail_view(request, pk):
    gateway = request.crm.gateway

    try:
        customer = fetch_customer(gateway, pk)
        enquiries = fetch_customer_enquiries(gateway, customer.id)
    except NotFoundError:
        messages.error(request, 'Customer not found')
        return redirect('customers:customer_list')
    except BackendError as e:
        logger.error(f"Could not load customer {pk}: {e.message}")
        messages.error(request, 'Could not load the customer. Please try again.')
        return redirect('customers:customer_list')

    context = {
        'customer': customer,
        'enquiries': enquiries,
        'stats': pipeline_stats(enquiries),
    }
    return render(request, 'customers/customer_detail.html', context)


@require_GET
@ajax_required
def customer_lookup_view(request):
    """
    Autofill lookup for the enquiry form

    GET ?name=<exact customer name>
    Returns {"found": bool, "customer": {...} | null}
    """
    name = request.GET.get('name', '').strip()

    try:
        customers = fetch_customers(request.crm.gateway)
    except BackendError as e:
        logger.error(f"Customer lookup failed: {e.message}")
        return JsonResponse({'success': False, 'error': e.message}, status=500)

    customer = match_customer_by_name(customers, name)

    return JsonResponse({
        'success': True,
        'found': customer is not None,
        'customer': customer.as_json() if customer else None,
    })
