import logging

from django.conf import settings
from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import render, redirect
from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from apps.enquiries.pipeline import (
    due_reminders, fetch_enquiries, filter_by_assignee, pipeline_stats, staff_choices,
)
from apps.gateway.base import CUSTOMERS, ENQUIRIES
from apps.gateway.exceptions import BackendError
from apps.gateway.utils import get_gateway
from .utils import clear_selected_staff, set_selected_staff

logger = logging.getLogger(__name__)


def home_view(request):
    """Send signed-in visitors (and demo mode) to the dashboard, others to login"""
    if not request.crm.configured or request.crm.is_authenticated:
        return redirect('core:dashboard')
    return redirect('accounts:login')


def dashboard_view(request):
    """
    Main dashboard view
    - Pipeline stats over every enquiry
    - Stats and due reminders for the selected staff member
    """
    selected_staff = request.crm.selected_staff
    today = timezone.localdate()

    try:
        enquiries = fetch_enquiries(request.crm.gateway)
    except BackendError as e:
        logger.error(f"Could not load dashboard stats: {e.message}")
        messages.error(request, 'Could not load enquiries. Stats may be incomplete.')
        enquiries = []

    staff_enquiries = filter_by_assignee(enquiries, selected_staff)

    context = {
        'stats': pipeline_stats(enquiries),
        'staff_members': [name for name, _label in staff_choices()],
        'selected_staff': selected_staff,
        'staff_stats': pipeline_stats(staff_enquiries) if selected_staff else None,
        'due_reminders': due_reminders(staff_enquiries, today)[:10],
        'recent_enquiries': staff_enquiries[:5],
        'today': today,
        'configured': request.crm.configured,
    }

    return render(request, 'core/dashboard.html', context)


@require_POST
def select_staff_view(request):
    """
    Store the staff member picked on the dashboard

    An empty name clears the selection (the list then shows everyone).
    """
    name = request.POST.get('staff', '').strip()

    if not name:
        clear_selected_staff(request)
        messages.info(request, 'Showing enquiries for all staff')
        return redirect('enquiries:enquiry_list')

    if not set_selected_staff(request, name):
        messages.error(request, 'Unknown staff member')
        return redirect('core:dashboard')

    return redirect('enquiries:enquiry_list')


# DIAGNOSTICS
# Plain JSON, no session needed: they check the deployment, not the visitor

@require_GET
def env_check_view(request):
    backend_url = settings.BACKEND_URL
    return JsonResponse({
        'backendUrl': backend_url or 'not set',
        'backendKey': 'set (hidden for security)' if settings.BACKEND_KEY else 'not set',
        'gateway': settings.CRM_GATEWAY_BACKEND,
        'configured': get_gateway().is_configured,
        'debug': settings.DEBUG,
    })


def _diagnostic_select(table, order_by=None, descending=False):
    try:
        rows = get_gateway().select(table, order_by=order_by, descending=descending)
    except BackendError as e:
        logger.error(f"Diagnostic select on {table} failed: {e.message}")
        return JsonResponse({'success': False, 'error': e.message}, status=500)

    return JsonResponse({
        'success': True,
        'message': f'Connected, {table} table reachable',
        'count': len(rows),
        'data': rows[:5],
    })


@require_GET
def test_backend_view(request):
    return _diagnostic_select(CUSTOMERS)


@require_GET
def check_enquiries_view(request):
    return _diagnostic_select(ENQUIRIES, order_by='created_at', descending=True)
