import logging

from django.contrib import messages
from django.shortcuts import render, redirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext_lazy as _
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_http_methods

from apps.gateway.exceptions import AuthError, BackendError
from .forms import LoginForm

logger = logging.getLogger(__name__)


def _safe_next_url(request):
    next_url = request.GET.get('next') or request.POST.get('next')
    if next_url and url_has_allowed_host_and_scheme(
        next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return next_url
    return None


# AUTHENTICATION VIEWS
@never_cache
def login_view(request):
    session = request.crm

    # Guard redirects signed-in visitors too; this covers fail-open requests
    if session.configured and request.method != 'POST' and session.is_authenticated:
        return redirect('core:dashboard')

    if request.method == 'POST':
        form = LoginForm(request.POST, disabled=not session.configured)

        if not session.configured:
            messages.error(
                request,
                _('The backend is not configured. Sign-in is disabled in demo mode.')
            )

        elif form.is_valid():
            email = form.cleaned_data['email']
            password = form.cleaned_data['password']
            remember = form.cleaned_data.get('remember', False)

            try:
                user = session.sign_in(email, password)

            except AuthError as e:
                # Rejected credentials
                messages.error(
                    request,
                    e.message or _('Invalid login credentials. Please try again.')
                )

            except BackendError as e:
                logger.error(f"Sign-in failed for {email}: {e.message}")
                messages.error(
                    request,
                    _('Could not reach the backend. Please try again.')
                )

            else:
                if remember:
                    # Session expires in 30 days
                    request.session.set_expiry(30 * 24 * 60 * 60)
                else:
                    # Session expires when browser closes
                    request.session.set_expiry(0)

                messages.success(
                    request,
                    _('Welcome back, {}!').format(user.get('email', ''))
                )

                return redirect(_safe_next_url(request) or 'core:dashboard')

        else:
            # Form validation errors
            messages.error(request, _('Please correct the errors below.'))

    else:
        # GET request - show empty form
        form = LoginForm(
            initial={'next': request.GET.get('next', '')},
            disabled=not session.configured,
        )

    context = {
        'form': form,
        'configured': session.configured,
        'page_title': _('Login'),
    }

    return render(request, 'accounts/login.html', context)


@require_http_methods(['GET', 'POST'])
def logout_view(request):
    request.crm.sign_out()

    messages.success(request, _('You have been signed out.'))

    return redirect('accounts:login')
