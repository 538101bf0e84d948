from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AccountsConfig(AppConfig):
    """
    Sign-in, sign-out and the per-request session context

    Signals registered:
    - session_changed -> logs sign-in / sign-out
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.accounts'
    verbose_name = _('Accounts')

    def ready(self):
        import apps.accounts.signals
