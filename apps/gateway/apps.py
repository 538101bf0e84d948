from django.apps import AppConfig


class GatewayConfig(AppConfig):
    """
    Data access gateway

    Holds the backend contract (base.BaseGateway), the REST and database
    backends, and the tables the database backend stores rows in.
    """
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.gateway'
    verbose_name = 'Data Access'

    def ready(self):
        import apps.gateway.signals
