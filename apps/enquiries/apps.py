from django.apps import AppConfig


class EnquiriesConfig(AppConfig):

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.enquiries'
    verbose_name = 'Enquiry Management'

    def ready(self):
        import apps.enquiries.signals
