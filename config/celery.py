# Celery runs the periodic reminder check outside the request cycle
#
# Start worker: celery -A config worker -l info
# Start beat: celery -A config beat -l info
# ==============================================================================

import os
from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for Celery
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

# 'enquiry_crm' appears in logs and monitoring
app = Celery('enquiry_crm')

# All settings prefixed with 'CELERY_' will be used
app.config_from_object('django.conf:settings', namespace='CELERY')

# Looks for tasks.py in each installed app (apps/enquiries/tasks.py)
app.autodiscover_tasks()


# CELERY BEAT SCHEDULE (Periodic Tasks)
app.conf.beat_schedule = {
    # Reminder dates are whole days, so once a morning is enough
    'send-reminder-notifications': {
        'task': 'apps.enquiries.tasks.send_reminder_notifications',
        'schedule': crontab(hour=9, minute=0),  # Every day at 9:00 AM
    },
}
