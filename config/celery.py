"""
Celery configuration for the shop billing platform.
"""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.development")

app = Celery("shop_billing")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat Schedule for periodic tasks
app.conf.beat_schedule = {
    # Remind customers with overdue pending bills every day at 9:00 AM
    "daily-payment-reminders": {
        "task": "apps.notifications.tasks.send_payment_reminders",
        "schedule": crontab(hour=9, minute=0),
        "options": {"queue": "notifications", "priority": 5},
    },
}

# Task routing configuration
app.conf.task_routes = {
    "apps.notifications.tasks.*": {"queue": "notifications", "priority": 5},
}
