"""
Celery Configuration for Core Project

This module configures Celery for background and periodic work, such as
reconciling departmental reports after a partial write. Redis is used as
both broker and result backend, on separate database indices.

Redis Database Allocation:
- DB 1: Celery broker
- DB 2: Celery results (optional)

Workers must be run as separate processes:
    celery -A core worker -l info
    celery -A core beat -l info --scheduler django_celery_beat.schedulers:DatabaseScheduler
"""

import os
from celery import Celery

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

app = Celery('core')

# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()
