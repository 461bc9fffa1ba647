"""
Celery application for background jobs (ledger reconciliation).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.local")

app = Celery("points_ledger")

# All CELERY_* keys from Django settings are picked up here
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
