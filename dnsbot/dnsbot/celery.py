# dnsbot/dnsbot/celery.py

"""
Celery application for the dnsbot project.

Celery is the runtime that owns deferred interaction work: once the HTTP
acknowledgement has gone back to Discord, the follow-up task is handed to a
worker, which keeps it (acks_late) until it has either edited the original
response or failed and been recorded as failed.
"""

import os

from celery import Celery

# Must be set before the app is created so workers load the same settings as
# the web process.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dnsbot.settings')

app = Celery('dnsbot')

# All Celery options live in settings.py with a CELERY_ prefix.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Picks up discordapp/tasks.py.
app.autodiscover_tasks()
