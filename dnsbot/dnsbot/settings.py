# dnsbot/dnsbot/settings.py
"""
Django settings for the dnsbot project.

The project has no database and no templates: Django is only the HTTP
container for the Discord interactions endpoint and a handful of static
routes. Everything sensitive (Discord keys, the Sentry DSN, broker URLs) is
loaded from the environment, optionally via a .env file.
"""

from pathlib import Path
import os

from dotenv import load_dotenv

load_dotenv()

# ==============================================================================
# CORE SETTINGS
# ==============================================================================

# Build paths inside the project like this: BASE_DIR / 'subdir'
BASE_DIR = Path(__file__).resolve().parent.parent
SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'dnsbot-dev-key-replace-before-deployment')
DEBUG = os.getenv('DJANGO_DEBUG', 'False') == 'True'

ALLOWED_HOSTS = [
    "127.0.0.1",
    "localhost",
]
if os.getenv('PRODUCTION_HOST'):
    ALLOWED_HOSTS.append(os.getenv('PRODUCTION_HOST'))


# ==============================================================================
# APPLICATION-SPECIFIC SETTINGS (Loaded from Environment Variables)
# ==============================================================================

DISCORD_PUBLIC_KEY = os.getenv("DISCORD_PUBLIC_KEY", "")
DISCORD_CLIENT_ID = os.getenv("DISCORD_CLIENT_ID", "")
DISCORD_API_BASE = os.getenv("DISCORD_API_BASE", "https://discord.com/api/v10")

# JSON list of the application commands as returned by Discord when they were
# registered, i.e. objects carrying at least "id" and "name".
DISCORD_COMMANDS_FILE = os.getenv("DISCORD_COMMANDS_FILE", str(BASE_DIR / "commands.json"))

# Optional replay window for X-Signature-Timestamp, in seconds. Empty disables it.
DISCORD_SIGNATURE_MAX_AGE = int(os.getenv("DISCORD_SIGNATURE_MAX_AGE") or 0) or None

# Timeout in seconds for every outbound HTTP call (Discord API, DNS providers).
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))

SENTRY_DSN = os.getenv("SENTRY_DSN", "")


# ==============================================================================
# DJANGO-SPECIFIC CONFIGURATION
# ==============================================================================

INSTALLED_APPS = [
    'discordapp.apps.DiscordappConfig',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'dnsbot.urls'

WSGI_APPLICATION = 'dnsbot.wsgi.application'

# No models, so no database.
DATABASES = {}

APPEND_SLASH = False

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# Logging Configuration
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'discordapp': {
            'handlers': ['console'],
            'level': os.getenv('DNSBOT_LOG_LEVEL', 'INFO'),
            'propagate': True,
        },
    },
}

# Persist logs to a file as well when asked to.
if os.getenv('DNSBOT_LOG_FILE'):
    LOGGING['handlers']['file'] = {
        'level': 'INFO',
        'class': 'logging.FileHandler',
        'filename': os.getenv('DNSBOT_LOG_FILE'),
        'formatter': 'simple',
    }
    LOGGING['loggers']['discordapp']['handlers'].append('file')


# ==============================================================================
# CELERY CONFIGURATION
# ==============================================================================
CELERY_BROKER_URL = os.getenv('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = os.getenv('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0')
CELERY_ACCEPT_CONTENT = ['json']
CELERY_TASK_SERIALIZER = 'json'
CELERY_RESULT_SERIALIZER = 'json'
# A deferred edit must survive a worker restart, so only ack once it settled.
CELERY_TASK_ACKS_LATE = True
CELERY_TASK_REJECT_ON_WORKER_LOST = True
# Interaction tokens expire after 15 minutes; keep deferred work well inside that.
CELERY_TASK_SOFT_TIME_LIMIT = 60
CELERY_TASK_TIME_LIMIT = 90


# ==============================================================================
# ERROR REPORTING
# ==============================================================================
if SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.celery import CeleryIntegration
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=SENTRY_DSN,
        integrations=[DjangoIntegration(), CeleryIntegration()],
        send_default_pii=False,
    )
