import logging

from django.apps import AppConfig

LOGGER = logging.getLogger(__name__)


class DiscordappConfig(AppConfig):
    name = 'discordapp'
    verbose_name = 'DNS over Discord'

    def ready(self):
        # Build the command table once at start-up; it is read-only from here on.
        from .registry import get_registry

        try:
            get_registry()
        except Exception as e:
            # Pings must keep working, so a bad manifest only fails commands.
            LOGGER.error(f"Could not load the command manifest: {e}")
