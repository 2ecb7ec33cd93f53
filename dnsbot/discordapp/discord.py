# dnsbot/discordapp/discord.py

"""
Minimal client for the parts of the Discord HTTP API the bot calls.

Interaction follow-ups are authenticated by the interaction token in the URL,
so no bot token is needed: editing `@original` on
`/webhooks/{application_id}/{token}` replaces whatever the deferred
acknowledgement is currently showing.
"""

# Standard library imports
import logging
from typing import Any, Dict, Optional

# Third-party imports
import requests

# Local application imports
from .config import BotConfig
from .exceptions import DiscordApiError
from .interactions import Interaction

LOGGER = logging.getLogger(__name__)


class DiscordClient:
    def __init__(self, config: BotConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()

    def _original_response_url(self, interaction: Interaction) -> str:
        return (
            f"{self.config.api_base}/webhooks/{interaction.application_id}"
            f"/{interaction.token}/messages/@original"
        )

    def edit_original_response(self, interaction: Interaction, message: Dict[str, Any]) -> Dict[str, Any]:
        """
        PATCHes the original response of `interaction` with `message`.

        Raises `DiscordApiError` only when Discord rejects the edit. Returns
        the edited message, or an empty dict if its body cannot be read.
        """
        response = self.session.patch(
            self._original_response_url(interaction),
            json=message,
            timeout=self.config.http_timeout,
        )
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            raise DiscordApiError(
                f"Editing response for interaction {interaction.id} failed with {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        LOGGER.info(f"Edited original response for interaction {interaction.id}")
        # The edit has landed at this point; an unreadable body is not a failure.
        try:
            return response.json()
        except ValueError:
            LOGGER.warning(f"Unreadable edit response for interaction {interaction.id}")
            return {}
