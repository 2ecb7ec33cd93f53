# dnsbot/discordapp/tasks.py

"""
Asynchronous Background Tasks for the Discord App.

`run_deferred` completes an interaction that was acknowledged with a deferred
response. It runs in a Celery worker, after the web process has already
answered Discord, and settles exactly once:

- success: the work's result is written over the original response;
- failure: a fixed fallback message is written over the original response
  (best effort), the error is reported, and the task is re-raised so that
  Celery records and logs it as failed.

Tasks defined here are discovered by the Celery app in `dnsbot/celery.py`.
"""

# Standard library imports
import logging
from typing import Any, Dict, Optional

# Third-party imports
import requests
from celery import shared_task
from django.utils.module_loading import import_string

# Local application imports
from .config import get_config
from .discord import DiscordClient
from .exceptions import DiscordApiError
from .interactions import Interaction
from .reporting import ErrorReporter, interaction_context

LOGGER = logging.getLogger(__name__)


@shared_task(bind=True, name="discordapp.run_deferred")
def run_deferred(self, work: str, payload: Dict[str, Any], fallback: str, params: Dict[str, Any],
                 tags: Optional[Dict[str, str]] = None):
    """
    Runs the deferred `work` for the interaction in `payload` and edits its
    original response with the result.

    Args:
        self: The Celery task instance (passed because of `bind=True`).
        work: Dotted path of `work(interaction, **params) -> message dict`.
        payload: The interaction body exactly as it was received; its token
            is the only one this task will ever edit.
        fallback: Content shown to the user if anything goes wrong.
        params: Keyword arguments for `work`.
        tags: Report tags naming the command or component that deferred it.
    """
    interaction = Interaction.from_payload(payload)
    client = DiscordClient(get_config())
    reporter = ErrorReporter(transaction_name=f"deferred: {work}", tags={"deferred": work, **(tags or {})})
    reporter.set_context("interaction", interaction_context(interaction))

    try:
        message = import_string(work)(interaction, **params)
        client.edit_original_response(interaction, message)
    except Exception as e:
        LOGGER.exception(f"Deferred '{work}' failed for interaction {interaction.id}: {e}")
        send_fallback_edit(client, interaction, fallback)
        reporter.capture_exception(e)
        raise

    LOGGER.info(f"Deferred '{work}' completed for interaction {interaction.id}")
    return {"interaction": interaction.id, "status": "completed"}


def send_fallback_edit(client: DiscordClient, interaction: Interaction, fallback: str) -> None:
    """Tells the user it errored; a failure here must not mask the original one."""
    try:
        client.edit_original_response(interaction, {"content": fallback, "embeds": [], "components": []})
    except (DiscordApiError, requests.RequestException) as edit_error:
        LOGGER.warning(f"Fallback edit failed for interaction {interaction.id}: {edit_error}")
