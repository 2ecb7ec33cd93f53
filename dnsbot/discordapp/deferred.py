# dnsbot/discordapp/deferred.py

"""
The "acknowledge now, finish later" half of interaction handling.

Discord expects an answer to every interaction within three seconds. A handler
whose real work may take longer answers with a deferred envelope and queues the
work on the request's `BackgroundScheduler`. The queued work is only handed to
Celery once the acknowledgement has been written back to Discord: the router
returns an `AckResponse`, and the WSGI server calls its `close()` after the
body has been sent. That ordering matters, because Discord does not accept an
edit to an interaction it has not yet seen acknowledged.
"""

# Standard library imports
import logging
from dataclasses import dataclass
from typing import Any, Dict, List

# Django imports
from django.http import JsonResponse

# Third-party imports
from celery.canvas import Signature
from celery.result import AsyncResult

# Local application imports
from .config import get_config
from .discord import DiscordClient
from .interactions import Interaction
from .reporting import ErrorReporter, handler_tags, interaction_context
from .tasks import run_deferred, send_fallback_edit

LOGGER = logging.getLogger(__name__)

DEFAULT_FALLBACK_MESSAGE = "Sorry, something went wrong when processing your request."


@dataclass(frozen=True)
class DeferredWork:
    signature: Signature
    interaction: Interaction
    work: str
    fallback: str
    tags: Dict[str, str]


class BackgroundScheduler:
    """Collects deferred work for one interaction until the ack has been sent."""

    def __init__(self):
        self._pending: List[DeferredWork] = []
        self.results: List[AsyncResult] = []

    @property
    def pending(self) -> int:
        return len(self._pending)

    def defer(self, interaction: Interaction, work: str, fallback: str = DEFAULT_FALLBACK_MESSAGE, **params: Any) -> None:
        """
        Queues `work` to complete `interaction` in the background.

        `work` is the dotted path of a function called as
        `work(interaction, **params)` that returns the message to write over
        the original response. `fallback` is written instead if it fails.
        `params` must be JSON serializable.
        """
        tags = handler_tags(interaction)
        signature = run_deferred.s(work, dict(interaction.raw), fallback, params, tags)
        self._pending.append(DeferredWork(signature, interaction, work, fallback, tags))
        LOGGER.debug(f"Deferred '{work}' for interaction {interaction.id}")

    def discard(self) -> None:
        if self._pending:
            LOGGER.info(f"Discarding {len(self._pending)} deferred task(s)")
        self._pending = []

    def dispatch(self) -> List[AsyncResult]:
        """
        Hands every queued task to Celery and returns their result handles.

        A task that cannot be queued gets its fallback edit and is reported
        here, since no worker will ever see it. The rest of the queue is still
        dispatched.
        """
        pending, self._pending = self._pending, []
        for deferred in pending:
            try:
                self.results.append(deferred.signature.apply_async())
            except Exception as e:
                LOGGER.exception(f"Could not queue '{deferred.work}' for interaction {deferred.interaction.id}: {e}")
                reporter = ErrorReporter(
                    transaction_name=f"deferred: {deferred.work}",
                    tags={"deferred": deferred.work, **deferred.tags},
                )
                reporter.set_context("interaction", interaction_context(deferred.interaction))
                send_fallback_edit(DiscordClient(get_config()), deferred.interaction, deferred.fallback)
                reporter.capture_exception(e)
        return self.results


class AckResponse(JsonResponse):
    """
    A JSON interaction response that releases the scheduler's queued work once
    the response has been fully written and closed.
    """

    def __init__(self, envelope: Dict[str, Any], scheduler: BackgroundScheduler, **kwargs):
        super().__init__(envelope, **kwargs)
        self.scheduler = scheduler

    def close(self):
        try:
            super().close()
        finally:
            self.scheduler.dispatch()
