# dnsbot/discordapp/reporting.py

"""
Error reporting for interaction handling.

`ErrorReporter` wraps the Sentry SDK behind the three capabilities the app
needs: naming the transaction, tagging it, and capturing an exception. Each
interaction (and each deferred task) gets its own reporter, so tags set while
handling one interaction never leak into another. When Sentry is not
configured the SDK calls are no-ops and the reporter only logs.
"""

# Standard library imports
import logging
from typing import Any, Dict, Optional

# Third-party imports
import sentry_sdk

# Local application imports
from .interactions import ComponentData

LOGGER = logging.getLogger(__name__)


class ErrorReporter:
    def __init__(self, transaction_name: Optional[str] = None, tags: Optional[Dict[str, str]] = None):
        self.transaction_name = transaction_name
        self.tags: Dict[str, str] = dict(tags or {})
        self.context: Dict[str, Any] = {}

    def set_transaction_name(self, name: str) -> None:
        self.transaction_name = name

    def set_tag(self, key: str, value: str) -> None:
        self.tags[key] = value

    def set_context(self, key: str, value: Dict[str, Any]) -> None:
        self.context[key] = value

    def capture_exception(self, exc: BaseException) -> None:
        """Logs `exc` with the current tags and forwards it to Sentry."""
        LOGGER.error(
            f"Reporting {type(exc).__name__} for '{self.transaction_name or 'unnamed'}' "
            f"with tags {self.tags}",
            exc_info=exc,
        )
        with sentry_sdk.new_scope() as scope:
            if self.transaction_name:
                scope.set_transaction_name(self.transaction_name)
            for key, value in self.tags.items():
                scope.set_tag(key, value)
            for key, value in self.context.items():
                scope.set_context(key, value)
            sentry_sdk.capture_exception(exc)


def interaction_context(interaction) -> Dict[str, Any]:
    """The parts of an interaction that are safe to attach to a report (no token)."""
    return {
        "id": interaction.id,
        "type": int(interaction.type) if isinstance(interaction.type, int) else str(interaction.type),
        "application_id": interaction.application_id,
    }


def handler_tags(interaction) -> Dict[str, str]:
    """The `command` or `component` tag naming the handler unit behind `interaction`."""
    data = interaction.data
    if data is None:
        return {}
    if isinstance(data, ComponentData):
        return {"component": data.custom_id}
    return {"command": data.name}
