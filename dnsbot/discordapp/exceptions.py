# dnsbot/discordapp/exceptions.py

"""Exceptions raised inside the Discord interactions app."""

from typing import Any, Optional


class InvalidInteraction(ValueError):
    """A verified request body that is not a usable interaction object."""


class HandlerNotFound(LookupError):
    """No handler unit can be loaded for a component custom_id.

    This is the routine outcome for stale or unknown components, so it is kept
    apart from failures raised while a handler is loaded or executed.
    """

    def __init__(self, key: str):
        super().__init__(f"No handler found for '{key}'")
        self.key = key


class DiscordApiError(Exception):
    """A call to the Discord HTTP API returned a non-success status."""

    def __init__(self, message: str, status_code: int, body: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class DnsLookupError(Exception):
    """A DNS-over-HTTPS provider could not be queried."""
