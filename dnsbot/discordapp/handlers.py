# dnsbot/discordapp/handlers.py

"""
The contract between the router and command/component handler units.

A handler unit is an object with a single `execute(context)` method that
returns a response envelope. Everything it may need is on the context: the
parsed interaction, the responder used to build envelopes, the scheduler used
to defer work past the acknowledgement, the per-interaction error reporter and
the app configuration.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

from .config import BotConfig
from .interactions import Interaction


@dataclass(frozen=True)
class HandlerContext:
    interaction: Interaction
    responder: Callable[..., Dict[str, Any]]
    scheduler: Any
    reporter: Any
    config: BotConfig


class CommandHandler:
    """Base class for slash commands. `options` mirrors Discord's option schema."""

    name: str = ""
    description: str = ""
    options: Tuple[Dict[str, Any], ...] = ()

    def execute(self, context: HandlerContext) -> Dict[str, Any]:
        raise NotImplementedError


class ComponentHandler:
    """Base class for message components, addressed by their custom_id."""

    custom_id: str = ""

    def execute(self, context: HandlerContext) -> Dict[str, Any]:
        raise NotImplementedError


def option_choices(values: List[str], label: str = "{}") -> List[Dict[str, str]]:
    return [{"name": label.format(value), "value": value} for value in values]
