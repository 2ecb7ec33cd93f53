# dnsbot/discordapp/commands/dig.py

"""
The /dig command: a DNS lookup answered through a deferred response.

Validation happens synchronously so a bad domain is answered straight away
with an ephemeral message. A valid query is acknowledged with a deferred
"thinking" response, and the lookup itself runs in the background via
`run_lookup`, which produces the message that replaces the acknowledgement.
"""

import logging
from typing import Any, Dict

from ..config import get_config
from ..discord_blocks import get_result_message
from ..dns import PROVIDERS, VALID_TYPES, get_provider, perform_lookup, validate_domain
from ..handlers import CommandHandler, HandlerContext, option_choices
from ..interactions import Interaction, MessageFlags, OptionType, ResponseType

LOGGER = logging.getLogger(__name__)

FAILURE_MESSAGE = "Sorry, something went wrong when processing your DNS query"
LOOKUP_WORK = "discordapp.commands.dig.run_lookup"

# Discord allows at most 25 choices per option.
OPTION_TYPES = VALID_TYPES[:25]


def run_lookup(interaction: Interaction, domain: str, record_type: str, provider: str,
               short: bool = False, cdflag: bool = False) -> Dict[str, Any]:
    """Deferred work shared by the command and its components."""
    result = perform_lookup(
        domain,
        record_type,
        get_provider(provider),
        cdflag=cdflag,
        timeout=get_config().http_timeout,
    )
    return get_result_message(result, short=short, cdflag=cdflag)


class DigCommand(CommandHandler):
    name = "dig"
    description = "Perform a DNS over Discord lookup"
    options = (
        {
            "name": "domain",
            "description": "The domain to lookup",
            "type": int(OptionType.STRING),
            "required": True,
        },
        {
            "name": "type",
            "description": "DNS record type to lookup",
            "type": int(OptionType.STRING),
            "required": False,
            "choices": option_choices(list(OPTION_TYPES), "{} records"),
        },
        {
            "name": "short",
            "description": "Display the results in short form",
            "type": int(OptionType.BOOLEAN),
            "required": False,
        },
        {
            "name": "cdflag",
            "description": "Disable DNSSEC checking",
            "type": int(OptionType.BOOLEAN),
            "required": False,
        },
        {
            "name": "provider",
            "description": "DNS provider to use",
            "type": int(OptionType.STRING),
            "required": False,
            "choices": option_choices([provider.name for provider in PROVIDERS]),
        },
    )

    def execute(self, context: HandlerContext) -> Dict[str, Any]:
        data = context.interaction.data
        raw_domain = str(data.option("domain", "")).strip()
        raw_type = str(data.option("type", "")).strip()
        raw_provider = str(data.option("provider", "")).strip()

        domain, error = validate_domain(raw_domain)
        if error:
            return context.responder(ResponseType.CHANNEL_MESSAGE_WITH_SOURCE, error, flags=MessageFlags.EPHEMERAL)

        record_type = raw_type if raw_type in VALID_TYPES else "A"
        provider = get_provider(raw_provider)

        context.scheduler.defer(
            context.interaction,
            LOOKUP_WORK,
            fallback=FAILURE_MESSAGE,
            domain=domain,
            record_type=record_type,
            provider=provider.name,
            short=bool(data.option("short", False)),
            cdflag=bool(data.option("cdflag", False)),
        )
        LOGGER.info(f"Deferred dig {domain} {record_type} via {provider.name} for interaction {context.interaction.id}")

        return context.responder(ResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE)
