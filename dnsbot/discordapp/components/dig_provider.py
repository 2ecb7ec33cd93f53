# dnsbot/discordapp/components/dig_provider.py

"""The provider select menu under a dig result: repeats the lookup with another provider."""

from typing import Any, Dict

from ..commands.dig import FAILURE_MESSAGE, LOOKUP_WORK
from ..discord_blocks import PROVIDER_CUSTOM_ID, get_query_from_message
from ..dns import get_provider
from ..handlers import ComponentHandler, HandlerContext
from ..interactions import ResponseType, ephemeral_message


class DigProviderComponent(ComponentHandler):
    custom_id = PROVIDER_CUSTOM_ID

    def execute(self, context: HandlerContext) -> Dict[str, Any]:
        query = get_query_from_message(context.interaction.message)
        if query is None:
            return ephemeral_message("This message no longer contains a DNS query to repeat.")

        domain, record_type, _, short, cdflag = query
        values = context.interaction.data.values
        provider = get_provider(values[0] if values else None)

        context.scheduler.defer(
            context.interaction,
            LOOKUP_WORK,
            fallback=FAILURE_MESSAGE,
            domain=domain,
            record_type=record_type,
            provider=provider.name,
            short=short,
            cdflag=cdflag,
        )
        return context.responder(ResponseType.DEFERRED_UPDATE_MESSAGE)


component = DigProviderComponent()
