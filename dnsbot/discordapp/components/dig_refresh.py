# dnsbot/discordapp/components/dig_refresh.py

"""The "Refresh" button under a dig result: runs the same lookup again."""

from typing import Any, Dict

from ..commands.dig import FAILURE_MESSAGE, LOOKUP_WORK
from ..discord_blocks import REFRESH_CUSTOM_ID, get_query_from_message
from ..handlers import ComponentHandler, HandlerContext
from ..interactions import ResponseType, ephemeral_message


class DigRefreshComponent(ComponentHandler):
    custom_id = REFRESH_CUSTOM_ID

    def execute(self, context: HandlerContext) -> Dict[str, Any]:
        query = get_query_from_message(context.interaction.message)
        if query is None:
            return ephemeral_message("This message no longer contains a DNS query to refresh.")

        domain, record_type, provider, short, cdflag = query
        context.scheduler.defer(
            context.interaction,
            LOOKUP_WORK,
            fallback=FAILURE_MESSAGE,
            domain=domain,
            record_type=record_type,
            provider=provider,
            short=short,
            cdflag=cdflag,
        )
        return context.responder(ResponseType.DEFERRED_UPDATE_MESSAGE)


component = DigRefreshComponent()
