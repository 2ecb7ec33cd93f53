# dnsbot/discordapp/router.py

"""
Dispatch of verified interactions to handler units.

The router turns one parsed `Interaction` into exactly one HTTP response:

- pings are answered with a pong without touching the registry;
- commands are looked up by id (unknown id: 404) and executed; a failing
  command is reported and answered with an ephemeral apology, and a command
  table that cannot be loaded is reported and answered with a bare 500;
- components are resolved by custom_id (unresolvable id: 404) and executed;
  a failing component is reported and answered with a bare 500;
- any other interaction type gets a 501.

Unknown ids and unsupported types are expected traffic and are never reported.
"""

# Standard library imports
import logging
from typing import Callable

# Django imports
from django.http import HttpResponse, JsonResponse

# Local application imports
from .config import BotConfig
from .deferred import AckResponse
from .exceptions import HandlerNotFound
from .handlers import HandlerContext
from .interactions import (Interaction, InteractionType, ResponseType,
                           build_response, ephemeral_message)
from .registry import HandlerRegistry
from .reporting import interaction_context

LOGGER = logging.getLogger(__name__)

COMMAND_ERROR_MESSAGE = "An unexpected error occurred when executing the command."


class InteractionRouter:
    def __init__(self, registry: Callable[[], HandlerRegistry], config: BotConfig):
        # The registry is only built when a command or component needs it, so a
        # broken manifest can never take pings down with it.
        self._registry = registry
        self.config = config

    def dispatch(self, interaction: Interaction, scheduler, reporter) -> HttpResponse:
        reporter.set_context("interaction", interaction_context(interaction))

        kind = interaction.kind
        if kind is InteractionType.PING:
            return JsonResponse({"type": int(ResponseType.PONG)})
        if kind is InteractionType.APPLICATION_COMMAND:
            return self._handle_command(interaction, scheduler, reporter)
        if kind is InteractionType.MESSAGE_COMPONENT:
            return self._handle_component(interaction, scheduler, reporter)

        LOGGER.info(f"Unimplemented interaction type {interaction.type!r} (id {interaction.id})")
        return HttpResponse(status=501)

    def _context(self, interaction, scheduler, reporter) -> HandlerContext:
        return HandlerContext(
            interaction=interaction,
            responder=build_response,
            scheduler=scheduler,
            reporter=reporter,
            config=self.config,
        )

    def _handle_command(self, interaction: Interaction, scheduler, reporter) -> HttpResponse:
        name = interaction.data.name
        reporter.set_transaction_name(f"command: {name}")
        reporter.set_tag("command", name)

        try:
            descriptor = self._registry().resolve_command(interaction.data.id)
        except Exception as e:
            LOGGER.exception(f"Could not load the command registry for interaction {interaction.id}: {e}")
            reporter.capture_exception(e)
            return HttpResponse(status=500)
        if descriptor is None:
            LOGGER.info(f"Unknown command id '{interaction.data.id}' ('{name}')")
            return HttpResponse(status=404)

        try:
            envelope = descriptor.handler.execute(self._context(interaction, scheduler, reporter))
        except Exception as e:
            LOGGER.exception(f"Command '{descriptor.name}' failed for interaction {interaction.id}: {e}")
            scheduler.discard()
            reporter.capture_exception(e)
            envelope = ephemeral_message(COMMAND_ERROR_MESSAGE)

        return AckResponse(envelope, scheduler)

    def _handle_component(self, interaction: Interaction, scheduler, reporter) -> HttpResponse:
        custom_id = interaction.data.custom_id
        reporter.set_transaction_name(f"component: {custom_id}")
        reporter.set_tag("component", custom_id)

        try:
            try:
                handler = self._registry().resolve_component(custom_id)
            except HandlerNotFound:
                LOGGER.info(f"No component handler for custom_id '{custom_id}'")
                return HttpResponse(status=404)
            envelope = handler.execute(self._context(interaction, scheduler, reporter))
        except Exception as e:
            LOGGER.exception(f"Component '{custom_id}' failed for interaction {interaction.id}: {e}")
            scheduler.discard()
            reporter.capture_exception(e)
            return HttpResponse(status=500)

        return AckResponse(envelope, scheduler)
