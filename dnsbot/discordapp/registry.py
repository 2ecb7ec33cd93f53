# dnsbot/discordapp/registry.py

"""
Lookup of command and component handler units.

Commands are known ahead of time: Discord assigns each registered command an
id, and the manifest written at registration time (`DISCORD_COMMANDS_FILE`)
maps those ids to command names. The registry joins that manifest with the
handlers defined in `discordapp.commands` once, and is read-only afterwards.

Components are not enumerated. Their custom_id comes back from messages the
bot sent earlier, possibly by an older deployment, so each one is resolved on
demand to a module under `discordapp.components`. An id that does not resolve
raises `HandlerNotFound`, which the router treats as a routine 404.
"""

# Standard library imports
import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from importlib import import_module
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

# Django imports
from django.core.signals import setting_changed
from django.dispatch import receiver

# Local application imports
from .config import BotConfig, get_config
from .exceptions import HandlerNotFound
from .handlers import CommandHandler, ComponentHandler

LOGGER = logging.getLogger(__name__)

CUSTOM_ID_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")


@dataclass(frozen=True)
class CommandDescriptor:
    command_id: str
    name: str
    handler: CommandHandler

    @property
    def options(self):
        return self.handler.options


class ModuleComponentResolver:
    """Loads the component handler exposed as `component` by `<package>.<custom_id>`."""

    def __init__(self, package: str = "discordapp.components"):
        self.package = package

    def resolve(self, custom_id: str) -> ComponentHandler:
        if not CUSTOM_ID_PATTERN.match(custom_id or ""):
            raise HandlerNotFound(custom_id)

        module_name = f"{self.package}.{custom_id.replace('-', '_')}"
        try:
            module = import_module(module_name)
        except ModuleNotFoundError as e:
            # Only a missing target module means "unknown component"; a missing
            # dependency inside an existing component is a real failure.
            if e.name != module_name:
                raise
            raise HandlerNotFound(custom_id) from e

        handler = getattr(module, "component", None)
        if handler is None:
            raise HandlerNotFound(custom_id)
        return handler


class HandlerRegistry:
    def __init__(self, commands: Mapping[str, CommandDescriptor], component_resolver=None):
        self._commands = MappingProxyType(dict(commands))
        self._component_resolver = component_resolver or ModuleComponentResolver()

    @property
    def commands(self) -> Mapping[str, CommandDescriptor]:
        return self._commands

    def resolve_command(self, command_id: str) -> Optional[CommandDescriptor]:
        return self._commands.get(command_id)

    def resolve_component(self, custom_id: str) -> ComponentHandler:
        return self._component_resolver.resolve(custom_id)


def load_command_manifest(path: str) -> Dict[str, str]:
    """
    Reads the registered-commands manifest into an {id: name} mapping.

    The manifest is Discord's own response to a bulk command registration: a
    JSON list of command objects. A missing file yields an empty mapping, so
    that pings (and therefore endpoint verification) still work on a fresh
    deployment. A file that is not valid JSON, or whose top level is not a
    list or object, raises `ValueError`.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            entries: Any = json.load(fh)
    except FileNotFoundError:
        LOGGER.warning(f"Command manifest '{path}' not found; no commands will be routed.")
        return {}

    if isinstance(entries, dict):
        entries = list(entries.values())
    elif not isinstance(entries, list):
        raise ValueError(f"Command manifest '{path}' must hold a JSON list or object, not {type(entries).__name__}.")
    return {
        str(entry["id"]): str(entry["name"])
        for entry in entries
        if isinstance(entry, dict) and "id" in entry and "name" in entry
    }


def build_registry(config: BotConfig, handlers: Optional[Mapping[str, CommandHandler]] = None) -> HandlerRegistry:
    if handlers is None:
        from .commands import COMMANDS as handlers

    descriptors = {}
    for command_id, name in load_command_manifest(config.commands_file).items():
        handler = handlers.get(name)
        if handler is None:
            LOGGER.warning(f"Registered command '{name}' ({command_id}) has no handler; skipping.")
            continue
        descriptors[command_id] = CommandDescriptor(command_id=command_id, name=name, handler=handler)

    LOGGER.info(f"Loaded {len(descriptors)} command(s): {sorted(d.name for d in descriptors.values())}")
    return HandlerRegistry(descriptors)


@lru_cache(maxsize=None)
def get_registry() -> HandlerRegistry:
    return build_registry(get_config())


@receiver(setting_changed)
def _reset_registry(**kwargs):
    get_registry.cache_clear()
