"""
Slash command handlers, keyed by the command name Discord knows them by.

The registry pairs these names with the ids Discord assigned at registration.
"""

from .dig import DigCommand

COMMANDS = {
    handler.name: handler
    for handler in (
        DigCommand(),
    )
}
