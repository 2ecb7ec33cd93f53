"""
Message component handlers.

Each module is named after the custom_id it handles (dashes become
underscores) and exposes its handler as `component`. Modules are loaded on
demand by `discordapp.registry.ModuleComponentResolver`.
"""
