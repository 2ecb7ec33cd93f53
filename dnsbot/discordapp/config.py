# dnsbot/discordapp/config.py

"""
Immutable runtime configuration for the Discord app.

Settings are read from `django.conf.settings` exactly once and frozen into a
`BotConfig`, which is then handed explicitly to the router, handlers and
background tasks. The cached value is only rebuilt when Django reports a
settings change, which in practice happens in tests.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver


@dataclass(frozen=True)
class BotConfig:
    public_key: str
    client_id: str
    api_base: str
    commands_file: str
    http_timeout: float = 10.0
    signature_max_age: Optional[int] = None

    @classmethod
    def from_settings(cls, source=settings) -> "BotConfig":
        return cls(
            public_key=source.DISCORD_PUBLIC_KEY or "",
            client_id=source.DISCORD_CLIENT_ID or "",
            api_base=source.DISCORD_API_BASE.rstrip("/"),
            commands_file=str(source.DISCORD_COMMANDS_FILE),
            http_timeout=float(source.HTTP_TIMEOUT),
            signature_max_age=source.DISCORD_SIGNATURE_MAX_AGE,
        )

    @property
    def invite_url(self) -> str:
        return (
            "https://discord.com/oauth2/authorize"
            f"?client_id={self.client_id}&scope=applications.commands"
        )


@lru_cache(maxsize=None)
def get_config() -> BotConfig:
    return BotConfig.from_settings()


@receiver(setting_changed)
def _reset_config(**kwargs):
    get_config.cache_clear()
