# dnsbot/discordapp/discord_blocks.py

"""
Discord Message Construction Utilities

Builds the embeds and message components the bot sends: the result embed for
a DNS lookup and the button and select menu attached to it. The components
read the query back from the embed they are attached to, so the title and
footer formats below double as the state carried between interactions.
"""

# Standard library imports
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

# Local application imports
from .dns import PROVIDERS, LookupResult, answer_lines
from .interactions import ButtonStyle, ComponentType

EMBED_COLOR = 0xF48120
DESCRIPTION_LIMIT = 4096

REFRESH_CUSTOM_ID = "dig-refresh"
PROVIDER_CUSTOM_ID = "dig-provider"

TITLE_PATTERN = re.compile(r"^(?P<domain>\S+) (?P<type>[A-Z0-9]+) records$")
FOOTER_PATTERN = re.compile(r"^Provider: (?P<provider>[^|]+?)(?P<short> \| short)?(?P<cdflag> \| cd)?$")


def get_result_embed(result: LookupResult, short: bool = False, cdflag: bool = False) -> Dict[str, Any]:
    """
    Generates the embed showing the answers to one lookup.

    Empty answers are shown with the response code (e.g. NXDOMAIN) and any
    comment the provider attached, so the user can tell "no records" from
    "no such domain".
    """
    lines = answer_lines(result, short=short)
    if lines:
        body = "\n".join(lines)
    else:
        body = f"No records found ({result.status})"
        if result.comment:
            body += f"\n{result.comment}"

    description = f"```\n{body}\n```"
    if len(description) > DESCRIPTION_LIMIT:
        description = f"```\n{body[:DESCRIPTION_LIMIT - 12]}\n...\n```"

    footer = f"Provider: {result.provider}"
    if short:
        footer += " | short"
    if cdflag:
        footer += " | cd"

    return {
        "title": f"{result.domain} {result.record_type} records",
        "description": description,
        "color": EMBED_COLOR,
        "footer": {"text": footer},
    }


def get_query_from_message(message: Mapping[str, Any]) -> Optional[Tuple[str, str, str, bool, bool]]:
    """
    Reads `(domain, record type, provider, short, cdflag)` back from a result message.

    Returns None if the message does not carry a result embed.
    """
    embeds = message.get("embeds") or []
    if not embeds:
        return None

    embed = embeds[0]
    title = TITLE_PATTERN.match(embed.get("title") or "")
    footer = FOOTER_PATTERN.match((embed.get("footer") or {}).get("text") or "")
    if not title or not footer:
        return None

    return (
        title.group("domain"),
        title.group("type"),
        footer.group("provider"),
        bool(footer.group("short")),
        bool(footer.group("cdflag")),
    )


def get_refresh_button(custom_id: str) -> Dict[str, Any]:
    return {
        "type": int(ComponentType.BUTTON),
        "style": int(ButtonStyle.SECONDARY),
        "label": "Refresh",
        "custom_id": custom_id,
    }


def get_provider_select(custom_id: str, selected: str) -> Dict[str, Any]:
    return {
        "type": int(ComponentType.STRING_SELECT),
        "custom_id": custom_id,
        "placeholder": "DNS provider",
        "options": [
            {
                "label": provider.name,
                "value": provider.name,
                "default": provider.name == selected,
            }
            for provider in PROVIDERS
        ],
    }


def get_action_rows(*components: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Puts each component on its own action row."""
    return [{"type": int(ComponentType.ACTION_ROW), "components": [component]} for component in components]


def get_result_message(result: LookupResult, short: bool = False, cdflag: bool = False) -> Dict[str, Any]:
    """The full edit payload for a lookup: result embed plus refresh/provider controls."""
    return {
        "content": "",
        "embeds": [get_result_embed(result, short=short, cdflag=cdflag)],
        "components": get_action_rows(
            get_provider_select(PROVIDER_CUSTOM_ID, result.provider),
            get_refresh_button(REFRESH_CUSTOM_ID),
        ),
    }
