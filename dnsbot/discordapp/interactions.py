# dnsbot/discordapp/interactions.py

"""
Discord interaction payloads and response envelopes.

Incoming interaction bodies are parsed into small frozen dataclasses once the
request signature has been verified; the original JSON object is kept on the
`Interaction` as `raw` so that background tasks can be handed the exact same
payload (and therefore the same token) the request carried.

Outgoing responses are plain dictionaries shaped like Discord's interaction
response object. `build_response` is the responder handed to every handler.
"""

# Standard library imports
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

# Local application imports
from .exceptions import InvalidInteraction


class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3


class ResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5
    DEFERRED_UPDATE_MESSAGE = 6
    UPDATE_MESSAGE = 7


class ComponentType(IntEnum):
    ACTION_ROW = 1
    BUTTON = 2
    STRING_SELECT = 3


class ButtonStyle(IntEnum):
    PRIMARY = 1
    SECONDARY = 2


class OptionType(IntEnum):
    STRING = 3
    BOOLEAN = 5


class MessageFlags(IntEnum):
    EPHEMERAL = 1 << 6


@dataclass(frozen=True)
class CommandOption:
    name: str
    type: int
    value: Any = None


@dataclass(frozen=True)
class CommandData:
    id: str
    name: str
    options: Tuple[CommandOption, ...] = ()

    def option(self, name: str, default: Any = None) -> Any:
        """Returns the value of the first option called `name`."""
        for opt in self.options:
            if opt.name == name:
                return opt.value if opt.value is not None else default
        return default


@dataclass(frozen=True)
class ComponentData:
    custom_id: str
    component_type: Optional[int] = None
    values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Interaction:
    id: str
    type: Union[InteractionType, int]
    application_id: str = ""
    token: str = ""
    data: Optional[Union[CommandData, ComponentData]] = None
    message: Mapping[str, Any] = field(default_factory=dict)
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def kind(self) -> Optional[InteractionType]:
        """The interaction type if it is one this app understands."""
        return self.type if isinstance(self.type, InteractionType) else None

    @classmethod
    def from_payload(cls, payload: Any) -> "Interaction":
        """
        Builds an `Interaction` from a decoded JSON body.

        Only the object shape is enforced here. Missing command or component
        fields default to empty values so that routing, not parsing, decides
        what an incomplete interaction means.
        """
        if not isinstance(payload, dict):
            raise InvalidInteraction("Interaction body must be a JSON object.")

        raw_type = payload.get("type")
        interaction_type: Union[InteractionType, int] = raw_type
        if isinstance(raw_type, int) and not isinstance(raw_type, bool):
            try:
                interaction_type = InteractionType(raw_type)
            except ValueError:
                pass

        raw_data = payload.get("data") or {}
        if not isinstance(raw_data, dict):
            raise InvalidInteraction("Interaction data must be a JSON object.")

        data: Optional[Union[CommandData, ComponentData]] = None
        if interaction_type is InteractionType.APPLICATION_COMMAND:
            data = CommandData(
                id=str(raw_data.get("id", "")),
                name=str(raw_data.get("name", "")),
                options=tuple(
                    CommandOption(name=opt.get("name", ""), type=opt.get("type", 0), value=opt.get("value"))
                    for opt in raw_data.get("options") or []
                    if isinstance(opt, dict)
                ),
            )
        elif interaction_type is InteractionType.MESSAGE_COMPONENT:
            data = ComponentData(
                custom_id=str(raw_data.get("custom_id", "")),
                component_type=raw_data.get("component_type"),
                values=tuple(str(value) for value in raw_data.get("values") or []),
            )

        message = payload.get("message")
        return cls(
            id=str(payload.get("id", "")),
            type=interaction_type,
            application_id=str(payload.get("application_id", "")),
            token=str(payload.get("token", "")),
            data=data,
            message=MappingProxyType(message if isinstance(message, dict) else {}),
            raw=MappingProxyType(dict(payload)),
        )


def build_response(
    response_type: ResponseType,
    content: Optional[str] = None,
    *,
    embeds: Optional[List[Dict[str, Any]]] = None,
    components: Optional[List[Dict[str, Any]]] = None,
    flags: Optional[int] = None,
) -> Dict[str, Any]:
    """Builds an interaction response envelope, leaving out unset data fields."""
    data: Dict[str, Any] = {}
    if content is not None:
        data["content"] = content
    if embeds is not None:
        data["embeds"] = embeds
    if components is not None:
        data["components"] = components
    if flags is not None:
        data["flags"] = int(flags)

    envelope: Dict[str, Any] = {"type": int(response_type)}
    if data:
        envelope["data"] = data
    return envelope


def ephemeral_message(content: str) -> Dict[str, Any]:
    """A chat message only the invoking user can see."""
    return build_response(
        ResponseType.CHANNEL_MESSAGE_WITH_SOURCE, content, flags=MessageFlags.EPHEMERAL
    )
