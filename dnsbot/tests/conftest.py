import json
import time
from unittest.mock import MagicMock

import pytest
from nacl.encoding import HexEncoder
from nacl.signing import SigningKey

from discordapp.config import BotConfig
from discordapp.handlers import CommandHandler, ComponentHandler
from discordapp.registry import CommandDescriptor, HandlerRegistry
from dnsbot.celery import app as celery_app


@pytest.fixture
def signing_key():
    return SigningKey.generate()


@pytest.fixture
def public_key(signing_key):
    return signing_key.verify_key.encode(encoder=HexEncoder).decode()


@pytest.fixture
def commands_file(tmp_path):
    path = tmp_path / "commands.json"
    path.write_text(json.dumps([{"id": "100", "name": "dig", "type": 1}]))
    return path


@pytest.fixture(autouse=True)
def discord_settings(settings, public_key, commands_file):
    settings.DISCORD_PUBLIC_KEY = public_key
    settings.DISCORD_CLIENT_ID = "123456789"
    settings.DISCORD_API_BASE = "https://discord.test/api/v10"
    settings.DISCORD_COMMANDS_FILE = str(commands_file)
    settings.DISCORD_SIGNATURE_MAX_AGE = None
    settings.HTTP_TIMEOUT = 5
    return settings


@pytest.fixture(autouse=True)
def eager_celery():
    celery_app.conf.task_always_eager = True
    celery_app.conf.task_eager_propagates = False
    yield
    celery_app.conf.task_always_eager = False


@pytest.fixture
def config(discord_settings):
    return BotConfig.from_settings(discord_settings)


@pytest.fixture
def sign(signing_key):
    """Returns headers carrying a valid signature for `body`."""
    def _sign(body: bytes, timestamp: str = None):
        timestamp = timestamp or str(int(time.time()))
        signature = signing_key.sign(timestamp.encode() + body).signature.hex()
        return {
            "HTTP_X_SIGNATURE_ED25519": signature,
            "HTTP_X_SIGNATURE_TIMESTAMP": timestamp,
        }
    return _sign


@pytest.fixture
def post_interaction(client, sign):
    """POSTs `payload` to /interactions with a valid signature."""
    def _post(payload):
        body = json.dumps(payload).encode()
        return client.post("/interactions", data=body, content_type="application/json", **sign(body))
    return _post


@pytest.fixture
def reporter():
    return MagicMock(name="ErrorReporter")


class RecordingScheduler:
    def __init__(self, events=None):
        self.deferred = []
        self.discarded = False
        self.events = events if events is not None else []

    def defer(self, interaction, work, fallback=None, **params):
        self.deferred.append((interaction, work, fallback, params))
        self.events.append("defer")

    def discard(self):
        self.discarded = True
        self.deferred = []

    def dispatch(self):
        self.events.append("dispatch")
        return []


@pytest.fixture
def scheduler():
    return RecordingScheduler()


class StaticCommand(CommandHandler):
    def __init__(self, name, envelope=None, error=None):
        self.name = name
        self.envelope = envelope or {"type": 4, "data": {"content": "ok"}}
        self.error = error
        self.calls = []

    def execute(self, context):
        self.calls.append(context)
        if self.error:
            raise self.error
        return self.envelope


class StaticComponent(ComponentHandler):
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def execute(self, context):
        self.calls.append(context)
        if self.error:
            raise self.error
        return {"type": 6}


class DictResolver:
    def __init__(self, components):
        self.components = components

    def resolve(self, custom_id):
        from discordapp.exceptions import HandlerNotFound

        try:
            return self.components[custom_id]
        except KeyError:
            raise HandlerNotFound(custom_id)


@pytest.fixture
def make_registry():
    def _make(commands=None, components=None):
        descriptors = {
            command_id: CommandDescriptor(command_id=command_id, name=handler.name, handler=handler)
            for command_id, handler in (commands or {}).items()
        }
        return HandlerRegistry(descriptors, DictResolver(components or {}))
    return _make
