import json
from unittest.mock import MagicMock

import pytest
import requests

from discordapp import tasks
from discordapp.commands import dig
from discordapp.discord import DiscordClient
from discordapp.discord_blocks import get_query_from_message, get_result_embed
from discordapp.dns import (PROVIDERS, Answer, LookupResult, get_provider,
                            perform_lookup, validate_domain)
from discordapp.exceptions import DnsLookupError


RESULT = LookupResult(
    domain="example.com",
    record_type="A",
    provider="Cloudflare",
    status="NOERROR",
    answers=(Answer(name="example.com", type="A", ttl=300, data="93.184.216.34"),),
)


def _dig(options, interaction_id="900", token="tok"):
    return {
        "id": interaction_id, "type": 2, "application_id": "app", "token": token,
        "data": {"id": "100", "name": "dig", "options": options},
    }


@pytest.fixture
def lookups(monkeypatch):
    calls = []

    def fake_lookup(domain, record_type, provider, cdflag=False, timeout=10.0, session=None):
        calls.append((domain, record_type, provider.name, cdflag))
        return LookupResult(domain=domain, record_type=record_type, provider=provider.name,
                            status="NOERROR", answers=RESULT.answers)

    monkeypatch.setattr(dig, "perform_lookup", fake_lookup)
    return calls


@pytest.fixture
def edits(monkeypatch):
    calls = []

    def fake_edit(self, interaction, message):
        calls.append((interaction.token, message))
        return {}

    monkeypatch.setattr(DiscordClient, "edit_original_response", fake_edit)
    return calls


def test_dig_acks_with_deferred_response_then_edits_with_the_result(post_interaction, lookups, edits):
    response = post_interaction(_dig([
        {"name": "domain", "type": 3, "value": " https://Example.com/path "},
        {"name": "type", "type": 3, "value": "AAAA"},
        {"name": "provider", "type": 3, "value": "Google"},
    ]))

    assert response.status_code == 200
    assert json.loads(response.content) == {"type": 5}

    assert lookups == [("example.com", "AAAA", "Google", False)]
    assert len(edits) == 1
    token, message = edits[0]
    assert token == "tok"
    assert message["embeds"][0]["title"] == "example.com AAAA records"
    assert "93.184.216.34" in message["embeds"][0]["description"]
    assert [row["components"][0]["custom_id"] for row in message["components"]] == ["dig-provider", "dig-refresh"]


def test_dig_defaults_type_and_provider(post_interaction, lookups, edits):
    post_interaction(_dig([
        {"name": "domain", "type": 3, "value": "example.com"},
        {"name": "type", "type": 3, "value": "BOGUS"},
        {"name": "cdflag", "type": 5, "value": True},
    ]))

    assert lookups == [("example.com", "A", "Cloudflare", True)]


def test_invalid_domain_is_answered_immediately(post_interaction, lookups, edits):
    response = post_interaction(_dig([{"name": "domain", "type": 3, "value": "not a domain!"}]))

    body = json.loads(response.content)
    assert body["type"] == 4
    assert body["data"]["flags"] == 64
    assert "not a valid domain" in body["data"]["content"]
    assert lookups == []
    assert edits == []


def test_failed_lookup_edits_the_fallback_message(post_interaction, monkeypatch, edits):
    reporter = MagicMock()
    monkeypatch.setattr(tasks, "ErrorReporter", lambda **kwargs: reporter)

    def broken_lookup(*args, **kwargs):
        raise DnsLookupError("provider down")

    monkeypatch.setattr(dig, "perform_lookup", broken_lookup)

    response = post_interaction(_dig([{"name": "domain", "type": 3, "value": "example.com"}]))

    assert json.loads(response.content) == {"type": 5}
    assert edits == [("tok", {"content": dig.FAILURE_MESSAGE, "embeds": [], "components": []})]
    reporter.capture_exception.assert_called_once()


def test_refresh_button_repeats_the_lookup_from_the_message(post_interaction, lookups, edits):
    message = {"embeds": [get_result_embed(RESULT, short=True)]}
    response = post_interaction({
        "id": "901", "type": 3, "application_id": "app", "token": "tok2",
        "data": {"custom_id": "dig-refresh", "component_type": 2},
        "message": message,
    })

    assert json.loads(response.content) == {"type": 6}
    assert lookups == [("example.com", "A", "Cloudflare", False)]
    assert edits[0][0] == "tok2"
    assert edits[0][1]["embeds"][0]["footer"]["text"] == "Provider: Cloudflare | short"


def test_provider_select_repeats_the_lookup_with_the_new_provider(post_interaction, lookups, edits):
    response = post_interaction({
        "id": "902", "type": 3, "application_id": "app", "token": "tok3",
        "data": {"custom_id": "dig-provider", "component_type": 3, "values": ["Google"]},
        "message": {"embeds": [get_result_embed(RESULT)]},
    })

    assert json.loads(response.content) == {"type": 6}
    assert lookups == [("example.com", "A", "Google", False)]


def test_component_on_a_message_without_a_result(post_interaction, lookups):
    response = post_interaction({
        "type": 3, "data": {"custom_id": "dig-refresh"}, "message": {"embeds": []},
    })

    body = json.loads(response.content)
    assert body["data"]["flags"] == 64
    assert lookups == []


def test_query_round_trips_through_the_embed():
    assert get_query_from_message({"embeds": [get_result_embed(RESULT)]}) == ("example.com", "A", "Cloudflare", False, False)
    assert get_query_from_message({"embeds": [{"title": "something else"}]}) is None


def test_refresh_keeps_dnssec_checking_disabled(post_interaction, lookups, edits):
    message = {"embeds": [get_result_embed(RESULT, cdflag=True)]}
    post_interaction({
        "id": "903", "type": 3, "application_id": "app", "token": "tok4",
        "data": {"custom_id": "dig-refresh", "component_type": 2},
        "message": message,
    })

    assert lookups == [("example.com", "A", "Cloudflare", True)]
    assert edits[0][1]["embeds"][0]["footer"]["text"] == "Provider: Cloudflare | cd"


def test_query_round_trips_short_and_cdflag():
    embed = get_result_embed(RESULT, short=True, cdflag=True)

    assert embed["footer"]["text"] == "Provider: Cloudflare | short | cd"
    assert get_query_from_message({"embeds": [embed]}) == ("example.com", "A", "Cloudflare", True, True)


@pytest.mark.parametrize("payload, tag", [
    (_dig([{"name": "domain", "type": 3, "value": "example.com"}]), {"command": "dig"}),
    ({
        "id": "904", "type": 3, "application_id": "app", "token": "tok",
        "data": {"custom_id": "dig-refresh", "component_type": 2},
        "message": {"embeds": [get_result_embed(RESULT)]},
    }, {"component": "dig-refresh"}),
])
def test_deferred_failures_are_tagged_with_their_handler(post_interaction, monkeypatch, edits, payload, tag):
    created = []

    def make_reporter(**kwargs):
        created.append(kwargs)
        return MagicMock()

    monkeypatch.setattr(tasks, "ErrorReporter", make_reporter)

    def broken_lookup(*args, **kwargs):
        raise DnsLookupError("provider down")

    monkeypatch.setattr(dig, "perform_lookup", broken_lookup)

    post_interaction(payload)

    assert created == [{
        "transaction_name": f"deferred: {dig.LOOKUP_WORK}",
        "tags": {"deferred": dig.LOOKUP_WORK, **tag},
    }]


def test_empty_answer_shows_the_status():
    result = LookupResult(domain="nope.example", record_type="A", provider="Google", status="NXDOMAIN")
    assert "No records found (NXDOMAIN)" in get_result_embed(result)["description"]


@pytest.mark.parametrize("raw, expected", [
    ("example.com", "example.com"),
    ("EXAMPLE.com.", "example.com"),
    ("https://user@example.com:8443/a?b#c", "example.com"),
    ("bücher.de", "xn--bcher-kva.de"),
    ("_dmarc.example.com", "_dmarc.example.com"),
])
def test_validate_domain_normalizes(raw, expected):
    assert validate_domain(raw) == (expected, None)


@pytest.mark.parametrize("raw", ["", "   ", "exa mple.com", "-bad.com", "a" * 64 + ".com"])
def test_validate_domain_rejects(raw):
    domain, error = validate_domain(raw)
    assert domain is None
    assert error


def test_get_provider_falls_back_to_the_first():
    assert get_provider("Google").name == "Google"
    assert get_provider("Unknown") is PROVIDERS[0]
    assert get_provider(None) is PROVIDERS[0]


def test_perform_lookup_parses_the_json_answer():
    session = MagicMock()
    session.get.return_value.json.return_value = {
        "Status": 0,
        "Answer": [{"name": "example.com.", "type": 1, "TTL": 60, "data": "1.2.3.4"}],
    }

    result = perform_lookup("example.com", "A", PROVIDERS[0], cdflag=True, timeout=3, session=session)

    assert result.status == "NOERROR"
    assert result.answers == (Answer(name="example.com", type="A", ttl=60, data="1.2.3.4"),)
    _, kwargs = session.get.call_args
    assert kwargs["params"]["cd"] == "true"
    assert kwargs["headers"] == {"Accept": "application/dns-json"}
    assert kwargs["timeout"] == 3


def test_perform_lookup_wraps_http_errors():
    session = MagicMock()
    session.get.side_effect = requests.Timeout("slow")

    with pytest.raises(DnsLookupError):
        perform_lookup("example.com", "A", PROVIDERS[0], session=session)
