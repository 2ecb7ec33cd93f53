# dnsbot/discordapp/dns.py

"""
DNS-over-HTTPS lookups.

Queries go to a provider's JSON API (`application/dns-json`), which both
Cloudflare and Google serve with the same request parameters and response
shape. This module only knows how to ask and how to validate the question;
turning an answer into a Discord message is done in `discord_blocks`.
"""

# Standard library imports
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Third-party imports
import requests

# Local application imports
from .exceptions import DnsLookupError

LOGGER = logging.getLogger(__name__)

VALID_TYPES = (
    "A", "AAAA", "CAA", "CERT", "CNAME", "DNSKEY", "DS", "HINFO", "HTTPS", "LOC",
    "MX", "NAPTR", "NS", "NSEC", "NSEC3", "NSEC3PARAM", "OPENPGPKEY", "PTR",
    "RRSIG", "SOA", "SPF", "SRV", "SSHFP", "SVCB", "TLSA", "TXT", "URI",
)

# Response codes from RFC 1035 / RFC 6895 that the providers return in "Status".
RCODES = {
    0: "NOERROR",
    1: "FORMERR",
    2: "SERVFAIL",
    3: "NXDOMAIN",
    4: "NOTIMP",
    5: "REFUSED",
}

# Numeric record types as they appear in answers, for display.
TYPE_NAMES = {
    1: "A", 2: "NS", 5: "CNAME", 6: "SOA", 12: "PTR", 13: "HINFO", 15: "MX",
    16: "TXT", 28: "AAAA", 29: "LOC", 33: "SRV", 35: "NAPTR", 37: "CERT",
    39: "DNAME", 43: "DS", 44: "SSHFP", 46: "RRSIG", 47: "NSEC", 48: "DNSKEY",
    50: "NSEC3", 51: "NSEC3PARAM", 52: "TLSA", 61: "OPENPGPKEY", 64: "SVCB",
    65: "HTTPS", 99: "SPF", 256: "URI", 257: "CAA",
}

LABEL_PATTERN = re.compile(r"^(?!-)[a-z0-9_-]{1,63}(?<!-)$")


@dataclass(frozen=True)
class Provider:
    name: str
    endpoint: str


PROVIDERS = (
    Provider(name="Cloudflare", endpoint="https://cloudflare-dns.com/dns-query"),
    Provider(name="Google", endpoint="https://dns.google/resolve"),
)


def get_provider(name: Optional[str]) -> Provider:
    """Finds a provider by name, falling back to the first one."""
    for provider in PROVIDERS:
        if provider.name == name:
            return provider
    return PROVIDERS[0]


@dataclass(frozen=True)
class Answer:
    name: str
    type: str
    ttl: int
    data: str


@dataclass(frozen=True)
class LookupResult:
    domain: str
    record_type: str
    provider: str
    status: str
    answers: Tuple[Answer, ...] = field(default_factory=tuple)
    comment: Optional[str] = None


def validate_domain(raw: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Normalizes user input into a queryable domain.

    Accepts things people paste, such as URLs or a trailing dot, and converts
    internationalized names to their ASCII form. Returns `(domain, None)` on
    success and `(None, error message)` otherwise.
    """
    value = (raw or "").strip().lower()
    value = re.sub(r"^[a-z][a-z0-9+.-]*://", "", value)
    value = value.split("/", 1)[0].split("?", 1)[0].split("#", 1)[0]
    value = value.rsplit("@", 1)[-1].rstrip(".")
    if ":" in value:
        value = value.split(":", 1)[0]

    if not value:
        return None, "A domain name is required."

    try:
        value = value.encode("idna").decode("ascii")
    except UnicodeError:
        return None, f"The domain `{raw.strip()[:100]}` is not a valid domain name."

    labels = value.split(".")
    if len(value) > 253 or not all(LABEL_PATTERN.match(label) for label in labels):
        return None, f"The domain `{raw.strip()[:100]}` is not a valid domain name."

    return value, None


def perform_lookup(domain: str, record_type: str, provider: Provider, cdflag: bool = False,
                   timeout: float = 10.0, session: Optional[requests.Session] = None) -> LookupResult:
    """Runs one DNS-over-HTTPS query and returns the parsed result."""
    http = session or requests
    params = {"name": domain, "type": record_type, "do": "false", "cd": "true" if cdflag else "false"}
    try:
        response = http.get(
            provider.endpoint,
            params=params,
            headers={"Accept": "application/dns-json"},
            timeout=timeout,
        )
        response.raise_for_status()
        body: Dict[str, Any] = response.json()
    except (requests.RequestException, ValueError) as e:
        raise DnsLookupError(f"{provider.name} lookup of {domain} {record_type} failed: {e}") from e

    answers = tuple(
        Answer(
            name=str(record.get("name", "")).rstrip("."),
            type=TYPE_NAMES.get(record.get("type"), str(record.get("type"))),
            ttl=int(record.get("TTL", 0)),
            data=str(record.get("data", "")),
        )
        for record in body.get("Answer") or []
    )
    status = RCODES.get(body.get("Status"), str(body.get("Status")))
    comment = body.get("Comment")
    if isinstance(comment, list):
        comment = " ".join(str(part) for part in comment)

    LOGGER.debug(f"{provider.name} {domain} {record_type}: {status}, {len(answers)} answer(s)")
    return LookupResult(
        domain=domain,
        record_type=record_type,
        provider=provider.name,
        status=status,
        answers=answers,
        comment=comment,
    )


def answer_lines(result: LookupResult, short: bool = False) -> List[str]:
    if short:
        return [answer.data for answer in result.answers]
    return [f"{answer.name} {answer.ttl} IN {answer.type} {answer.data}" for answer in result.answers]
