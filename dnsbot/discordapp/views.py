# dnsbot/discordapp/views.py

"""
Main Views for the DNS over Discord application.

The main entry point is `interactions`, which receives every webhook Discord
sends: it verifies the signature, parses the body and hands the interaction
to the `InteractionRouter`. The remaining views are the health check, the
legal notices and a few permanent redirects.
"""

# Standard library imports
import json
import logging

# Django imports
from django.http import (HttpRequest, HttpResponse,
                         HttpResponsePermanentRedirect)
from django.views.decorators.csrf import csrf_exempt

# Local application imports
from .config import get_config
from .deferred import BackgroundScheduler
from .exceptions import InvalidInteraction
from .interactions import Interaction
from .registry import get_registry
from .reporting import ErrorReporter
from .router import InteractionRouter
from .strings import PRIVACY, TERMS
from .utils import allow_methods, discord_verification_required

LOGGER = logging.getLogger(__name__)

SERVER_URL = "https://discord.gg/JgxVfGn"
GITHUB_URL = "https://github.com/MattIPv4/DNS-over-Discord"
DOCS_URL = "https://developers.cloudflare.com/1.1.1.1/other-ways-to-use-1.1.1.1/dns-over-discord"


# ==============================================================================
# 1. Discord Entry Point (Webhook Receiver)
# ==============================================================================

@csrf_exempt
@allow_methods("POST")
@discord_verification_required
def interactions(request: HttpRequest) -> HttpResponse:
    """
    Handles and routes every interaction Discord delivers.

    Only reached once the signature has been verified against the raw body;
    the body is decoded afterwards. Each request gets its own scheduler and
    error reporter, so deferred work and report tags stay tied to the one
    interaction they belong to.
    """
    try:
        interaction = Interaction.from_payload(json.loads(request.body))
    except (ValueError, InvalidInteraction) as e:
        LOGGER.warning(f"Signed interaction body could not be parsed: {e}")
        return HttpResponse(status=400)

    LOGGER.info(f"Interaction {interaction.id} of type {interaction.type!r} received")

    router = InteractionRouter(get_registry, get_config())
    return router.dispatch(interaction, BackgroundScheduler(), ErrorReporter())


# ==============================================================================
# 2. Static Routes
# ==============================================================================

@allow_methods("GET")
def health(request: HttpRequest) -> HttpResponse:
    response = HttpResponse("OK", content_type="text/plain")
    response["Cache-Control"] = "no-store, no-cache, must-revalidate, proxy-revalidate"
    response["Expires"] = "0"
    response["Surrogate-Control"] = "no-store"
    return response


@allow_methods("GET")
def privacy(request: HttpRequest) -> HttpResponse:
    return HttpResponse(PRIVACY, content_type="text/plain")


@allow_methods("GET")
def terms(request: HttpRequest) -> HttpResponse:
    return HttpResponse(TERMS, content_type="text/plain")


@allow_methods("GET")
def invite(request: HttpRequest) -> HttpResponse:
    return HttpResponsePermanentRedirect(get_config().invite_url)


@allow_methods("GET")
def server(request: HttpRequest) -> HttpResponse:
    return HttpResponsePermanentRedirect(SERVER_URL)


@allow_methods("GET")
def github(request: HttpRequest) -> HttpResponse:
    return HttpResponsePermanentRedirect(GITHUB_URL)


@allow_methods("GET")
def docs(request: HttpRequest) -> HttpResponse:
    return HttpResponsePermanentRedirect(DOCS_URL)


def not_found(request: HttpRequest, exception=None) -> HttpResponse:
    """Replaces Django's 404 page; unknown routes get an empty 404."""
    return HttpResponse(status=404)
