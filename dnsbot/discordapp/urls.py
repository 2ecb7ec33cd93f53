# dnsbot/discordapp/urls.py

"""
URL Configuration for the Discord App.

`interactions` is the endpoint configured as the application's Interactions
Endpoint URL in the Discord developer portal; the rest are plain GET routes.
"""

from django.urls import path
from . import views

app_name = 'discordapp'

urlpatterns = [
    # Discord POSTs every ping, slash command and component click here.
    path("interactions", views.interactions, name="interactions"),

    path("health", views.health, name="health"),
    path("privacy", views.privacy, name="privacy"),
    path("terms", views.terms, name="terms"),
    path("invite", views.invite, name="invite"),
    path("server", views.server, name="server"),
    path("github", views.github, name="github"),
    path("", views.docs, name="docs"),
]
