# dnsbot/dnsbot/urls.py

"""
Root URL configuration for the dnsbot project.

Every public route belongs to the `discordapp` application, mounted at the
site root: `/interactions` for Discord webhooks plus the health, legal and
redirect routes.
"""

from django.urls import include, path

urlpatterns = [
    path('', include('discordapp.urls')),
]

# Unknown routes get an empty 404 rather than Django's error page.
handler404 = 'discordapp.views.not_found'
