# dnsbot/discordapp/strings.py

"""Plain-text legal notices served on /privacy and /terms."""

PRIVACY = """DNS over Discord: Privacy Notice

DNS over Discord receives the interactions you send it through Discord: the
slash command you ran, the options you passed to it, and the buttons or menus
you clicked on its messages. Discord includes your user id and the id of the
channel and server the interaction happened in.

This information is only used to perform the DNS lookup you asked for and to
reply to you. Lookups are sent to the DNS-over-HTTPS provider you selected
(Cloudflare by default), subject to that provider's own privacy policy.

When something goes wrong while handling an interaction, details of the error
and the interaction (excluding its access token) may be sent to our error
tracking service so that the problem can be fixed. No other data is stored.
"""

TERMS = """DNS over Discord: Terms of Service

DNS over Discord is provided as is, without warranty of any kind. Results are
returned exactly as the selected DNS-over-HTTPS provider answered them and may
be incomplete, cached or out of date.

You may not use the bot to perform automated or high-volume lookups, or in a
way that disrupts Discord, the DNS providers, or other users.

Access may be limited or withdrawn at any time. Continued use of the bot means
you accept these terms and the privacy notice at /privacy.
"""
