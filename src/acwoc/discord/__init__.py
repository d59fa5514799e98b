"""Discord integration: command registry, dispatcher, and embed builders.

The bot is optional: if BTOKEN is not set, only the web service starts.
"""
