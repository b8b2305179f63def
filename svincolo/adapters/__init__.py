"""External adapters for the player release notifier.

This package contains all external dependencies (Discord, HTTP server)
and provides implementations of the core port interfaces.

Adapter Organization:

- discord/: Messaging gateway for posting notifications to Discord
- webhook/: HTTP webhook receiver for player release events
"""
