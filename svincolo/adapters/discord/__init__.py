"""Discord adapters.

Provides the messaging gateway used to post release notifications.
"""
