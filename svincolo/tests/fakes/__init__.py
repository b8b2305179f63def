"""Fake implementations of core ports for testing.

- FakeMessagingGateway: Captured notifications and scripted failures
"""

from .gateway import FakeMessagingGateway

__all__ = ["FakeMessagingGateway"]
