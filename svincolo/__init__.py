"""Forward Ultimate Pro Clubs player release webhooks to Discord."""

__version__ = "0.1.0"
