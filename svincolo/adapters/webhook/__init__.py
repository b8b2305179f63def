"""Webhook receiver adapters.

Provides the HTTP endpoint the Ultimate Pro Clubs platform calls when a
player leaves a club, plus a public health check.
"""
