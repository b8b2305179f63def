"""Test suite for the player release notifier.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - No I/O, fast execution

2. adapters/: Tests for adapter implementations
   - Discord gateway against an httpx mock transport
   - Webhook receiver and HTTP routes against a fake gateway

3. fakes/: Port implementations for testing
   - In-memory MessagingGatewayPort
"""
