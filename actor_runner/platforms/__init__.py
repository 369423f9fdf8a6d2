"""Automation-platform adapters.

Implements the platform-agnostic adapter pattern:
- PlatformAdapter: Abstract base class defining the interface
- ApifyAdapter: The Apify REST API, called directly
- ProxyAdapter: This project's own proxy routes

Both adapters share ``HttpTransport`` for authentication and error
normalisation, so the run poller has a single implementation.
"""

from actor_runner.platforms.base import PlatformAdapter, PlatformError, TransportError
from actor_runner.platforms.factory import (
    APIFY,
    PROXY,
    get_platform,
    list_platforms,
    register_platform,
)
from actor_runner.platforms.transport import HttpTransport

__all__ = [
    "APIFY",
    "PROXY",
    "HttpTransport",
    "PlatformAdapter",
    "PlatformError",
    "TransportError",
    "get_platform",
    "list_platforms",
    "register_platform",
]
