"""Platform factory: builds a credential-bound adapter by name.

The factory maintains a registry of known adapters. New adapters are
registered with ``register_platform``.

Usage::

    from actor_runner.platforms.factory import get_platform

    platform = get_platform("apify", credential=api_token)
    actors = await platform.list_actors(100)

The proxy routes read the adapter name from ``RunnerConfig.platform``
(``ACTOR_PLATFORM``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from actor_runner.core.config import RunnerConfig
from actor_runner.core.constants import DEFAULT_PROXY_BASE_URL
from actor_runner.platforms.base import PlatformAdapter, PlatformError
from actor_runner.platforms.transport import HttpTransport

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Platform name constants
# ---------------------------------------------------------------------------

APIFY = "apify"
PROXY = "proxy"

# ---------------------------------------------------------------------------
# Lazy-import adapter registry
# ---------------------------------------------------------------------------

# Each entry maps a platform name to a callable that returns the adapter
# *class*, so an adapter module is only imported when it is selected.

_ADAPTER_REGISTRY: dict[str, Callable[[], type[PlatformAdapter]]] = {}


def _register_builtin_adapters() -> None:
    """Register the built-in platform adapters."""

    def _apify() -> type[PlatformAdapter]:
        from actor_runner.platforms.apify import ApifyAdapter

        return ApifyAdapter

    def _proxy() -> type[PlatformAdapter]:
        from actor_runner.platforms.proxy import ProxyAdapter

        return ProxyAdapter

    _ADAPTER_REGISTRY[APIFY] = _apify
    _ADAPTER_REGISTRY[PROXY] = _proxy


def _ensure_registry() -> None:
    """Initialise the adapter registry once (idempotent)."""
    if not _ADAPTER_REGISTRY:
        _register_builtin_adapters()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def register_platform(
    name: str,
    loader: Callable[[], type[PlatformAdapter]],
) -> None:
    """Register a custom platform adapter.

    Args:
        name: Platform name (e.g. ``"my_platform"``).
        loader: A zero-argument callable that returns the adapter class.

    Raises:
        ValueError: If the name is empty.
    """
    if not name:
        msg = "Platform name must be non-empty"
        raise ValueError(msg)
    _ensure_registry()
    _ADAPTER_REGISTRY[name] = loader
    logger.debug("Registered platform adapter: %s", name)


def get_platform(
    name: str,
    credential: str,
    *,
    config: RunnerConfig | None = None,
    base_url: str = "",
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> PlatformAdapter:
    """Create a platform adapter bound to *credential*.

    Args:
        name: Platform identifier (``"apify"`` or ``"proxy"``).
        credential: Bearer token for every call made by the adapter.
        config: Runner configuration; defaults to ``RunnerConfig()``.
        base_url: Overrides the API root. The ``apify`` adapter otherwise
            uses ``config.api_base_url``; ``proxy`` uses the local
            Functions host.
        http_transport: Optional ``httpx`` transport, used by tests.

    Raises:
        PlatformError: If the named platform is not registered.
        ValueError: If *credential* is empty.
    """
    _ensure_registry()

    loader = _ADAPTER_REGISTRY.get(name)
    if loader is None:
        available = ", ".join(sorted(_ADAPTER_REGISTRY))
        msg = f"Unknown platform: {name!r}. Available: {available}"
        raise PlatformError(msg, code="UNKNOWN_PLATFORM")

    config = config or RunnerConfig()
    if not base_url:
        base_url = DEFAULT_PROXY_BASE_URL if name == PROXY else config.api_base_url

    adapter_cls = loader()
    transport = HttpTransport(
        base_url,
        credential,
        timeout_seconds=config.http_timeout_seconds,
        transport=http_transport,
    )

    logger.debug("Creating platform adapter | platform=%s | base_url=%s", name, base_url)
    return adapter_cls(transport)


def list_platforms() -> list[str]:
    """Return the names of all registered platform adapters."""
    _ensure_registry()
    return sorted(_ADAPTER_REGISTRY)
