"""Name-based lookup of stats providers, so the CLI can pick one with ``--provider``."""

from __future__ import annotations

from typing import Any, Callable

from trafficlens.provider.base import StatsProvider

ProviderClass = type[StatsProvider]

# lower-cased name -> provider class
_PROVIDER_REGISTRY: dict[str, ProviderClass] = {}


def register_provider(name: str) -> Callable[[ProviderClass], ProviderClass]:
    """Class decorator that makes a provider available to :func:`create_provider` under ``name``."""
    key = name.lower()

    def _register(cls: ProviderClass) -> ProviderClass:
        if not (isinstance(cls, type) and issubclass(cls, StatsProvider)):
            raise TypeError(f"{cls!r} is not a StatsProvider subclass")
        _PROVIDER_REGISTRY[key] = cls
        return cls

    return _register


def create_provider(name: str, **kwargs: Any) -> StatsProvider:
    """Instantiate the provider registered as ``name`` (case-insensitive); ``kwargs`` go to its constructor.

    Raises ValueError listing the known names when ``name`` is not registered.
    """
    provider_cls = _PROVIDER_REGISTRY.get(name.lower())
    if provider_cls is None:
        raise ValueError(f"Unknown provider '{name}'. Available: {', '.join(list_providers())}")
    return provider_cls(**kwargs)


def list_providers() -> list[str]:
    return sorted(_PROVIDER_REGISTRY)
