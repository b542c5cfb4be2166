# bargainer/services/provider_loader.py

"""Builds providers from the settings registry and wires the aggregator."""

import importlib
import logging
import os
from typing import Any

from bargainer.config.settings import Settings
from bargainer.models.provider_config import ProviderConfig
from bargainer.providers.base_provider import BaseProvider
from bargainer.services.aggregator import DealAggregator

logger = logging.getLogger("bargainer.loader")


def load_provider_class(dotted_path: str) -> type[BaseProvider]:
    """Dynamically import a provider class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[BaseProvider] = getattr(module, class_name)
    return cls


def config_from_source(source: dict[str, Any]) -> ProviderConfig:
    """Turn one ``AVAILABLE_SOURCES`` entry into a ProviderConfig."""
    key_env = source.get("api_key_env") or ""
    return ProviderConfig(
        name=source["id"],
        base_url=source["base_url"],
        label=source.get("label", ""),
        api_key=os.getenv(key_env) if key_env else None,
        headers=dict(source.get("headers", {})),
        enabled=bool(source.get("enabled", True)),
    )


def build_providers(
    sources: list[dict[str, Any]] | None = None,
) -> list[BaseProvider]:
    """Instantiate every usable provider, in registry order.

    Disabled entries are skipped, and so are authenticated entries
    whose credential is not set in the environment.
    """
    providers: list[BaseProvider] = []
    if sources is None:
        sources = Settings.AVAILABLE_SOURCES
    for source in sources:
        config = config_from_source(source)
        if not config.enabled:
            logger.info("Provider '%s' disabled, skipping", config.name)
            continue
        if source.get("api_key_env") and not config.api_key:
            logger.info(
                "Provider '%s' skipped: %s not set",
                config.name,
                source["api_key_env"],
            )
            continue
        provider_cls = load_provider_class(source["provider"])
        providers.append(provider_cls(config))
    return providers


def build_aggregator(
    sources: list[dict[str, Any]] | None = None,
) -> DealAggregator:
    """Aggregator with every usable provider registered by name."""
    aggregator = DealAggregator()
    for provider in build_providers(sources):
        aggregator.add_provider(provider.get_source_name(), provider)
    return aggregator
