"""Build provider adapters from configuration."""

import logging
from urllib.parse import urlparse

from ..config import WayfinderConfig
from .base import BaseSearchAdapter, ProviderConfigurationError
from .openai_search import OpenAISearchAdapter

logger = logging.getLogger(__name__)


def create_adapter(config: WayfinderConfig) -> BaseSearchAdapter:
    """
    Create the adapter described by ``config.provider``.

    Raises:
        ProviderConfigurationError: If a required API key is missing or malformed
    """
    provider = config.provider

    try:
        api_key = config.get_api_key()
    except ValueError as e:
        raise ProviderConfigurationError(str(e)) from e

    if urlparse(provider.base_url).hostname == "api.openai.com" and not api_key.startswith("sk-"):
        raise ProviderConfigurationError(
            'Invalid OpenAI API key format. API key should start with "sk-"'
        )

    openai_adapter = OpenAISearchAdapter(
        api_key=api_key,
        search_model=provider.search_model,
        completion_model=provider.completion_model,
        base_url=provider.base_url,
        timeout=provider.timeout_seconds,
        max_retries=provider.max_retries,
        backoff_seconds=provider.backoff_seconds,
        api_key_env=provider.api_key_env,
    )

    if provider.name == "openai":
        logger.info(f"Using provider {openai_adapter.name}")
        return openai_adapter

    if provider.name == "tavily":
        from .tavily import TavilySearchAdapter

        search_key = config.get_search_api_key()
        if not search_key:
            raise ProviderConfigurationError(
                f"{provider.search_api_key_env} environment variable is required"
            )

        logger.info(f"Using provider tavily (completions via {openai_adapter.completion_model})")
        return TavilySearchAdapter(
            api_key=search_key,
            completions=openai_adapter,
            search_depth=provider.search_depth,
            max_retries=provider.max_retries,
            backoff_seconds=provider.backoff_seconds,
        )

    raise ProviderConfigurationError(f"Unsupported provider: {provider.name}")
