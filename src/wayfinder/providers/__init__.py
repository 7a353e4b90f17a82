"""Search/LLM provider adapters."""

from .base import (
    BaseSearchAdapter,
    ProviderAuthenticationError,
    ProviderConfigurationError,
    ProviderError,
)
from .factory import create_adapter
from .openai_search import OpenAISearchAdapter
from .parsing import StepPlanParseError, parse_research_steps
from .protocol import PlannedStep, SearchAdapter, SearchOptions, SearchResponse

__all__ = [
    "BaseSearchAdapter",
    "OpenAISearchAdapter",
    "PlannedStep",
    "ProviderAuthenticationError",
    "ProviderConfigurationError",
    "ProviderError",
    "SearchAdapter",
    "SearchOptions",
    "SearchResponse",
    "StepPlanParseError",
    "create_adapter",
    "parse_research_steps",
]
