"""
Wayfinder - Autonomous web research agent.

Turns a research topic into a plan of search steps, executes each step
against a web-search-capable LLM provider, and synthesizes the findings into
a quick summary followed by a comprehensive report.

Example:
    import asyncio
    from wayfinder import ResearchAgent, load_config

    async def main():
        agent = ResearchAgent.from_config(load_config("wayfinder.toml"))
        mission = agent.create_mission(
            "EV vs gasoline",
            "Compare total cost of ownership of electric and gasoline cars",
        )
        await agent.start_research(mission.id)
        await agent.wait_for_background()
        print(mission.results.summary)

    asyncio.run(main())
"""

__version__ = "0.1.0"

# Core exports
from .config import WayfinderConfig, load_config
from .models import Mission, ResearchResults, SourceResult, Step
from .pipeline import ResearchAgent
from .providers.protocol import SearchAdapter
from .store import MissionStore

__all__ = [
    "__version__",
    "WayfinderConfig",
    "load_config",
    "Mission",
    "ResearchResults",
    "SourceResult",
    "Step",
    "ResearchAgent",
    "SearchAdapter",
    "MissionStore",
]
