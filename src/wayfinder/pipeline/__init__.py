"""Research pipeline: planning, step execution, synthesis and mission lifecycle."""

from .agent import ResearchAgent
from .executor import StepExecutor
from .planner import StepPlanner, fallback_steps
from .prompts import generate_analysis_prompt
from .rate_limiter import RateLimiter
from .runner import MissionRunner
from .synthesizer import ResultSynthesizer

__all__ = [
    "ResearchAgent",
    "StepExecutor",
    "StepPlanner",
    "fallback_steps",
    "generate_analysis_prompt",
    "RateLimiter",
    "MissionRunner",
    "ResultSynthesizer",
]
