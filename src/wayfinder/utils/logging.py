"""
Logging configuration for wayfinder.

Console output goes through rich on stderr so it never mixes with CLI
results on stdout. ``StructuredLogger`` tags records with mission context.
"""

import logging
from collections.abc import Iterable, MutableMapping
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    rich_tracebacks: bool = True,
    show_time: bool = True,
    show_path: bool = False,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Log level name (case-insensitive)
        log_file: Also write plain-text records to this file
        rich_tracebacks: Render exceptions with rich
        show_time: Show timestamps in console output
        show_path: Show source locations in console output
        quiet: Loggers capped at WARNING (HTTP clients log every request)

    Returns:
        The root logger
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers = []

    console = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=rich_tracebacks,
        show_time=show_time,
        show_path=show_path,
        markup=False,
    )
    console.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
        root.addHandler(file_handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger that prefixes every message with ``key=value`` context.

    Usage:
        log = StructuredLogger("wayfinder.pipeline.runner", mission_id="ab12")
        log.info("Step 1/5: Foundation Research")
        # [mission_id=ab12] Step 1/5: Foundation Research
    """

    def __init__(self, name: str, **context: Any):
        super().__init__(logging.getLogger(name), context)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        if not self.extra:
            return msg, kwargs
        context = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"[{context}] {msg}", kwargs

    def bind(self, **context: Any) -> "StructuredLogger":
        """New logger with additional context."""
        return StructuredLogger(self.logger.name, **{**self.extra, **context})
