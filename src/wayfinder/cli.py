"""
Wayfinder CLI - Command-line interface for autonomous web research.

Commands:
- init: Write a wayfinder.toml configuration file
- plan: Show the research plan for a topic
- run: Plan, execute and export a research mission
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import WayfinderConfig, create_default_config, load_config
from .utils.logging import setup_logging

app = typer.Typer(
    name="wayfinder",
    help="Autonomous web research agent",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def _prepare(config_path: Path, log_level: Optional[str]) -> WayfinderConfig:
    """Load the config file (defaults when missing) and set up logging from it."""
    if config_path.exists():
        config = load_config(config_path)
    else:
        console.print(f"[dim]No {config_path} found, using default settings[/dim]")
        config = WayfinderConfig()

    setup_logging(level=log_level or config.logging.level, log_file=config.logging.file)
    return config


@app.command()
def init(
    path: Path = typer.Option(Path.cwd(), "--path", "-p", help="Project directory"),
    provider: str = typer.Option("openai", "--provider", help="Provider: openai or tavily"),
) -> None:
    """
    Write a default wayfinder.toml.

    Example:
        wayfinder init
        wayfinder init --provider tavily
    """
    try:
        if provider not in ("openai", "tavily"):
            raise ValueError(f"Unsupported provider: {provider}")

        path.mkdir(parents=True, exist_ok=True)
        config_path = path / "wayfinder.toml"

        if config_path.exists():
            console.print(f"[yellow]Warning:[/yellow] {config_path} already exists.")
            raise typer.Exit(1)

        create_default_config(config_path, provider)

        key_hint = "OPENAI_API_KEY" + (" and TAVILY_API_KEY" if provider == "tavily" else "")
        console.print(Panel.fit(
            f"[green]✓[/green] Wrote {config_path}\n\n"
            "[dim]Next steps:[/dim]\n"
            f"1. Set {key_hint} in the environment\n"
            '2. Run a mission: wayfinder run "Title" "What to research"',
            title="Project Initialized",
            border_style="green",
        ))

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def plan(
    title: str = typer.Argument(..., help="Mission title"),
    description: str = typer.Argument(..., help="What to research"),
    config: Path = typer.Option(Path("wayfinder.toml"), "--config", "-c", help="Config file path"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Log level"),
) -> None:
    """
    Show the research steps the planner proposes for a topic.

    Example:
        wayfinder plan "EV costs" "Compare electric and gasoline car ownership costs"
    """
    try:
        asyncio.run(_plan(_prepare(config, log_level), title, description))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


async def _plan(config: WayfinderConfig, title: str, description: str) -> None:
    from .pipeline import ResearchAgent

    agent = ResearchAgent.from_config(config)
    mission = await agent.create_plan(title, description)

    table = Table(title=mission.title)
    table.add_column("#", justify="right")
    table.add_column("Step")
    table.add_column("Priority")
    table.add_column("Duration")
    for step in mission.steps:
        table.add_row(
            str((step.order or 0) + 1),
            f"[bold]{step.title}[/bold]\n[dim]{step.description}[/dim]",
            step.priority or "-",
            step.estimated_duration or "-",
        )
    console.print(table)


@app.command()
def run(
    title: str = typer.Argument(..., help="Mission title"),
    description: str = typer.Argument(..., help="What to research"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Export results to file"),
    format: str = typer.Option("markdown", "--format", "-f", help="Format: markdown or json"),
    no_wait: bool = typer.Option(
        False, "--no-wait", help="Do not wait for the comprehensive analysis"
    ),
    config: Path = typer.Option(Path("wayfinder.toml"), "--config", "-c", help="Config file path"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Log level"),
) -> None:
    """
    Run a research mission.

    A mission:
    1. Plans research steps for the topic
    2. Searches the web for each step, in order
    3. Builds a quick summary of the findings
    4. Generates a comprehensive report (unless --no-wait)

    Example:
        wayfinder run "EV costs" "Compare electric and gasoline car ownership costs"
        wayfinder run "EV costs" "..." --output report.md
        wayfinder run "EV costs" "..." -o mission.json --format json
    """
    if format not in ("markdown", "json"):
        console.print(f"[red]Error:[/red] Unsupported format: {format}")
        raise typer.Exit(1)

    try:
        settings = _prepare(config, log_level)
        asyncio.run(_run(settings, title, description, output, format, not no_wait))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(0)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


async def _run(
    config: WayfinderConfig,
    title: str,
    description: str,
    output: Optional[Path],
    format: str,
    wait: bool,
) -> None:
    """Run one mission end to end."""
    from .pipeline import ResearchAgent

    agent = ResearchAgent.from_config(config)
    mission = agent.create_mission(title, description)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("Planning...", total=100)

        def on_progress(m, value: float) -> None:
            done = sum(1 for s in m.steps if s.status in ("completed", "error"))
            progress.update(
                task,
                completed=value,
                description=f"Step {done}/{len(m.steps)}" if done else "Researching...",
            )

        await agent.start_research(mission.id, on_progress=on_progress)

        if wait:
            progress.update(task, description="Generating comprehensive analysis...")
            await agent.wait_for_background()

    results = mission.results
    if results is None:
        console.print("[yellow]Mission finished without results[/yellow]")
        return

    for step in mission.steps:
        if step.status == "error":
            console.print(f"[red]✗[/red] {step.title}: {step.error}")

    console.print(Panel(
        results.summary,
        title=f"{mission.title} ({results.completed_steps}/{results.total_steps} steps)",
        border_style="green" if results.phase == "comprehensive" else "blue",
    ))

    if output:
        if format == "json":
            from .export import export_to_json

            export_to_json(mission, output)
        else:
            from .export import export_to_markdown

            export_to_markdown(mission, output)
        console.print(f"[green]✓[/green] Exported to {output}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
