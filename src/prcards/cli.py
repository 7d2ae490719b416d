"""Command line entry points using Typer.

`prcards run` is what the GitHub Action invokes. Its exit status is what the
workflow runner uses to block downstream steps.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from .config import RunConfig
from .errors import ConfigError
from .event import PullRequestContext
from .integrations.github.client import GitHubClient
from .integrations.trello.client import TrelloClient
from .links import BROWSER_EOL, extract_card_ids
from .orchestrator import CardStatus, Orchestrator, RunResult

console = Console()
error_console = Console(stderr=True)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="prcards",
    help="Move Trello cards linked from a pull request once it is ready to merge",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

EXIT_FAILED = 1
EXIT_CONFIG = 2


def _configure_logging(verbose: bool) -> None:
    log_format = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=log_format)


async def execute(config: RunConfig, context: PullRequestContext) -> RunResult:
    """Run the orchestrator with real Trello and GitHub clients."""
    async with TrelloClient(
        config.trello_key, config.trello_token, base_url=config.trello_api_url
    ) as trello, GitHubClient(config.github_token, base_url=config.github_api_url) as github:
        orchestrator = Orchestrator(config, trello, github)
        return await orchestrator.run(context)


def workflow_escape(message: str) -> str:
    """Escape a message for a workflow command (::error::...)."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _print_result(result: RunResult) -> None:
    styles = {
        CardStatus.MOVED: "green",
        CardStatus.SKIPPED: "yellow",
        CardStatus.ERROR: "red",
    }
    for outcome in result.outcomes:
        style = styles[outcome.status]
        state = f" ({outcome.merge_state.value})" if outcome.merge_state else ""
        console.print(f"[{style}]{outcome.status.value}[/{style}] {outcome.card_id}{state}")

    if result.ok:
        console.print(f"[green]v[/green] Done: {len(result.moved)} moved, {len(result.skipped)} skipped")
    else:
        error_console.print(f"[red]Failed:[/red] {escape(str(result.error))}")


@app.command("run")
def run(
    event_path: Annotated[
        Optional[Path],
        typer.Option("--event-path", help="Webhook payload JSON (default: $GITHUB_EVENT_PATH)"),
    ] = None,
    event_name: Annotated[
        Optional[str],
        typer.Option("--event-name", help="Event name (default: $GITHUB_EVENT_NAME)"),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="YAML config file (default: ~/.prcards/config.yaml)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Debug logging"),
    ] = False,
):
    """Handle one pull request event and move ready cards."""
    _configure_logging(verbose)

    config = RunConfig.load(config_path)
    if missing := config.missing():
        error_console.print(f"[red]Error:[/red] missing configuration: {', '.join(missing)}")
        raise typer.Exit(EXIT_CONFIG)

    try:
        context = PullRequestContext.from_env(event_name=event_name, event_path=event_path)
    except ConfigError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIG)

    logger.info(
        "Handling %s.%s for %s/%s#%s", context.event_name, context.action, context.owner, context.repo, context.number
    )

    result = asyncio.run(execute(config, context))
    _print_result(result)

    if not result.ok:
        # Workflow command: surfaces the reason on the run's summary page
        print(f"::error::{workflow_escape(str(result.error))}")
        raise typer.Exit(EXIT_FAILED)


@app.command("extract")
def extract(
    file: Annotated[
        Optional[Path],
        typer.Argument(help="File containing the description (default: stdin)"),
    ] = None,
    all_lines: Annotated[
        bool,
        typer.Option("--all-lines", help="Scan past the first non-link line"),
    ] = False,
    lf: Annotated[
        bool,
        typer.Option("--lf", help="Also treat plain \\n as a line break"),
    ] = False,
):
    """Print the card ids found in a pull request description."""
    raw = file.read_bytes() if file else sys.stdin.buffer.read()
    text = raw.decode("utf-8", errors="replace")
    if lf:
        text = text.replace(BROWSER_EOL, "\n").replace("\n", BROWSER_EOL)
    for card_id in extract_card_ids(text, stop_on_non_link=not all_lines):
        console.print(card_id)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
