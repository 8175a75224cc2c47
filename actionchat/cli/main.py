"""CLI entry point.

Provides commands for:
- chat: Send a message and stream the completion (tool calls included)
- tools: Show the tool catalogue offered to the model
"""

# Configure logging early before other imports
import actionchat.logging_config  # noqa: F401

import asyncio
import json
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from actionchat.exceptions import ActionChatError

app = typer.Typer(
    name="actionchat",
    help="Streaming chat completions with automation tool calls",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


@app.command()
def chat(
    message: Annotated[
        str,
        typer.Argument(help="User message to send"),
    ],
    system: Annotated[
        Optional[str],  # noqa: UP007
        typer.Option("--system", "-s", help="System prompt (subject to the instruction policy)"),
    ] = None,
    max_new_tokens: Annotated[
        Optional[int],  # noqa: UP007
        typer.Option("--max-new-tokens", "-n", min=1, help="Maximum tokens to generate"),
    ] = None,
    temperature: Annotated[
        Optional[float],  # noqa: UP007
        typer.Option("--temperature", "-t", min=0.0, max=2.0, help="Sampling temperature"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print one JSON token per line instead of text"),
    ] = False,
) -> None:
    """Send one message and stream the answer.

    If the model asks for a tool (ticket, mail, upload), the action runs on
    the automation backend before the final answer is streamed.

    Examples:
        actionchat chat "Delete ticket T1"
        actionchat chat "Mail the summary to ops@example.com" --json
    """
    generate_settings = {"max_new_tokens": max_new_tokens, "temperature": temperature}
    try:
        asyncio.run(_run_chat(message, system, generate_settings, as_json))
    except ActionChatError as e:
        console.print(f"[red]❌ Chat failed: {e}[/red]")
        raise typer.Exit(code=1) from e


async def _run_chat(
    message: str,
    system: str | None,
    generate_settings: dict,
    as_json: bool,
) -> None:
    """Stream one completion to the console."""
    from actionchat.automation import get_automation_client
    from actionchat.endpoint import endpoint_openai

    orchestrator = endpoint_openai()
    try:
        async for token in orchestrator.stream(
            [{"from": "user", "content": message}],
            preprompt=system,
            generate_settings={k: v for k, v in generate_settings.items() if v is not None},
        ):
            if as_json:
                console.print_json(json.dumps(token.to_dict()))
            else:
                console.print(token.text, end="", markup=False, highlight=False)
    finally:
        await get_automation_client().close()
    if not as_json:
        console.print()


@app.command()
def tools() -> None:
    """Show the tools offered to the model."""
    from actionchat.tools import DEFAULT_CATALOGUE

    table = Table(title="Tool Catalogue", show_header=True)
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Required arguments", style="green")

    for definition in DEFAULT_CATALOGUE:
        schema = definition.parameters_schema()
        table.add_row(
            definition.name,
            definition.description,
            ", ".join(schema.get("required", [])),
        )

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from actionchat import __version__

    console.print(
        Panel(
            f"[bold]actionchat[/bold] v{__version__}",
            border_style="blue",
        )
    )


if __name__ == "__main__":
    app()
