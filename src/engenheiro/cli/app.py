"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from ..audio import AudioError, create_voice_client
from ..conversation import InputValidationError, load_attachment
from ..llm import GenerationError, GenerationMode
from ..report import ActiveFilters, FilterKey, parse_report
from ..ui.formatting import report_renderable
from .providers import get_generation_client, get_live_transport

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="engenheiro",
    help="Technical reports on machining, welding and industrial standards, powered by Gemini",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _filters(only: list[FilterKey] | None) -> ActiveFilters:
    return ActiveFilters(only) if only else ActiveFilters()


@app.command(name="tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        client = get_generation_client(console)
        try:
            await run_textual_tui(
                client=client,
                transport_factory=lambda: get_live_transport(console),
                log_level=log_level,
            )
        finally:
            await client.close()
            console.print("\n[dim]Até logo![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Technical question or request"),
    files: list[Path] = typer.Option(
        None,
        "--file",
        "-f",
        exists=True,
        dir_okay=False,
        help="Attach a file (image, PDF or plain text); repeatable"
    ),
    mode: GenerationMode = typer.Option(
        GenerationMode.PLAIN,
        "--mode",
        "-m",
        help="Generation mode: plain, thinking, or search"
    ),
    only: list[FilterKey] = typer.Option(
        None,
        "--only",
        "-o",
        help="Show only these sections; repeatable"
    ),
    raw: bool = typer.Option(
        False,
        "--raw",
        help="Print the unparsed response"
    ),
):
    """Send one request and print the structured report."""
    try:
        attachments = [load_attachment(path) for path in files or []]
    except InputValidationError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(code=1)

    async def _ask():
        client = get_generation_client(console)
        try:
            console.print(f"[dim]Consultando ({mode.value}, {len(attachments)} anexo(s))...[/dim]")
            return await client.generate(prompt, attachments, mode)
        except GenerationError as e:
            console.print(f"[red]Error: {e.message}[/red]")
            raise typer.Exit(code=1)
        finally:
            await client.close()

    result = asyncio.run(_ask())

    if raw:
        console.print(result.text, markup=False, highlight=False)
        return

    console.print(report_renderable(parse_report(result.text, _filters(only))))

    if result.usage:
        console.print(
            f"[dim]{result.model} | tokens: {result.usage.get('prompt_tokens', 0):,} in / "
            f"{result.usage.get('completion_tokens', 0):,} out[/dim]"
        )


@app.command()
def parse(
    file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Saved model response"
    ),
    only: list[FilterKey] = typer.Option(
        None,
        "--only",
        "-o",
        help="Show only these sections; repeatable"
    ),
    spans: bool = typer.Option(
        False,
        "--spans",
        help="Also list the marker spans found in the response"
    ),
):
    """Run the section parser on a saved response."""
    text = file.read_text(encoding="utf-8")
    report = parse_report(text, _filters(only))

    if spans:
        from ..report import scan_spans

        for span in scan_spans(text):
            console.print(f"[dim]{span.kind.value:<14} {span.start:>6}-{span.end:<6}[/dim]")

    if not report.sections:
        console.print("[yellow]No sections found[/yellow]")
    console.print(report_renderable(report))


@app.command()
def voice():
    """Talk to the specialist in a real-time voice session (Ctrl+C to stop)."""
    async def _voice():
        closed = asyncio.Event()
        failure: list[Exception] = []

        def on_transcript(text: str) -> None:
            console.print(text, end="", markup=False, highlight=False)

        def on_close(error: Exception | None) -> None:
            if error is not None:
                failure.append(error)
            closed.set()

        client = create_voice_client(
            get_live_transport(console),
            on_transcript=on_transcript,
            on_close=on_close,
        )

        try:
            await client.connect()
        except AudioError as e:
            console.print(f"[red]Error: {e.message}[/red]")
            raise typer.Exit(code=1)

        console.print("[green]Sessão de voz ativa.[/green] [dim]Ctrl+C para encerrar[/dim]")
        try:
            await closed.wait()
        finally:
            await client.disconnect()

        if failure:
            console.print(f"\n[red]Error: {failure[0]}[/red]")
            raise typer.Exit(code=1)

    try:
        asyncio.run(_voice())
    except KeyboardInterrupt:
        console.print("\n[dim]Sessão encerrada.[/dim]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
