"""Main CLI application using Typer."""
import asyncio
import os
from pathlib import Path
from uuid import UUID

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..artifacts import (
    Artifact,
    ArtifactKind,
    FlashcardSchema,
    QuizSchema,
    TransformType,
    parse_bullets,
    parse_flashcards,
    parse_quiz,
)
from ..attachments import AttachmentError, extract_text
from ..conversation import AssistantMode, Role, Thread
from ..coordinator import ConversationCoordinator, TurnOutcome
from ..engine import EngineSnapshot, GenerationOrchestrator, classify_intent
from ..log import setup_logger
from ..mood import MoodEngine
from ..store import ConversationStore
from .providers import get_store, require_provider

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="ari",
    help="Ari, a supportive writing and study assistant",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

_EXIT_WORDS = ("exit", "quit", "q")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level: debug, info, warning or error (default: ARI_LOG_LEVEL or off)"
    ),
):
    """Configure logging before any command runs."""
    level = log_level or os.getenv("ARI_LOG_LEVEL")
    if level:
        setup_logger(level=level, log_file=os.getenv("ARI_LOG_FILE"))


class _StreamView:
    """Orchestrator listener that redraws a Live region with each snapshot."""

    def __init__(self) -> None:
        self.live: Live | None = None

    def __call__(self, snapshot: EngineSnapshot) -> None:
        if self.live is not None and snapshot.streaming_text:
            self.live.update(Text(snapshot.streaming_text))


def _parse_mode(mode: str | None) -> AssistantMode:
    if mode is None:
        return AssistantMode.GENERAL
    parsed = AssistantMode.from_raw(mode.capitalize())
    if parsed is None:
        choices = ", ".join(m.value.lower() for m in AssistantMode)
        console.print(f"[red]Error: Unknown mode '{mode}'. Choose from: {choices}[/red]")
        raise typer.Exit(code=1)
    return parsed


def _load_attachment(path: Path | None) -> str | None:
    if path is None:
        return None
    try:
        return extract_text(path)
    except AttachmentError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def _print_outcome(outcome: TurnOutcome | None, coordinator: ConversationCoordinator) -> None:
    if outcome is None:
        console.print("[yellow]Generation cancelled.[/yellow]\n")
        return

    result = outcome.result
    console.print(f"[dim]{result.mode.chip_label}[/dim]")
    if result.ari_guidance:
        action = ", ".join(a.label for a in outcome.mood.actions)
        console.print(f"[magenta]Ari ({outcome.mood.mood.label}):[/magenta] {result.ari_guidance} [dim]{action}[/dim]")
    if result.suggested_artifact is not None:
        console.print(f"[dim]Suggested output: {result.suggested_artifact.title}. Type /save to keep it.[/dim]")
    if coordinator.persistence_error:
        console.print(f"[yellow]Warning: {coordinator.persistence_error}[/yellow]")
        coordinator.clear_persistence_error()
    console.print()


async def _run_turn(
    coordinator: ConversationCoordinator,
    view: _StreamView,
    text: str,
    mode: AssistantMode,
    attachment: str | None,
    timeout: float | None,
) -> TurnOutcome | None:
    preferences = await coordinator.store.get_preferences()
    loop = asyncio.get_running_loop()
    timer = loop.call_later(timeout, coordinator.cancel) if timeout else None

    console.print("[bold green]Ari:[/bold green]")
    try:
        with Live(Text("..."), console=console, refresh_per_second=12, transient=False) as live:
            view.live = live
            outcome = await coordinator.send_message(
                coordinator.active_thread,
                text,
                preferences,
                attachment_context=attachment,
                selected_mode=mode,
            )
            if outcome is not None:
                live.update(Markdown(outcome.result.text))
            else:
                live.update(Text(""))
    finally:
        view.live = None
        if timer is not None:
            timer.cancel()
    return outcome


def _build_coordinator(provider_name: str | None, store: ConversationStore) -> tuple[ConversationCoordinator, _StreamView]:
    view = _StreamView()
    orchestrator = GenerationOrchestrator(require_provider(provider_name, console), on_state_change=view)
    return ConversationCoordinator(orchestrator, MoodEngine(), store), view


@app.command()
def chat(
    provider: str = typer.Option(
        None,
        "--provider",
        "-p",
        help="Generation provider (default: ARI_PROVIDER or stub)"
    ),
    mode: str = typer.Option(
        None,
        "--mode",
        "-m",
        help="Fixed mode for every message; omit to classify each message"
    ),
    thread_id: str = typer.Option(
        None,
        "--thread",
        "-t",
        help="Continue an existing thread"
    ),
    attach: Path = typer.Option(
        None,
        "--attach",
        "-a",
        exists=True,
        dir_okay=False,
        help="Text or PDF file to include with the first message"
    ),
):
    """Start an interactive chat with Ari."""
    selected_mode = _parse_mode(mode)
    attachment = _load_attachment(attach)

    async def _chat():
        nonlocal attachment
        store = get_store()
        coordinator, view = _build_coordinator(provider, store)

        try:
            await store.connect()

            if thread_id:
                thread = await store.get_thread(UUID(thread_id))
                if thread is None:
                    console.print(f"[red]Error: Thread not found: {thread_id}[/red]")
                    raise typer.Exit(code=1)
                await coordinator.open_thread(thread)
            else:
                await coordinator.create_thread()

            console.print("[bold cyan]Ari[/bold cyan]")
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave. /save keeps the last suggested output, /new starts a thread.[/dim]\n")

            last_outcome: TurnOutcome | None = None
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                command = user_input.strip()
                if command.lower() in _EXIT_WORDS:
                    console.print("[dim]Goodbye![/dim]")
                    break
                if command == "/new":
                    await coordinator.create_thread()
                    last_outcome = None
                    console.print("[dim]Started a new thread.[/dim]\n")
                    continue
                if command == "/save":
                    if last_outcome is None or last_outcome.result.suggested_artifact is None:
                        console.print("[dim]Nothing to save yet.[/dim]\n")
                        continue
                    artifact = await coordinator.save_artifact(
                        last_outcome.result.suggested_artifact,
                        turn=last_outcome.assistant_turn,
                    )
                    console.print(f"[green]Saved '{artifact.title}' to Outputs.[/green]")
                    console.print(f"[magenta]Ari:[/magenta] {coordinator.mood.guidance}\n")
                    continue
                if not command and attachment is None:
                    continue

                last_outcome = await _run_turn(coordinator, view, command, selected_mode, attachment, None)
                attachment = None
                _print_outcome(last_outcome, coordinator)

        finally:
            await store.disconnect()
            await coordinator.orchestrator.provider.close()

    asyncio.run(_chat())


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send"),
    provider: str = typer.Option(
        None,
        "--provider",
        "-p",
        help="Generation provider (default: ARI_PROVIDER or stub)"
    ),
    mode: str = typer.Option(
        None,
        "--mode",
        "-m",
        help="Assistant mode; omit to classify the message"
    ),
    attach: Path = typer.Option(
        None,
        "--attach",
        "-a",
        exists=True,
        dir_okay=False,
        help="Text or PDF file to include as context"
    ),
    timeout: float = typer.Option(
        None,
        "--timeout",
        help="Cancel the generation after this many seconds"
    ),
):
    """Send one message in a new thread and print the reply."""
    selected_mode = _parse_mode(mode)
    attachment = _load_attachment(attach)

    async def _ask():
        store = get_store()
        coordinator, view = _build_coordinator(provider, store)
        try:
            await store.connect()
            await coordinator.create_thread()
            outcome = await _run_turn(coordinator, view, message, selected_mode, attachment, timeout)
            _print_outcome(outcome, coordinator)
        finally:
            await store.disconnect()
            await coordinator.orchestrator.provider.close()

    asyncio.run(_ask())


@app.command()
def classify(
    text: str = typer.Argument(..., help="Text to classify"),
):
    """Show which assistant mode a message routes to."""
    mode = classify_intent(text)
    console.print(f"[bold]{mode.chip_label}[/bold] [dim]({mode.icon})[/dim]")


def _render_transform(transform_type: TransformType, text: str, title: str) -> None:
    if transform_type == TransformType.QUIZ:
        questions = parse_quiz(text)
        if questions:
            console.print(Markdown(QuizSchema.from_questions(title, questions).to_markdown()))
            return
    elif transform_type == TransformType.FLASHCARDS:
        cards = parse_flashcards(text)
        if cards:
            table = Table(title=title, show_lines=True)
            table.add_column("Front", style="cyan")
            table.add_column("Back")
            for card in cards:
                table.add_row(card.front, card.back)
            console.print(table)
            console.print(Markdown(FlashcardSchema.from_cards(title, cards).to_markdown()), style="dim")
            return
    elif transform_type == TransformType.BULLETS:
        sections = parse_bullets(text)
        if sections:
            console.print(Markdown("\n\n".join(section.to_markdown() for section in sections)))
            return

    # unparsed output is shown raw
    console.print(Panel(text, title=title))


@app.command()
def transform(
    source: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Text or PDF file to transform"
    ),
    transform_type: TransformType = typer.Option(
        TransformType.SHORTER,
        "--type",
        "-t",
        help="Transform to apply"
    ),
    provider: str = typer.Option(
        None,
        "--provider",
        "-p",
        help="Generation provider (default: ARI_PROVIDER or stub)"
    ),
    save: bool = typer.Option(
        False,
        "--save",
        "-s",
        help="Save the source and the result to Outputs"
    ),
):
    """Rewrite a document as shorter, formal, bullets, a quiz or flashcards."""
    content = _load_attachment(source)

    async def _transform():
        store = get_store()
        coordinator, _ = _build_coordinator(provider, store)
        try:
            await store.connect()
            preferences = await store.get_preferences()

            with console.status(f"[dim]Applying {transform_type.value}...[/dim]"):
                if save:
                    original = Artifact(kind=ArtifactKind.OTHER, title=source.stem, content=content)
                    await store.save_artifact(original)
                    result = await coordinator.transform_artifact(original, transform_type, preferences)
                    text = result.content
                else:
                    text = await coordinator.orchestrator.transform(content, transform_type, preferences)

            _render_transform(transform_type, text, f"{source.stem} ({transform_type.value})")
            if save:
                console.print(f"[green]Saved to Outputs as {result.kind.value}.[/green]")
        finally:
            await store.disconnect()
            await coordinator.orchestrator.provider.close()

    asyncio.run(_transform())


@app.command()
def threads(
    show: str = typer.Option(
        None,
        "--show",
        help="Print the messages of one thread"
    ),
    delete: str = typer.Option(
        None,
        "--delete",
        help="Delete a thread and its messages"
    ),
):
    """List conversation threads."""
    async def _threads():
        store = get_store()
        try:
            await store.connect()

            if delete:
                await store.delete_thread(UUID(delete))
                console.print(f"[green]Deleted thread {delete}[/green]")
                return

            if show:
                turns = await store.get_turns(UUID(show))
                if not turns:
                    console.print("[dim]No messages yet[/dim]")
                for turn in turns:
                    speaker = "[bold yellow]You[/bold yellow]" if turn.role == Role.USER else "[bold green]Ari[/bold green]"
                    console.print(f"{speaker} [dim]{turn.created_at:%Y-%m-%d %H:%M}[/dim]")
                    console.print(Markdown(turn.text))
                    if turn.ari_guidance:
                        console.print(f"[magenta]{turn.ari_guidance}[/magenta]")
                    console.print()
                return

            items: list[Thread] = await store.list_threads()
            if not items:
                console.print("[dim]No threads yet[/dim]")
                return

            table = Table(title="Threads")
            table.add_column("ID", style="dim")
            table.add_column("Title", style="cyan")
            table.add_column("Updated")
            table.add_column("Pinned", justify="center")
            for thread in items:
                table.add_row(
                    str(thread.id),
                    thread.title,
                    f"{thread.updated_at:%Y-%m-%d %H:%M}",
                    "*" if thread.pinned else "",
                )
            console.print(table)
        finally:
            await store.disconnect()

    asyncio.run(_threads())


@app.command()
def outputs(
    show: str = typer.Option(
        None,
        "--show",
        help="Print one saved output as markdown"
    ),
):
    """List saved outputs."""
    async def _outputs():
        store = get_store()
        try:
            await store.connect()

            if show:
                artifact = await store.get_artifact(UUID(show))
                if artifact is None:
                    console.print(f"[red]Error: Output not found: {show}[/red]")
                    raise typer.Exit(code=1)
                console.print(Panel(Markdown(artifact.content), title=artifact.title))
                if artifact.tags:
                    console.print(f"[dim]Tags: {', '.join(artifact.tags)}[/dim]")
                return

            artifacts = await store.list_artifacts()
            if not artifacts:
                console.print("[dim]No saved outputs yet[/dim]")
                return

            table = Table(title="Outputs")
            table.add_column("ID", style="dim")
            table.add_column("Kind", style="cyan")
            table.add_column("Title")
            table.add_column("Tags")
            table.add_column("Created")
            for artifact in artifacts:
                table.add_row(
                    str(artifact.id),
                    artifact.kind.value,
                    artifact.title,
                    ", ".join(artifact.tags),
                    f"{artifact.created_at:%Y-%m-%d %H:%M}",
                )
            console.print(table)
        finally:
            await store.disconnect()

    asyncio.run(_outputs())


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
