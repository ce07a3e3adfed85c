"""
Legal Compass CLI - Command Line Interface
"""

import logging

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

console = Console()


def _load_engine():
    from legal_compass.config import get_settings
    from legal_compass.retrieval import LegalEngine

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        progress.add_task("Loading engine...", total=None)
        engine = LegalEngine.from_settings(get_settings())

    if not engine.vector_store_available:
        console.print("[yellow]Vector index not found - answering without retrieved context[/yellow]")
    if not engine.llm_available:
        console.print("[yellow]Set GEMINI_API_KEY for AI-generated answers[/yellow]")
    return engine


def _print_answer(answer):
    """Render a StructuredAnswer."""
    console.print(Panel(Markdown(answer.answer or "_No answer_"), title="⚖️ Answer", border_style="green"))

    if answer.neutral_analysis:
        table = Table(title="Neutral Analysis", show_header=True, header_style="bold")
        table.add_column("Factors", width=50)
        table.add_column("Interpretations", width=50)
        table.add_row(
            "\n".join(f"• {f}" for f in answer.neutral_analysis.factors),
            "\n".join(f"• {i}" for i in answer.neutral_analysis.interpretations),
        )
        console.print(table)

    if answer.arguments:
        table = Table(title="Arguments", show_header=True, header_style="bold")
        table.add_column("For", width=50)
        table.add_column("Against", width=50)
        table.add_row(
            "\n".join(f"• {a}" for a in answer.arguments.for_args),
            "\n".join(f"• {a}" for a in answer.arguments.against),
        )
        console.print(table)

    if answer.citations:
        console.print("\n[bold cyan]📑 Sources:[/bold cyan]")
        for citation in answer.citations:
            label = f"{citation.source} - {citation.section}" if citation.section else citation.source
            console.print(f"  • {label}")

    if answer.related_judgments:
        console.print("\n[bold cyan]⚖️ Related Judgments:[/bold cyan]")
        for judgment in answer.related_judgments:
            console.print(f"  • {judgment.title}")

    console.print(f"\n[dim]{answer.disclaimer}[/dim]")


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Show pipeline logs")
def cli(verbose: bool):
    """Legal Compass CLI - Indian legal question answering"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@cli.command()
@click.argument("question")
@click.option("--lang", "-l", default="en", help="Answer language code (en, hi, ...)")
@click.option("--arguments", "arguments_mode", is_flag=True, help="Include arguments for and against")
@click.option("--analysis", "analysis_mode", is_flag=True, help="Include a neutral legal analysis")
def ask(question: str, lang: str, arguments_mode: bool, analysis_mode: bool):
    """Ask a single legal question."""
    engine = _load_engine()

    console.print(Panel.fit(f"[bold]{question}[/bold]", title="❓ Question"))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        progress.add_task("Thinking...", total=None)
        answer = engine.query(
            question,
            language=lang,
            arguments_mode=arguments_mode,
            analysis_mode=analysis_mode,
        )

    _print_answer(answer)


@cli.command()
@click.option("--lang", "-l", default="en", help="Answer language code (en, hi, ...)")
def chat(lang: str):
    """Start an interactive chat session with conversation memory."""
    engine = _load_engine()
    session_id = engine.create_session()

    console.print(Panel.fit(
        "[bold blue]Legal Compass Chat[/bold blue]\n"
        "Ask questions about Indian law. Follow-up questions use the conversation so far.\n"
        "Commands: /history, /clear, /exit",
        title="⚖️ Legal Assistant"
    ))

    while True:
        try:
            question = console.input("[bold cyan]You:[/bold cyan] ").strip()

            if not question:
                continue

            if question.lower() in ["/exit", "quit", "exit", "q"]:
                console.print("[dim]Goodbye![/dim]")
                break

            if question.lower() == "/clear":
                engine.clear_session(session_id)
                console.print("[dim]Conversation cleared.[/dim]\n")
                continue

            if question.lower() == "/history":
                for message in engine.get_history(session_id, max_messages=20):
                    console.print(f"[dim]{message.speaker}:[/dim] {message.content[:200]}")
                console.print()
                continue

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True
            ) as progress:
                progress.add_task("Thinking...", total=None)
                answer = engine.query(question, language=lang, session_id=session_id)

            console.print("\n[bold green]Assistant:[/bold green]")
            console.print(Markdown(answer.answer))
            if answer.citations:
                sources = ", ".join(c.section or c.source for c in answer.citations)
                console.print(f"\n[dim]Sources: {sources}[/dim]")
            console.print()

        except KeyboardInterrupt:
            console.print("\n[dim]Goodbye![/dim]")
            break


@cli.command()
@click.argument("text_a")
@click.argument("text_b")
def compare(text_a: str, text_b: str):
    """Compare two legal clauses or sections."""
    engine = _load_engine()
    comparison = engine.compare_clauses(text_a, text_b)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Differences", width=50)
    table.add_column("Similarities", width=50)
    table.add_row(
        "\n".join(f"• {d}" for d in comparison.differences),
        "\n".join(f"• {s}" for s in comparison.similarities),
    )
    console.print(table)
    if comparison.implications:
        console.print(Panel(Markdown(comparison.implications), title="Implications"))


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address")
@click.option("--port", "-p", default=8000, type=int, help="Port")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API server."""
    import uvicorn

    uvicorn.run("legal_compass.server.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
