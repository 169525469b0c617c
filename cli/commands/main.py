"""Main CLI interface using Typer."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from storylearner.core.fallback import generate_tokens, validate_reconstruction
from storylearner.core.models import TokenType, token_to_dict
from storylearner.core.pipeline import TranslationPipeline, PipelineConfig
from storylearner.core.validator import validate, generate_report
from storylearner.core.exceptions import StoryLearnerError
from storylearner.utils.config_loader import load_config
from storylearner.utils.logger import setup_logger

app = typer.Typer(
    name="storylearner",
    help="StoryLearner: model translations as tap-to-translate token streams",
    add_completion=False
)

console = Console()

TOKEN_STYLES = {
    TokenType.WORD: "bold cyan",
    TokenType.PUNCTUATION: "yellow",
    TokenType.WHITESPACE: "dim",
}


def _tokens_table(tokens) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Text")
    table.add_column("Lemma")
    table.add_column("Native")
    table.add_column("POS")
    table.add_column("Level")

    for i, token in enumerate(tokens):
        style = TOKEN_STYLES[token.type]
        if token.type is TokenType.WORD:
            table.add_row(
                str(i),
                f"[{style}]word[/{style}]",
                token.to_word,
                token.to_lemma,
                token.from_word or "-",
                token.pos.value if token.pos else "-",
                token.difficulty.value if token.difficulty else "-",
            )
        else:
            table.add_row(str(i), f"[{style}]{token.type.value}[/{style}]", repr(token.value), "", "", "", "")
    return table


@app.command()
def tokenize(
    text: str = typer.Argument(..., help="Plain text to tokenize"),
    as_json: bool = typer.Option(False, "--json", help="Print tokens as JSON"),
):
    """Tokenize plain text the way the fallback path does."""
    setup_logger(level="WARNING")
    tokens = generate_tokens(text)
    reconstruction_ok = validate_reconstruction(text, tokens)

    if as_json:
        typer.echo(json.dumps([token_to_dict(t) for t in tokens], ensure_ascii=False, indent=2))
    else:
        console.print(_tokens_table(tokens))
        status = "[green]✓ reconstructs input[/green]" if reconstruction_ok else "[red]✗ reconstruction mismatch[/red]"
        console.print(f"{len(tokens)} tokens, {status}")

    if not reconstruction_ok:
        raise typer.Exit(1)


@app.command("validate")
def validate_command(
    input_file: Path = typer.Argument(..., help="File with a raw model response"),
    as_json: bool = typer.Option(False, "--json", help="Print validated tokens as JSON"),
):
    """Validate a raw model response against the token schema."""
    if not input_file.exists():
        console.print(f"[red]Error: Input file not found: {input_file}[/red]")
        raise typer.Exit(1)

    setup_logger(level="WARNING")
    result = validate(input_file.read_text(encoding="utf-8"))

    if as_json:
        payload = {
            "isValid": result.is_valid,
            "errors": result.errors,
            "warnings": result.warnings,
            "data": None if result.data is None else {
                "translation": result.data.translation,
                "tokens": [token_to_dict(t) for t in result.data.tokens],
            },
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        console.print(generate_report(result))

    if not result.is_valid:
        raise typer.Exit(1)


@app.command()
def translate(
    prompt: str = typer.Argument(..., help="Complete translation prompt"),
    backend: Optional[str] = typer.Option(None, "-b", "--backend", help="Completion backend (openai/anthropic/local)"),
    model: Optional[str] = typer.Option(None, "-m", "--model", help="Model name (e.g., gpt-4o-mini)"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="Maximum completion tokens"),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="Sampling temperature"),
    config_file: Optional[Path] = typer.Option(None, "-c", "--config", help="YAML config file"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Request a translation and print its token stream."""
    config = load_config(str(config_file) if config_file else None)
    if backend:
        config["llm"]["backend"] = backend
    if model:
        config["llm"]["model"] = model

    log_config = config.get("logging", {})
    setup_logger(level=log_config.get("level", "INFO"), log_file=log_config.get("file"))

    try:
        pipeline = TranslationPipeline(config=PipelineConfig.from_dict(config))
        result = asyncio.run(pipeline.generate_translation_with_tokens(prompt, max_tokens, temperature))
    except StoryLearnerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    console.print(f"[bold blue]Translation[/bold blue]: {result.translation}\n")
    console.print(_tokens_table(result.tokens))
    if result.metadata.used_fallback:
        console.print("[yellow]Structured response rejected; tokens come from plain-text fallback[/yellow]")
    for warning in result.metadata.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")


@app.command()
def backends():
    """List available completion backends."""
    from storylearner.translation.backends import get_available_backends

    table = Table(show_header=True, header_style="bold")
    table.add_column("Backend", style="cyan")
    table.add_column("Default model")
    table.add_column("Status")

    for info in get_available_backends():
        status = "[green]✓ configured[/green]" if info["available"] else "[red]✗ no API key[/red]"
        table.add_row(info["provider"], info["model"] or "-", status)

    console.print("\n[bold]Available Completion Backends[/bold]\n")
    console.print(table)


def cli():
    """Main CLI entry point."""
    if len(sys.argv) == 1:
        console.print("[dim]Type 'storylearner --help' for usage information[/dim]")
        return

    app()


if __name__ == "__main__":
    cli()
