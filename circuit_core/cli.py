"""Circuit Emotion CLI - Main entry point."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import yaml
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import EngineConfig, PersistMode
from .core.logging import setup_logging
from .emotion.base import CircuitEmotionError, SessionSummary, TextResult
from .emotion.seeding import seed_from_paths
from .emotion.service import EmotionAnalysisService

console = Console()


# =============================================================================
# Output
# =============================================================================


def print_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def print_yaml(data: Any) -> None:
    click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def print_key_values(title: str, rows: Dict[str, Any]) -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in rows.items():
        if isinstance(value, float):
            value = f"{value:.4f}"
        elif isinstance(value, dict):
            value = json.dumps(value)
        table.add_row(key.replace("_", " ").title(), str(value))
    console.print(table)


def print_distribution(title: str, emotions: Dict[str, float]) -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Emotion")
    table.add_column("Weight", justify="right")
    for emotion, weight in sorted(emotions.items(), key=lambda kv: -kv[1]):
        table.add_row(emotion, f"{weight:.3f}")
    console.print(table)


def render_text_result(result: TextResult, output: str) -> None:
    data = result.to_dict()
    if output == "json":
        print_json(data)
        return
    if output == "yaml":
        print_yaml(data)
        return

    print_key_values("Text Analysis", {
        "overall_emotion": result.overall_emotion,
        "confidence": result.confidence,
        "word_count": result.word_count,
        "analyzed_words": result.analyzed_words,
        "coverage": result.coverage,
        "valence": result.vad.valence,
        "arousal": result.vad.arousal,
        "sentiment": f"{result.sentiment.polarity.value} ({result.sentiment.strength:.2f})",
        "processing_method": result.processing_method.value,
    })
    print_distribution("Emotions", result.emotions)

    words = Table(title="Words", show_header=True, header_style="bold cyan")
    for column in ("Word", "Found", "Source", "Emotion", "Confidence"):
        words.add_column(column)
    for analysis in result.word_analysis:
        words.add_row(
            analysis.token,
            "✓" if analysis.found else "✗",
            analysis.provenance.value,
            analysis.dominant_emotion or "-",
            f"{analysis.confidence:.3f}",
        )
    console.print(words)


def render_session_summary(summary: SessionSummary, output: str) -> None:
    data = summary.to_dict()
    if output == "json":
        print_json(data)
        return
    if output == "yaml":
        print_yaml(data)
        return

    print_key_values("Session Summary", {
        "session_id": summary.session_id,
        "message_count": summary.message_count,
        "dominant_mood": summary.dominant_mood,
        "mood_confidence": summary.mood_confidence,
        "trend": summary.trend.value,
        "valence": summary.vad.valence,
        "arousal": summary.vad.arousal,
        "duration_seconds": summary.duration_seconds,
    })
    print_distribution("Mood Breakdown", summary.emotions)


# =============================================================================
# Helpers
# =============================================================================


def build_config(ctx: click.Context) -> EngineConfig:
    config = EngineConfig.from_env()
    overrides: Dict[str, Any] = {}
    if ctx.obj.get("database_url"):
        overrides["database_url"] = ctx.obj["database_url"]
    if ctx.obj.get("no_inference"):
        overrides["inference_enabled"] = False
    if ctx.obj.get("persist_mode"):
        overrides["persist_mode"] = PersistMode(ctx.obj["persist_mode"])
    return config.model_copy(update=overrides)


def run(coro):
    """Run a coroutine, turning engine errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except CircuitEmotionError as e:
        print_error(str(e))
        sys.exit(1)


# =============================================================================
# Commands
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="circuit")
@click.option("--database-url", envvar="DATABASE_URL", help="Database connection URL")
@click.option("--no-inference", is_flag=True, help="Never call the inference service")
@click.option("--persist-mode", type=click.Choice([m.value for m in PersistMode]),
              help="How inferred profiles are written to the lexicon")
@click.option("--output", "-o", type=click.Choice(["table", "json", "yaml"]), default="table",
              help="Output format")
@click.option("--log-level", default="WARNING", help="Log level for diagnostics on stderr")
@click.pass_context
def cli(
    ctx: click.Context,
    database_url: Optional[str],
    no_inference: bool,
    persist_mode: Optional[str],
    output: str,
    log_level: str,
):
    """Circuit Emotion - word-level emotion analysis from the command line.

    \b
    Examples:
      circuit init-db
      circuit seed words/
      circuit analyze "I feel wonderful and amazing today"
      circuit -o json session conversation.txt
    """
    ctx.ensure_object(dict)
    setup_logging(level=log_level, stream=sys.stderr)

    ctx.obj["database_url"] = database_url
    ctx.obj["no_inference"] = no_inference
    ctx.obj["persist_mode"] = persist_mode
    ctx.obj["output"] = output


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context):
    """Create the lexicon and analysis log tables."""
    config = build_config(ctx)

    async def _init() -> None:
        service = EmotionAnalysisService.from_config(config)
        try:
            await service.db.create_all()
        finally:
            await service.stop()

    run(_init())
    print_success(f"Database initialized: {config.database_url}")


@cli.command("seed")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.pass_context
def seed(ctx: click.Context, paths: List[Path]):
    """Import curated word profiles from JSON files or directories."""
    config = build_config(ctx)

    async def _seed():
        service = EmotionAnalysisService.from_config(config)
        try:
            await service.db.create_all()
            report = await seed_from_paths(service.store, paths)
            total_words = await service.store.count_words()
        finally:
            await service.stop()
        return report, total_words

    report, total_words = run(_seed())
    output = ctx.obj["output"]
    data = dict(report.to_dict(), total_words=total_words)

    if output == "json":
        print_json(data)
    elif output == "yaml":
        print_yaml(data)
    else:
        print_key_values("Seed Summary", data)
        for message in report.error_messages[:20]:
            print_error(message)

    if report.errors and not report.inserted and not report.skipped:
        sys.exit(1)


@cli.command("analyze")
@click.argument("text")
@click.pass_context
def analyze(ctx: click.Context, text: str):
    """Analyze the emotional content of TEXT."""
    config = build_config(ctx)

    async def _analyze() -> TextResult:
        service = EmotionAnalysisService.from_config(config)
        await service.start(create_tables=True)
        try:
            return await service.analyze_text(text)
        finally:
            await service.stop()

    render_text_result(run(_analyze()), ctx.obj["output"])


@cli.command("session")
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def session(ctx: click.Context, file):
    """Analyze FILE as a session, one message per line, and summarize the mood."""
    config = build_config(ctx)
    messages = [line.strip() for line in file if line.strip()]

    async def _session() -> SessionSummary:
        service = EmotionAnalysisService.from_config(config)
        await service.start(create_tables=True)
        try:
            mood_session = service.start_session()
            for message in messages:
                await service.analyze_text(message, session_id=mood_session.session_id)
            return service.end_session(mood_session.session_id)
        finally:
            await service.stop()

    render_session_summary(run(_session()), ctx.obj["output"])


@cli.command("stats")
@click.pass_context
def stats(ctx: click.Context):
    """Show lexicon size and inference availability."""
    config = build_config(ctx)

    async def _stats() -> Dict[str, Any]:
        service = EmotionAnalysisService.from_config(config)
        try:
            data = await service.get_stats()
        finally:
            await service.stop()
        data.pop("analysis_log", None)
        return data

    data = run(_stats())
    output = ctx.obj["output"]
    if output == "json":
        print_json(data)
    elif output == "yaml":
        print_yaml(data)
    else:
        print_key_values("Engine Stats", data)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
