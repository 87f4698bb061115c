"""
oralcheck.cli - Typer CLI entry point.

Provides subcommands to analyze transcripts, assess recordings end to end,
write a default config and serve the HTTP API.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from oralcheck import __version__
from oralcheck.analyze.feedback import build_feedback
from oralcheck.analyze.transcript import SessionContext, TranscriptMetrics, analyze_transcript
from oralcheck.config import (
    CONFIG_FILENAME,
    OralCheckConfig,
    create_default_config,
    load_config,
    write_config,
)
from oralcheck.exceptions import ConfigError
from oralcheck.io import read_text, write_json
from oralcheck.logging import configure_logging
from oralcheck.utils import format_duration, get_rating_style

app = typer.Typer(
    name="oralcheck",
    help="Oral assessment toolkit.\n\n"
    "Transcribes spoken answers, scores the transcript (fillers, vocabulary, "
    "readability, pace) and suggests follow-up questions.",
    add_completion=False,
)
console = Console()

SAMPLE_TRANSCRIPT = (
    "Um, I think the data indicates a significant trend. "
    "Like, it suggests a method to analyze variables."
)

# Samples pushed per call when replaying a file as a live capture
REPLAY_CHUNK_SECONDS = 1.0


def version_callback(value: bool) -> None:
    if value:
        console.print(f"oralcheck {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Oralcheck - oral assessment toolkit."""
    configure_logging(verbose)


def _load_config_or_exit() -> OralCheckConfig:
    try:
        return load_config(Path.cwd())
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def print_metrics(metrics: TranscriptMetrics) -> None:
    """Render metrics with ratings and narrative feedback."""
    feedback = build_feedback(metrics)
    ratings = feedback["ratings"]

    def styled(name: str, text: str) -> str:
        style = get_rating_style(ratings[name])
        return f"[{style}]{text}[/{style}]"

    table = Table(title="Automated Feedback")
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("Words", str(metrics.word_count))
    table.add_row(
        "Filler words",
        styled(
            "filler_rate",
            f"{metrics.filler_count} (rate: {metrics.filler_rate * 100:.2f}%)",
        ),
    )
    table.add_row(
        "Academic word matches",
        styled("academic_matches", str(metrics.academic_matches)),
    )
    table.add_row(
        "Type-token ratio",
        styled("type_token_ratio", f"{metrics.type_token_ratio:.3f}"),
    )
    table.add_row(
        "Avg sentence length",
        styled("avg_sentence_length", f"{metrics.avg_sentence_length:.1f} words"),
    )
    table.add_row(
        "Flesch reading ease (approx)",
        styled("readability", str(metrics.readability)),
    )
    table.add_row("Estimated pitch mean (Hz)", str(metrics.pitch_mean))
    table.add_row("Estimated volume mean (RMS)", str(metrics.volume_mean))
    table.add_row(
        "Words per minute (approx)",
        styled("words_per_minute", str(metrics.words_per_minute)),
    )
    console.print(table)

    console.print("\n[bold]Narrative Feedback[/bold]")
    for sentence in feedback["narrative"]:
        console.print(f"  {sentence}")


@app.command("init")
def init_config(
    path: str = typer.Option(".", "--path", "-d", help="Directory to write the config into"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
) -> None:
    """Write a default oralcheck.yaml."""
    config_path = Path(path) / CONFIG_FILENAME
    if config_path.exists() and not force:
        console.print(f"[red]Error: '{config_path}' already exists[/red]")
        raise typer.Exit(1)

    write_config(create_default_config(), config_path)
    console.print(f"[green]✓[/green] Wrote {config_path}")
    console.print("[dim]  Set OPENAI_API_KEY in the environment for hosted providers.[/dim]")


@app.command("analyze")
def analyze(
    transcript_file: str | None = typer.Argument(None, help="Text file with the transcript"),
    sample: bool = typer.Option(False, "--sample", help="Analyze the built-in sample transcript"),
    duration: float = typer.Option(0.0, "--duration", "-t", help="Speaking time in seconds"),
    output: str | None = typer.Option(None, "--output", "-o", help="Write metrics JSON here"),
) -> None:
    """Score a transcript without calling any provider."""
    if sample:
        text = SAMPLE_TRANSCRIPT
    elif transcript_file:
        path = Path(transcript_file)
        if not path.exists():
            console.print(f"[red]Error: File not found: {path}[/red]")
            raise typer.Exit(1)
        text = read_text(path)
    else:
        console.print("[red]Error: Provide a transcript file or --sample[/red]")
        raise typer.Exit(1)

    config = _load_config_or_exit()
    context = SessionContext.from_config(config)
    metrics = analyze_transcript(text, context, elapsed_seconds=duration)

    if metrics is None:
        console.print("[yellow]Transcript is empty; nothing to analyze.[/yellow]")
        raise typer.Exit(0)

    console.print(f"\n[bold]Transcript[/bold]\n{text.strip()}\n")
    print_metrics(metrics)

    if output:
        write_json(
            Path(output),
            {"transcript": text, "metrics": metrics.to_dict(), "feedback": build_feedback(metrics)},
        )
        console.print(f"\n[dim]Saved metrics to {output}[/dim]")


@app.command("assess")
def assess(
    audio_file: str = typer.Argument(..., help="Recorded audio file"),
    upload: bool = typer.Option(
        False,
        "--upload",
        "-u",
        help="Send the file as-is without live loudness/pitch tracking",
    ),
    duration: float | None = typer.Option(
        None, "--duration", "-t", help="Speaking time in seconds for --upload"
    ),
    output: str | None = typer.Option(None, "--output", "-o", help="Write session report JSON"),
) -> None:
    """Run a full assessment: capture, transcribe, analyze, ask questions.

    By default the file is replayed through the capture pipeline as if it
    were being recorded, so loudness and pitch are tracked and the 10 minute
    cap applies. With --upload the raw file is transcribed directly.
    """
    from oralcheck.session import AssessmentSession

    path = Path(audio_file)
    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)

    config = _load_config_or_exit()
    session = AssessmentSession(config)

    if upload:
        console.print(f"[cyan]Uploading {path.name} for transcription...[/cyan]")
        outcome = session.assess_upload(path.read_bytes(), path.name, duration)
    else:
        import librosa

        try:
            samples, sr = librosa.load(str(path), sr=None, mono=True)
        except Exception as e:
            console.print(f"[red]Error: Failed to load audio: {e}[/red]")
            raise typer.Exit(1)

        session.start(int(sr))
        chunk = max(1, int(sr * REPLAY_CHUNK_SECONDS))
        for start in range(0, len(samples), chunk):
            session.push_samples(samples[start : start + chunk])
            if not session.is_recording:
                break
        session.stop()
        console.print(
            f"[cyan]Captured {format_duration(session.elapsed_seconds)}; "
            "transcribing...[/cyan]"
        )
        outcome = session.finish()

    if not outcome.ok:
        failure = outcome.failure
        console.print(f"[red]Error ({failure.kind.value}): {failure.message}[/red]")
        if failure.detail:
            console.print(f"[dim]  {failure.detail}[/dim]")
        raise typer.Exit(1)

    report = outcome.value
    console.print(f"\n[bold]Transcript[/bold]\n{report.transcript or '(No transcript)'}\n")
    if report.metrics:
        print_metrics(report.metrics)
    else:
        console.print("[yellow]Transcript is empty; no feedback.[/yellow]")

    console.print("\n[bold]Probing Questions[/bold]")
    if report.questions:
        for i, question in enumerate(report.questions, 1):
            console.print(f"  {i}. {question}")
    else:
        console.print("  [dim](No questions)[/dim]")

    if output:
        write_json(Path(output), report.to_dict())
        console.print(f"\n[dim]Saved report to {output}[/dim]")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
) -> None:
    """Serve the HTTP API."""
    import uvicorn

    from oralcheck.api import create_app

    config = _load_config_or_exit()
    console.print(f"[cyan]Serving Oralcheck API on http://{host}:{port}[/cyan]")
    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == "__main__":
    app()
