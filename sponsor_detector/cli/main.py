# sponsor_detector/cli/main.py
"""
CLI entrypoint for the sponsor detector.

Thin adapter with no business logic.
Responsibilities:
- `serve`: validate configuration and run the HTTP server
- `analyze`: run the pipeline once for a URL and print the JSON payload

All logging is structured JSON from the core pipeline.
"""

from __future__ import annotations

import json
import sys
from typing import Optional

import typer

from sponsor_detector.analyzer.runner import run_analysis
from sponsor_detector.api.app import build_collaborators, create_app
from sponsor_detector.config import AppConfig
from sponsor_detector.logging_core.logger import configure_logging


app = typer.Typer(
    name="sponsor-detector",
    help="Sponsor Detector: find sponsored segments in YouTube videos",
    no_args_is_help=True,
)


def _load_config() -> AppConfig:
    config = AppConfig.from_env()
    try:
        config.validate()
    except ValueError as exc:
        typer.echo(typer.style(f"✗ Configuration Error: {exc}", fg=typer.colors.RED, bold=True), err=True)
        typer.echo("Please create a .env file with your GEMINI_API_KEY.", err=True)
        raise typer.Exit(code=1)
    return config


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind (default: HOST or 127.0.0.1)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on (default: PORT or 3000)"),
) -> None:
    """
    Run the HTTP server exposing POST /analyze-video.
    """
    config = _load_config()
    flask_app = create_app(config)

    bind_host = host or config.host
    bind_port = port or config.port
    typer.echo(f"Server running on port {bind_port}")
    flask_app.run(host=bind_host, port=bind_port)


@app.command()
def analyze(
    url: str = typer.Argument(..., help="YouTube video URL"),
    pretty: bool = typer.Option(False, "--pretty", help="Indent the JSON output"),
) -> None:
    """
    Analyze one video and print the response payload as JSON.
    """
    config = _load_config()
    configure_logging(config.log_level)

    outcome = run_analysis(url, build_collaborators(config))
    typer.echo(json.dumps(outcome.payload.to_json(), ensure_ascii=False, indent=2 if pretty else None))

    if not outcome.ok:
        typer.echo(typer.style(f"✗ Analysis failed ({outcome.status_code})", fg=typer.colors.RED, bold=True), err=True)
        sys.exit(1)


if __name__ == "__main__":
    app()
