"""CLI entry point for api-dashboard."""

import json
import logging
from pathlib import Path

import click

from api_dashboard.config import load_settings
from api_dashboard.dashboard import Dashboard
from api_dashboard.errors import ApiDashboardError
from api_dashboard.generator.markdown import render, render_not_found
from api_dashboard.routing import load_registry

DEFAULT_APP = "api_dashboard.demo:registry"


def _dashboard(app: str, config: Path | None) -> Dashboard:
    """Load settings and the route registry named by ``app``."""
    try:
        settings = load_settings(config)
        registry = load_registry(app)
    except ApiDashboardError as e:
        raise click.ClickException(str(e)) from e
    return Dashboard(registry, settings)


def _write(text: str, output: Path | None) -> None:
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Saved to {output}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Dashboard: example payloads and Markdown docs from handler source."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--app", default=DEFAULT_APP, show_default=True, help="Route registry as module:attribute.")
@click.option("--config", type=click.Path(exists=True, path_type=Path), default=None, help="Settings YAML file.")
@click.option("--base-url", default=None, help="Base URL prefixed to every path.")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None, help="Write JSON here instead of stdout.")
def meta(app: str, config: Path | None, base_url: str | None, output: Path | None):
    """Print the grouped endpoint metadata as JSON."""
    dashboard = _dashboard(app, config)
    index = dashboard.meta(base_url)
    _write(json.dumps(index.to_listing(), indent=2, ensure_ascii=False), output)


@main.command()
@click.argument("key")
@click.option("--app", default=DEFAULT_APP, show_default=True, help="Route registry as module:attribute.")
@click.option("--config", type=click.Path(exists=True, path_type=Path), default=None, help="Settings YAML file.")
@click.option("--base-url", default=None, help="Base URL used to match full URLs.")
@click.option("--actual", type=click.Path(exists=True, path_type=Path), default=None, help="File holding a captured response body.")
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None, help="Write Markdown here instead of stdout.")
def export(key: str, app: str, config: Path | None, base_url: str | None, actual: Path | None, output: Path | None):
    """Export one endpoint (URL, path or "METHOD path") as Markdown."""
    dashboard = _dashboard(app, config)
    actual_response = actual.read_text(encoding="utf-8") if actual else None
    metadata = dashboard.find(key, base_url)
    if metadata is None:
        click.echo(render_not_found(key), err=True)
        raise SystemExit(1)
    _write(render(metadata, actual_response), output)
