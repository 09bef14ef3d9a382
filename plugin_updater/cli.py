"""
Command-line interface for the GitHub Plugin Updater
"""

import logging

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from plugin_updater import __version__

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_engine(plugin_file: str, repo: str | None, no_cache: bool):
    from plugin_updater.core.config import get_settings
    from plugin_updater.core.exceptions import ConfigurationError
    from plugin_updater.update.cache import ResponseCache
    from plugin_updater.update.engine import create_engine

    settings = get_settings()
    if repo:
        settings = settings.model_copy(update={"repository": repo})

    cache = ResponseCache(ttl=settings.cache_ttl_seconds) if no_cache else None
    try:
        return create_engine(plugin_file, settings, cache=cache)
    except ConfigurationError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """GitHub Plugin Updater - release-based updates for a single plugin"""
    pass


@main.command()
@click.argument("plugin_file", type=click.Path(dir_okay=False))
@click.option("--repo", default=None, help="Repository as owner/repo (default: settings or Plugin URI)")
@click.option("--installed-version", default=None, help="Override the installed version")
@click.option("--no-cache", is_flag=True, help="Ignore the release cache for this check")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed logging")
def check(plugin_file: str, repo: str | None, installed_version: str | None, no_cache: bool, verbose: bool) -> None:
    """Check whether a newer release is available"""
    from plugin_updater.update.models import CheckRequest

    _configure_logging(verbose)
    engine = _build_engine(plugin_file, repo, no_cache)

    identity = engine.identity
    if installed_version:
        identity = identity.with_installed_version(installed_version)

    if engine.repository is None:
        console.print("[yellow]⚠️  No repository configured - remote tracking disabled[/yellow]")
        return

    result = engine.on_update_check(CheckRequest(identity))

    if result.has_update:
        descriptor = result.descriptor
        console.print(
            Panel.fit(
                f"[bold green]Update available[/bold green]\n"
                f"{descriptor.slug}: {identity.installed_version or '?'} → {descriptor.new_version}\n"
                f"Package: {descriptor.package_url}",
                border_style="green",
            )
        )
    elif result.no_update is not None:
        console.print(f"[green]✅ {identity.slug} is up to date ({identity.installed_version})[/green]")
    else:
        console.print(f"[yellow]No release information available for {engine.repository}[/yellow]")


@main.command()
@click.argument("plugin_file", type=click.Path(dir_okay=False))
@click.option("--repo", default=None, help="Repository as owner/repo (default: settings or Plugin URI)")
def info(plugin_file: str, repo: str | None) -> None:
    """Show plugin information and release notes"""
    _configure_logging(False)
    engine = _build_engine(plugin_file, repo, no_cache=False)

    details = engine.on_plugin_information("plugin_information", engine.identity.slug)
    if details is None:
        console.print("[yellow]No release information available[/yellow]")
        return

    table = Table(title=details.name or details.slug)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Version", details.version)
    table.add_row("Tested up to", details.tested)
    table.add_row("Last updated", details.last_updated)
    table.add_row("Homepage", details.homepage or "")
    table.add_row("Download", details.download_link)
    console.print(table)
    console.print(Panel(details.sections.get("Updates", ""), title="Updates"))


@main.command("cache-key")
@click.argument("slug")
def cache_key_command(slug: str) -> None:
    """Print the release cache key for a plugin slug"""
    from plugin_updater.update.cache import cache_key

    click.echo(cache_key(slug))


if __name__ == "__main__":
    main()
