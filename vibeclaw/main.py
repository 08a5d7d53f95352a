"""VibeClaw command line: run the plugin tools outside an agent host."""

import asyncio
from typing import Any

import typer

from vibeclaw.config import Config, get_config, set_config
from vibeclaw.exceptions import ConfigurationError
from vibeclaw.logging import configure_logging
from vibeclaw.plugin import VibeClawPlugin
from vibeclaw.tools import ToolResult

app = typer.Typer(help="VibeClaw - search, vet and install skills from Vibe Index")

_config_path: str = ""
_verbose: bool = False


async def _run_tool(plugin: VibeClawPlugin, name: str, arguments: dict[str, Any]) -> ToolResult:
    plugin.register()
    try:
        return await plugin.registry.execute(name, arguments)
    finally:
        await plugin.close()


def _load_config() -> Config:
    if _config_path:
        cfg = Config.load(_config_path)
        set_config(cfg)
        return cfg
    return get_config()


def run_tool(name: str, arguments: dict[str, Any]) -> None:
    """Execute one tool, print its text, exit non-zero on failure."""
    try:
        cfg = _load_config()
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)
    configure_logging(cfg, level="DEBUG" if _verbose else None)
    plugin = VibeClawPlugin(cfg)
    result = asyncio.run(_run_tool(plugin, name, arguments))
    typer.echo(result.text)
    if not result.success:
        raise typer.Exit(code=1)


@app.callback()
def _options(
    config: str = typer.Option("", "-c", "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Debug logging"),
) -> None:
    global _config_path, _verbose
    _config_path = config
    _verbose = verbose


@app.command()
def search(
    query: str = typer.Argument(..., help="Capability to search for"),
    type: str = typer.Option("", "-t", "--type", help="skill, plugin, mcp or marketplace"),
    limit: int = typer.Option(5, "-n", "--limit", help="Number of results (1-10)"),
) -> None:
    """Search the Vibe Index catalog."""
    run_tool("vibeclaw_search", {"query": query, "type": type or None, "limit": limit})


@app.command()
def install(
    query: str = typer.Argument(..., help="Skill name or search query"),
    force: bool = typer.Option(False, "-f", "--force", help="Reinstall if already installed"),
) -> None:
    """Install a skill from GitHub."""
    run_tool("vibeclaw_install", {"query": query, "force": force})


@app.command()
def trending(
    period: str = typer.Option("week", "-p", "--period", help="day, week or month"),
    type: str = typer.Option("", "-t", "--type", help="skill, plugin, mcp or marketplace"),
    limit: int = typer.Option(5, "-n", "--limit", help="Number of results (1-10)"),
) -> None:
    """Show trending resources."""
    run_tool("vibeclaw_trending", {"period": period, "type": type or None, "limit": limit})


@app.command("list")
def list_skills() -> None:
    """List VibeClaw-installed skills."""
    run_tool("vibeclaw_manage", {"action": "list"})


@app.command()
def uninstall(skill_name: str = typer.Argument(..., help="Installed skill name")) -> None:
    """Remove a VibeClaw-installed skill."""
    run_tool("vibeclaw_manage", {"action": "uninstall", "skill_name": skill_name})


@app.command()
def audit(query: str = typer.Argument("", help="Skill to audit; omit to audit installed skills")) -> None:
    """Check security scan results."""
    run_tool("vibeclaw_audit", {"query": query or None})


@app.command()
def version() -> None:
    """Show version information."""
    from vibeclaw import __version__

    typer.echo(f"VibeClaw v{__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
