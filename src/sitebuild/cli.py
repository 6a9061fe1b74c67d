from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path
from typing import Dict, List

import typer
from dotenv import load_dotenv

from .config import DEFAULT_CONFIG, SiteConfig, load_site_config
from .core import Pipeline, TaskSpec, register
from .errors import ConfigError, TaskError
from .logging import configure, get_logger

load_dotenv()

app = typer.Typer(add_completion=False, help="Build tasks for the jto.github.io site")
log = get_logger("sitebuild.cli")


def discover_tasks() -> Dict[str, TaskSpec]:
    """Import all modules in the `tasks` package and collect declared tasks."""
    tasks_pkg = "sitebuild.tasks"
    specs: Dict[str, TaskSpec] = {}
    pkg = importlib.import_module(tasks_pkg)
    for m in pkgutil.iter_modules(pkg.__path__, prefix=f"{tasks_pkg}."):
        mod = importlib.import_module(m.name)
        for attr_name in dir(mod):
            obj = getattr(mod, attr_name)
            spec = obj if isinstance(obj, TaskSpec) else getattr(obj, "_task_spec", None)
            if isinstance(spec, TaskSpec):
                register(specs, spec)
    return specs


def _load(config_path: str) -> SiteConfig:
    if str(config_path) != DEFAULT_CONFIG and not Path(config_path).exists():
        typer.echo(f"Config not found: {config_path}")
        raise typer.Exit(code=1)
    try:
        return load_site_config(config_path)
    except ConfigError as e:
        typer.echo(f"Invalid config: {e}")
        raise typer.Exit(code=1)


def run_tasks(names: List[str], config_path: str) -> None:
    specs = discover_tasks()
    unknown = [n for n in names if n not in specs]
    if unknown:
        typer.echo(f"Task not found: {', '.join(unknown)}")
        raise typer.Exit(code=1)
    site = _load(config_path)
    try:
        site.validate_tasks(specs)
    except ConfigError as e:
        typer.echo(f"Invalid config: {e}")
        raise typer.Exit(code=1)
    pipe = Pipeline(tasks=specs, name="build")
    try:
        pipe.run(site, names)
    except (TaskError, OSError, ValueError, KeyError) as e:
        log.error("Aborted: %s", e)
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: str = typer.Option(DEFAULT_CONFIG, help="Path to YAML config"),
    log_level: str = typer.Option("", help="Log level (overrides SITEBUILD_LOG_LEVEL)"),
    log_file: str = typer.Option("", help="Also write logs to this file"),
):
    """Run the default task (watch) when no command is given."""
    configure(level=log_level or None, log_file=Path(log_file) if log_file else None)
    ctx.obj = {"config": config}
    if ctx.invoked_subcommand is None:
        run_tasks(["default"], config)


@app.command("list")
def list_tasks():
    """List registered tasks."""
    specs = discover_tasks()
    typer.echo("Available tasks:")
    for name in sorted(specs.keys()):
        desc = specs[name].description
        typer.echo(f"- {name}" + (f"  {desc}" if desc else ""))


@app.command("run")
def run(
    ctx: typer.Context,
    names: List[str] = typer.Argument(..., help="Task names, run in order"),
):
    """Run one or more tasks by name (less-build, assets-copy, jekyll-build, watch)."""
    run_tasks(names, ctx.obj["config"])


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
