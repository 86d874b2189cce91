from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import ConfigError, WalkConfig, load_config
from .diagnostics import ErrorReporter
from .globs import IgnoreGlobs
from .models import Display, Layout, Severity
from .render import build_rich_tree
from .tree import build_tree

app = typer.Typer(
    help="List directory entries with resolved metadata",
    add_completion=False,
)
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _display_override(
    all_: bool, almost_all: bool, directory_only: bool, system_protected: bool
) -> Display | None:
    if system_protected:
        return Display.SYSTEM_PROTECTED
    if all_:
        return Display.ALL
    if almost_all:
        return Display.ALMOST_ALL
    if directory_only:
        return Display.DIRECTORY_ONLY
    return None


def _layout_override(tree: bool, oneline: bool) -> Layout | None:
    if tree:
        return Layout.TREE
    if oneline:
        return Layout.ONELINE
    return None


def _list_paths(
    paths: list[Path], config: WalkConfig, classify: bool, reporter: ErrorReporter
) -> Severity:
    severity = Severity.OK
    for path in paths:
        try:
            result = build_tree(path, config, reporter=reporter)
        except OSError as exc:
            reporter.report(path, exc)
            severity = max(severity, Severity.MAJOR_ISSUE)
            continue
        severity = max(severity, result.severity)
        console.print(build_rich_tree(result.root, classify=classify))
    return severity


@app.command()
def main(
    paths: list[Path] | None = typer.Argument(None, help="Paths to list"),
    all_: bool = typer.Option(False, "--all", "-a", help="Show hidden entries plus . and .."),
    almost_all: bool = typer.Option(
        False, "--almost-all", "-A", help="Show hidden entries, without . and .."
    ),
    directory_only: bool = typer.Option(
        False, "--directory-only", "-d", help="Do not expand directories"
    ),
    system_protected: bool = typer.Option(
        False, "--system-protected", help="Include entries flagged as system protected"
    ),
    dereference: bool | None = typer.Option(
        None, "--dereference/--no-dereference", "-L", help="Describe symlinks by their target"
    ),
    tree: bool = typer.Option(False, "--tree", help="Recurse into directories"),
    oneline: bool = typer.Option(False, "--oneline", "-1", help="One entry per line"),
    depth: int | None = typer.Option(None, "--depth", min=0, help="Maximum recursion depth"),
    ignore_glob: list[str] | None = typer.Option(
        None, "--ignore-glob", "-I", help="Skip entries whose name matches this glob"
    ),
    total_size: bool | None = typer.Option(
        None, "--total-size/--no-total-size", help="Report cumulative directory sizes"
    ),
    classify: bool = typer.Option(False, "--classify", "-F", help="Append type indicators"),
    config_path: Path | None = typer.Option(None, "--config", help="TOML configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log traversal details"),
) -> None:
    """List PATHS (default: the current directory) with their metadata."""
    _setup_logging(verbose)
    try:
        base = load_config(config_path)
        config = base.merged(
            dereference=dereference,
            display=_display_override(all_, almost_all, directory_only, system_protected),
            layout=_layout_override(tree, oneline),
            depth=depth,
            ignore_globs=IgnoreGlobs(ignore_glob) if ignore_glob else None,
            total_size=total_size,
        )
    except ConfigError as exc:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        raise typer.Exit(int(Severity.MAJOR_ISSUE))

    reporter = ErrorReporter(err_console)
    severity = _list_paths(paths or [Path(".")], config, classify, reporter)
    if verbose:
        err_console.print(f"{reporter.reported} diagnostics, exit severity {severity.name}")
    raise typer.Exit(int(severity))


if __name__ == "__main__":
    app()
