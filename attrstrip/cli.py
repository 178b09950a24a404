"""CLI interface for attrstrip."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from attrstrip.config import MODES, ConfigurationError, PluginSettings, set_settings, validate_options
from attrstrip.matcher import (
    InvalidRuleKind,
    RuleParseError,
    create_attribute_matcher,
    load_config_file,
    parse_rules,
)
from attrstrip.pipeline.parse import LANGUAGE_MAP
from attrstrip.plugin import RemoveAttributesPlugin

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

SKIPPED_DIRECTORIES = {"node_modules", ".git"}


def setup_logging(log_level: str) -> None:
    """Configure logging with rich handler."""
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


@dataclass
class StripReport:
    """Outcome of running the plugin over a set of files."""

    removed: dict[Path, int] = field(default_factory=dict)
    unchanged: list[Path] = field(default_factory=list)
    failed_files: dict[Path, str] = field(default_factory=dict)

    @property
    def changed_count(self) -> int:
        return len(self.removed)

    @property
    def total_removed(self) -> int:
        return sum(self.removed.values())


def _parse_patterns(pattern_string: str) -> list[str]:
    """Parse comma-separated pattern string into list."""
    return [p.strip() for p in pattern_string.split(",") if p.strip()]


def _fail(message: str) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}")
    sys.exit(2)


def _build_options(
    config_path: Path | None,
    attributes: tuple[str, ...],
    include: str | None,
    exclude: str | None,
    mode: str | None,
) -> dict[str, Any]:
    """Merge config file options with command line overrides."""
    options: dict[str, Any] = load_config_file(config_path) if config_path else {}
    if attributes:
        options["attributes"] = parse_rules(list(attributes))
    if include is not None:
        options["include"] = _parse_patterns(include)
    if exclude is not None:
        options["exclude"] = _parse_patterns(exclude)
    if mode is not None:
        options["mode"] = mode.lower()
    return options


def _configure_settings(ctx: click.Context, **overrides: Any) -> PluginSettings:
    """Validate options and install them as the global settings."""
    try:
        options = _build_options(ctx.obj.get("config"), **overrides)
        settings = validate_options(options)
    except (ConfigurationError, RuleParseError, FileNotFoundError) as e:
        _fail(str(e))
    set_settings(settings)
    return settings


def _create_plugin(settings: PluginSettings) -> RemoveAttributesPlugin:
    try:
        return RemoveAttributesPlugin(settings)
    except (InvalidRuleKind, TypeError) as e:
        _fail(str(e))
        raise


def _is_skipped(path: Path, root: Path) -> bool:
    return any(part in SKIPPED_DIRECTORIES for part in path.relative_to(root).parts)


def collect_source_files(paths: tuple[Path, ...]) -> list[Path]:
    """Collect JavaScript and TypeScript files from files and directories."""
    files: list[Path] = []
    for target in paths:
        if target.is_file():
            files.append(target)
            continue
        for ext in LANGUAGE_MAP:
            for file in target.rglob(f"*{ext}"):
                if file.is_file() and not _is_skipped(file, target):
                    files.append(file)
    return sorted(set(files))


def _read_source(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Failed to read file {file_path}: {e}") from e


def _write_result(file_path: Path, code: str, source_map: Any) -> None:
    file_path.write_text(code, encoding="utf-8")
    if source_map is not None:
        map_path = file_path.with_name(file_path.name + ".map")
        map_path.write_text(source_map.to_json(), encoding="utf-8")


def run_strip(
    plugin: RemoveAttributesPlugin,
    files: list[Path],
    write: bool = False,
    source_map: bool = False,
    stdout: bool = False,
) -> StripReport:
    """Run the plugin over files, optionally writing the results back."""
    report = StripReport()
    for file_path in files:
        try:
            code = _read_source(file_path)
        except ValueError as e:
            logger.error(str(e))
            report.failed_files[file_path] = str(e)
            continue

        output = plugin.transform(code, str(file_path.resolve()))
        if output is None:
            report.unchanged.append(file_path)
            if stdout:
                click.echo(code, nl=False)
            continue

        report.removed[file_path] = output.removed
        if stdout:
            click.echo(output.code, nl=False)
        if write:
            _write_result(file_path, output.code, output.map if source_map else None)
    return report


def display_summary_table(report: StripReport, write: bool) -> None:
    """Display a summary table of removed attributes per file."""
    if not report.removed:
        console.print("\n[yellow]No matching attributes found.[/yellow]")
        return

    verb = "Stripped" if write else "Would strip"
    table = Table(title=f"\n[bold cyan]{verb}[/bold cyan]", show_header=True, header_style="bold")
    table.add_column("File", style="cyan")
    table.add_column("Attributes", justify="right")
    for path, removed in sorted(report.removed.items()):
        table.add_row(str(path), str(removed))
    console.print(table)
    console.print(
        f"{report.total_removed} attribute(s) in {report.changed_count} file(s), "
        f"{len(report.unchanged)} file(s) unchanged"
    )


def display_failed_files(report: StripReport) -> None:
    """Display files that could not be read."""
    if not report.failed_files:
        return

    console.print("\n[bold red]Failed Files:[/bold red]")
    for file_path, error in report.failed_files.items():
        console.print(f"  [red]✗[/red] {file_path}")
        console.print(f"    [dim]{error}[/dim]")


@click.group()
@click.pass_context
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="WARNING",
    help="Set the logging level",
)
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with attributes, include, exclude and mode",
)
def main(ctx: click.Context, log_level: str, config: Path | None) -> None:
    """Remove JSX attributes (like data-testid) from JavaScript and TypeScript sources."""
    setup_logging(log_level.upper())

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.pass_context
@click.option(
    "--attribute",
    "-a",
    "attributes",
    multiple=True,
    help="Attribute rule: a name, /regex/flags or re:regex (repeatable)",
)
@click.option(
    "--include",
    type=str,
    default=None,
    help="Comma-separated list of glob patterns of files to transform (default: all)",
)
@click.option(
    "--exclude",
    type=str,
    default=None,
    help="Comma-separated list of glob patterns of files to skip (e.g., '**/*.test.tsx')",
)
@click.option(
    "--mode",
    type=click.Choice(list(MODES), case_sensitive=False),
    default=None,
    help="'development' leaves every file untouched (default: production)",
)
@click.option("--write", is_flag=True, default=False, help="Rewrite files in place")
@click.option(
    "--source-map",
    is_flag=True,
    default=False,
    help="With --write, also write <file>.map next to each changed file",
)
@click.option("--stdout", is_flag=True, default=False, help="Print the transformed code of a single file")
@click.option(
    "--check",
    is_flag=True,
    default=False,
    help="Exit with error code 1 if any file contains matching attributes",
)
def strip(
    ctx: click.Context,
    paths: tuple[Path, ...],
    attributes: tuple[str, ...],
    include: str | None,
    exclude: str | None,
    mode: str | None,
    write: bool,
    source_map: bool,
    stdout: bool,
    check: bool,
) -> None:
    """Strip matching attributes from files and directories."""
    settings = _configure_settings(
        ctx, attributes=attributes, include=include, exclude=exclude, mode=mode
    )
    plugin = _create_plugin(settings)
    if not plugin.enabled and not stdout:
        console.print(f"[yellow]Attribute removal is disabled in {settings.mode} mode.[/yellow]")

    files = collect_source_files(paths)
    if stdout and len(files) != 1:
        _fail("--stdout requires exactly one file")

    report = run_strip(plugin, files, write=write, source_map=source_map, stdout=stdout)

    if not stdout:
        display_summary_table(report, write)
        display_failed_files(report)

    if check and report.removed:
        sys.exit(1)


@main.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_context
@click.option(
    "--attribute",
    "-a",
    "attributes",
    multiple=True,
    help="Attribute rule: a name, /regex/flags or re:regex (repeatable)",
)
def match(ctx: click.Context, names: tuple[str, ...], attributes: tuple[str, ...]) -> None:
    """Show which attribute names the configured rules would remove."""
    settings = _configure_settings(ctx, attributes=attributes, include=None, exclude=None, mode=None)
    try:
        matcher = create_attribute_matcher(settings.attributes)
    except InvalidRuleKind as e:
        _fail(str(e))
        raise

    console.print(f"\nRules: [cyan]{', '.join(r.describe() for r in matcher.rules) or 'none'}[/cyan]")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Attribute", style="cyan")
    table.add_column("Removed")
    for name in names:
        table.add_row(name, "[green]yes[/green]" if matcher(name) else "[dim]no[/dim]")
    console.print(table)


if __name__ == "__main__":
    main()
