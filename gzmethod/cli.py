"""Command Line Interface for gzmethod."""

import base64
import binascii
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import click
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from .codec import CompressionMethodError, GzipCompressionMethod
from .codec.pump import ProgressCallback
from .config import DEFAULT_CONFIG_PATH, AppConfig, GzipConfig, get_config, load_config, save_config
from .util import get_logger, setup_logging
from .util.paths import PathKind, format_size, path_kind

console = Console()
error_console = Console(stderr=True)


def setup_cli_logging(config: AppConfig, verbose: bool = False):
    """Setup logging for CLI."""
    level = "DEBUG" if verbose else config.log_level
    setup_logging(level=level, log_file=config.log_file, console=error_console)


def create_progress_bar(total: Optional[int], desc: str) -> tqdm:
    """Create a byte-counting progress bar for a streaming operation."""
    return tqdm(
        total=total,
        desc=desc,
        unit="B",
        unit_scale=True,
        unit_divisor=1024,
        leave=False,
    )


@contextmanager
def _progress(enabled: bool, desc: str, total: Optional[int] = None) -> Iterator[Optional[ProgressCallback]]:
    """Yield a progress callback, or None when progress output is off."""
    if not enabled:
        yield None
        return

    bar = create_progress_bar(total, desc)
    try:
        yield bar.update
    finally:
        bar.close()


def _build_method(config: AppConfig, level: Optional[int], chunk_size: Optional[int]) -> GzipCompressionMethod:
    """Create a GZIP method from the loaded config and command-line overrides."""
    overrides = {}
    if level is not None:
        overrides["compression_level"] = level
    if chunk_size is not None:
        overrides["chunk_size"] = chunk_size

    gzip_config = GzipConfig(**{**config.gzip.model_dump(), **overrides})
    return GzipCompressionMethod(config=gzip_config)


def _describe(path: Path) -> str:
    if path_kind(path) is PathKind.FILE:
        return f"{path} ({format_size(path.stat().st_size)})"
    return str(path)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Optional[Path]):
    """gzmethod - GZIP compression for files and directories."""
    ctx.ensure_object(dict)
    app_config = load_config(config) if config else get_config()
    ctx.obj["config"] = app_config

    setup_cli_logging(app_config, verbose)


@cli.command("compress")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--level", "-l", type=click.IntRange(0, 9), help="Compression level (0-9)")
@click.option("--chunk-size", type=click.IntRange(min=1), help="Bytes read per chunk")
@click.option("--no-progress", is_flag=True, help="Hide progress bars")
@click.pass_context
def compress(ctx, paths: List[Path], level: Optional[int], chunk_size: Optional[int], no_progress: bool):
    """Compress files to .gz and directories to .tar.gz."""
    config: AppConfig = ctx.obj["config"]
    method = _build_method(config, level, chunk_size)
    show_progress = config.show_progress and not no_progress
    failures = 0

    for path in paths:
        total = path.stat().st_size if path_kind(path) is PathKind.FILE else None
        try:
            with _progress(show_progress, path.name, total) as callback:
                result = method.compress_path(path, callback)
            console.print(f"[green]Compressed[/green] {path} -> {_describe(result)}")
        except CompressionMethodError as e:
            console.print(f"[red]Compression failed: {e}[/red]")
            failures += 1

    if failures:
        sys.exit(1)


@cli.command("uncompress")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--chunk-size", type=click.IntRange(min=1), help="Bytes read per chunk")
@click.option("--no-progress", is_flag=True, help="Hide progress bars")
@click.pass_context
def uncompress(ctx, paths: List[Path], chunk_size: Optional[int], no_progress: bool):
    """Uncompress .gz files and .tar.gz directories."""
    config: AppConfig = ctx.obj["config"]
    method = _build_method(config, None, chunk_size)
    show_progress = config.show_progress and not no_progress
    failures = 0

    for path in paths:
        try:
            with _progress(show_progress, path.name) as callback:
                result = method.uncompress_path(path, callback)
            console.print(f"[green]Uncompressed[/green] {path} -> {_describe(result)}")
        except CompressionMethodError as e:
            console.print(f"[red]Uncompression failed: {e}[/red]")
            failures += 1

    if failures:
        sys.exit(1)


@cli.group()
def string():
    """In-memory string compression commands."""
    pass


@string.command("compress")
@click.argument("text")
@click.option("--level", "-l", type=click.IntRange(0, 9), help="Compression level (0-9)")
@click.pass_context
def string_compress(ctx, text: str, level: Optional[int]):
    """Compress TEXT and print the GZIP bytes as base64."""
    method = _build_method(ctx.obj["config"], level, None)
    try:
        data = method.compress_string(text)
    except CompressionMethodError as e:
        console.print(f"[red]Compression failed: {e}[/red]")
        sys.exit(1)

    click.echo(base64.b64encode(data).decode("ascii"))


@string.command("uncompress")
@click.argument("encoded")
@click.pass_context
def string_uncompress(ctx, encoded: str):
    """Uncompress base64-encoded GZIP bytes and print the text."""
    method = _build_method(ctx.obj["config"], None, None)
    try:
        data = base64.b64decode(encoded, validate=True)
    except binascii.Error as e:
        console.print(f"[red]Input is not valid base64: {e}[/red]")
        sys.exit(1)

    try:
        text = method.uncompress_string(data)
    except CompressionMethodError as e:
        console.print(f"[red]Uncompression failed: {e}[/red]")
        sys.exit(1)

    click.echo(text.decode("utf-8", errors="replace"))


@cli.group("config")
def config_group():
    """Configuration commands."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx):
    """Show the effective configuration."""
    config: AppConfig = ctx.obj["config"]

    table = Table(title="gzmethod Configuration")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Compression Level", str(config.gzip.compression_level))
    table.add_row("Chunk Size", format_size(config.gzip.chunk_size))
    table.add_row("Log Level", config.log_level)
    table.add_row("Log File", str(config.log_file) if config.log_file else "-")
    table.add_row("Show Progress", "Yes" if config.show_progress else "No")

    console.print(table)


@config_group.command("init")
@click.option("--path", "-p", type=click.Path(dir_okay=False, path_type=Path), help="Where to write the file")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path: Optional[Path], force: bool):
    """Write the default configuration to a YAML file."""
    target = path or DEFAULT_CONFIG_PATH
    if target.exists() and not force:
        console.print(f"[yellow]{target} already exists, use --force to overwrite[/yellow]")
        sys.exit(1)

    save_config(AppConfig(), target)
    get_logger(__name__).debug(f"Wrote default configuration to {target}")
    console.print(f"[green]Configuration written to {target}[/green]")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
