"""Command-line interface for cytubegen."""

import sys
from pathlib import Path

import click

from cytubegen import __version__
from cytubegen.config import load_config
from cytubegen.core.executor import FFmpegExecutor
from cytubegen.core.pipeline import ProcessingPipeline
from cytubegen.core.planner import PlanBuilder
from cytubegen.core.prober import Prober
from cytubegen.errors import CytubeGenError
from cytubegen.utils.logger import get_logger, setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.pass_context
def cli(ctx, config):
    """cytubegen - Build CyTube custom media manifests from any media file."""
    # Load configuration
    try:
        cfg = load_config(config)
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        # Setup logging
        setup_logging(cfg.logging)

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


def _apply_overrides(config, url_prefix, language, dry_run, overwrite):
    """Apply command-line options on top of the loaded configuration."""
    manifest = config.manifest
    if url_prefix is not None:
        manifest = manifest.model_copy(update={"url_prefix": url_prefix})
    if language is not None:
        if len(language) > 4:
            raise click.BadParameter(
                "must be at most 4 characters", param_hint="--language"
            )
        manifest = manifest.model_copy(update={"preferred_language": language})

    execution = config.execution
    if dry_run:
        execution = execution.model_copy(update={"dry_run": True})
    if overwrite:
        execution = execution.model_copy(update={"overwrite": True})

    return config.model_copy(update={"manifest": manifest, "execution": execution})


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: next to FILE, named after it)",
)
@click.option("--url-prefix", "-u", default=None, help="Prefix for every manifest URL")
@click.option(
    "--language", "-l", default=None, help="Preferred language for the main audio track"
)
@click.option("--dry-run", is_flag=True, help="Write the manifest but do not transcode")
@click.option("--overwrite", is_flag=True, help="Overwrite existing output files")
@click.pass_context
def process(ctx, file, output_dir, url_prefix, language, dry_run, overwrite):
    """Convert a media file and write its CyTube manifest.

    Args:
        file: Path to the media file to process
    """
    config = _apply_overrides(ctx.obj["config"], url_prefix, language, dry_run, overwrite)

    click.echo(f"Processing: {file}")

    pipeline = ProcessingPipeline(config)
    result = pipeline.process(file, output_dir)

    # Display result
    if result.status == "success":
        click.secho(f"{result}", fg="green")
        click.echo(f"Manifest: {result.manifest_path}")
        sys.exit(0)
    elif result.status == "dry_run":
        click.secho(f"{result}", fg="cyan")
        click.echo(f"Manifest: {result.manifest_path}")
        for operation in result.plan.operations:
            click.echo(f"  {operation}")
        sys.exit(0)
    else:
        click.secho(f"{result}", fg="red", err=True)
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--url-prefix", "-u", default=None, help="Prefix for every manifest URL")
@click.option(
    "--language", "-l", default=None, help="Preferred language for the main audio track"
)
@click.option("--manifest", "show_manifest", is_flag=True, help="Print the manifest JSON")
@click.pass_context
def probe(ctx, file, url_prefix, language, show_manifest):
    """Show the tracks of a media file and what would be done with them.

    Args:
        file: Path to the media file to inspect
    """
    config = _apply_overrides(ctx.obj["config"], url_prefix, language, False, False)
    logger = get_logger(__name__)

    try:
        result = Prober(config.tools).probe(file)
        plan, manifest = PlanBuilder(config).build(result, file)
    except CytubeGenError as e:
        logger.error("Probe failed", file=str(file), error=e.message)
        click.secho(f"✗ {e.message}", fg="red", err=True)
        sys.exit(1)

    if show_manifest:
        click.echo(manifest.to_json())
        return

    click.echo(f"Title:    {manifest.title}")
    click.echo(f"Duration: {result.duration:.1f}s")
    click.echo(f"Bitrate:  {result.bitrate}")
    click.echo("")
    click.echo("Tracks:")
    for track in result.tracks:
        click.echo(f"  {track}")
    click.echo("")
    click.echo("Plan:")
    if not plan:
        click.secho("  (nothing to do)", fg="yellow")
    for operation in plan.operations:
        click.echo(f"  {operation}")
    click.echo("")
    click.echo("Command:")
    executor = FFmpegExecutor(config.tools, config.execution)
    output_dir = file.parent / file.stem
    click.echo("  " + " ".join(executor.build_command(plan, file, output_dir)))


@cli.command()
@click.pass_context
def version(ctx):
    """Show version information."""
    click.echo(f"cytubegen v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
