"""Command-line interface for mediameta."""

import sys
from pathlib import Path

import click

from mediameta import __version__
from mediameta.config import load_config
from mediameta.core.media_file import MediaFileMetadataOptions, build_media_file_metadata
from mediameta.core.render import render_media_file
from mediameta.errors import MetadataError
from mediameta.utils.logger import get_logger, setup_logging


@click.command()
@click.version_option(version=__version__)
@click.option("--checksum", "-c", is_flag=True, help="Include file checksum (SHA-256)")
@click.option("--tags", "-t", is_flag=True, help="Print metadata tags, except mundane ones")
@click.option("--all-tags", "-A", is_flag=True, help="Print all metadata tags")
@click.option(
    "--scan",
    is_flag=True,
    help="Decode frames to determine scan type (slower, but may detect interlacing more accurately)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path))
def cli(checksum, tags, all_tags, scan, config_path, files):
    """Media file metadata for human consumption."""
    try:
        config = load_config(config_path)
        setup_logging(config.logging)
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    logger = get_logger(__name__)

    defaults = config.defaults
    options = MediaFileMetadataOptions(
        include_checksum=checksum or defaults.checksum,
        include_tags=tags or all_tags or defaults.tags or defaults.all_tags,
        include_all_tags=all_tags or defaults.all_tags,
        decode_frames=scan or defaults.scan,
    )

    successful = True
    for file in files:
        try:
            metadata = build_media_file_metadata(file, options, config.ffprobe)
        except MetadataError as e:
            logger.debug("Failed to inspect file", file=str(file), error=str(e))
            click.echo(f"Error: {e}", err=True)
            successful = False
            continue

        click.echo(render_media_file(metadata) + "\n")

    if not successful:
        sys.exit(1)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
