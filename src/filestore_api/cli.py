# cli.py
import logging

import click

from filestore_api.config.settings import get_settings
from filestore_api.errors import FileStorageError
from filestore_api.storage import CountEngine, RegexListingEngine, init_storage

# Configure logging
logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.group()
def cli():
    """CLI commands for the File Storage API"""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on")
def serve(host, port):
    """Run the API with uvicorn"""
    import uvicorn

    from filestore_api.main import create_app

    settings = get_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    click.echo(f"  App Name: {settings.app_name}")
    click.echo(f"  Storage Directory: {settings.storage_dir}")
    click.echo(f"  Default Page Size: {settings.default_page_size}")
    click.echo(f"  Max Page Size: {settings.max_page_size}")
    click.echo(f"  Count Workers: {settings.count_workers or 'auto'}")
    click.echo(f"  CORS Origins: {', '.join(settings.cors_allow_origins)}")
    click.echo(f"  Log Level: {settings.log_level}")


@cli.command()
def count():
    """Print the number of stored files"""
    settings = get_settings()
    try:
        storage_root = init_storage(settings.storage_path)
        total = CountEngine(storage_root).count_all()
    except FileStorageError as e:
        raise click.ClickException(str(e))
    click.echo(total)


@cli.command()
@click.argument("regex")
@click.option("--page", default=0, show_default=True, type=int, help="Zero-based page index")
@click.option("--size", default=None, type=int, help="Files per page (defaults to the configured page size)")
def search(regex, page, size):
    """List stored files whose whole name matches REGEX"""
    settings = get_settings()
    size = settings.default_page_size if size is None else size
    try:
        storage_root = init_storage(settings.storage_path)
        listing = RegexListingEngine(storage_root, max_workers=settings.count_workers)
        result = listing.list(regex, page, size)
    except FileStorageError as e:
        raise click.ClickException(str(e))

    for descriptor in result.files:
        click.echo(descriptor.name)
    click.echo(f"-- page {result.page}, size {result.size}, total matching {result.total_matching}")


if __name__ == "__main__":
    cli()
