# cli.py
import logging
import sys

import click

from uploads_api.config.settings import get_settings
from uploads_api.s3.client import create_s3_client, probe_s3_connection

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
def cli():
    """CLI commands for the Uploads API"""
    configure_logging(get_settings().log_level)


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")
@click.option("--port", default=DEFAULT_PORT, show_default=True, type=int, help="Port to listen on")
@click.option("--reload/--no-reload", default=False, help="Restart on code changes (development only)")
def serve(host, port, reload):
    """Run the API server with uvicorn"""
    import uvicorn

    logger.info(f"Server running on port {port}")
    uvicorn.run(
        "uploads_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=get_settings().log_level.lower(),
    )


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    for name, value in settings.get_display_dict().items():
        click.echo(f"  {name}: {value}")


@cli.command()
def check_connection():
    """Check that S3 is reachable with the configured credentials"""
    settings = get_settings()
    s3_client = create_s3_client(settings)
    if probe_s3_connection(s3_client):
        click.echo(f"✅ S3 reachable (bucket: {settings.s3_bucket_name})")
        return
    click.echo("❌ Could not connect to S3, see the log above", err=True)
    sys.exit(1)


if __name__ == "__main__":
    cli()
