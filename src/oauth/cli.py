"""
Click CLI for the Zoom App server.

Commands:
    serve           Run the authorization/context HTTP server
    check-config    Show the resolved configuration (secrets masked)
    decode-context  Decrypt an x-zoom-app-context header value
"""

import json
import logging
import sys
from typing import Optional

import click

from src.zoom.cipher import get_app_context
from src.zoom.config import ZoomAppConfig
from src.zoom.exceptions import ConfigurationError, ContextError

from .auth_server import create_app

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=None,
    envvar="ZM_ENV_FILE",
    help="Path to key=value credentials file",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[str], verbose: bool) -> None:
    """Zoom App authorization and context tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        ctx.obj = ZoomAppConfig.resolve(env_file)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)


@cli.command("check-config")
@click.pass_obj
def check_config(config: ZoomAppConfig) -> None:
    """Show the resolved configuration with secrets masked."""
    for key, value in config.redacted().items():
        click.echo(f"{key:>15}: {value}")

    try:
        config.require_client_credentials()
    except ConfigurationError as e:
        click.echo(f"\n⚠️  {e}", err=True)
        sys.exit(1)


@cli.command("decode-context")
@click.argument("header")
@click.option(
    "--secret",
    default="",
    help="Decryption secret (defaults to the client secret)",
)
@click.pass_obj
def decode_context(config: ZoomAppConfig, header: str, secret: str) -> None:
    """Decrypt an x-zoom-app-context HEADER value and print its claims."""
    try:
        claims = get_app_context(header, config, secret)
    except (ContextError, ConfigurationError) as e:
        click.echo(f"❌ Could not decrypt app context: {e}", err=True)
        sys.exit(1)

    try:
        click.echo(json.dumps(json.loads(claims), indent=2))
    except ValueError:
        click.echo(claims)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8080, type=int, help="Bind port")
@click.option("--cert", type=click.Path(exists=True), help="TLS certificate file")
@click.option("--key", type=click.Path(exists=True), help="TLS private key file")
@click.pass_obj
def serve(
    config: ZoomAppConfig,
    host: str,
    port: int,
    cert: Optional[str],
    key: Optional[str],
) -> None:
    """Run the authorization/context HTTP server."""
    app = create_app(config)
    ssl_context = (cert, key) if cert and key else None

    if ssl_context:
        logger.info(f"https listening on {host}:{port}")
    else:
        logger.warning(f"http listening on {host}:{port}")

    app.run(host=host, port=port, ssl_context=ssl_context, debug=False, use_reloader=False)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
