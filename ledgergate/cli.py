"""
Command-line interface for the ledger gateway.
"""

from __future__ import annotations

import os

import click

from ledgergate.common.config import Config
from ledgergate.common.exceptions import ConfigurationError
from ledgergate.server import start_server
from ledgergate.server.network_config import load_network_config


def _apply_overrides(
    host: str | None, port: int | None, network_config: str | None
) -> None:
    # Config reads the environment, so overrides go there first
    if host:
        os.environ["HOST"] = host
    if port:
        os.environ["PORT"] = str(port)
    if network_config:
        os.environ["NETWORK_CONFIG_PATH"] = network_config


network_config_option = click.option(
    "--network-config",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML network configuration (default: from NETWORK_CONFIG_PATH env)",
)


@click.group()
def cli() -> None:
    """Ledger gateway CLI"""


@cli.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind server to (default: from HOST env or 0.0.0.0)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind server to (default: from PORT env or 3004)",
)
@network_config_option
def serve(host: str | None, port: int | None, network_config: str | None) -> None:
    """Start the ledger gateway"""
    _apply_overrides(host, port, network_config)
    try:
        start_server(Config())
    except ConfigurationError as err:
        raise click.ClickException(str(err)) from err


@cli.command("check-config")
@network_config_option
def check_config(network_config: str | None) -> None:
    """Validate settings and the network configuration document"""
    _apply_overrides(None, None, network_config)
    config = Config()
    try:
        config.check()
        network = load_network_config(
            config.NETWORK_CONFIG_PATH,
            config.MSP_ID,
            config.CA_NAME,
            config.HLF_USER,
        )
    except ConfigurationError as err:
        raise click.ClickException(str(err)) from err

    click.echo(f"Peer: {network.peer.name} at {network.peer.url}")
    click.echo(f"Certificate authority: {network.ca.name} at {network.ca.url}")
    if network.admin_identity is None:
        click.echo(f"User {config.HLF_USER} not defined, registrar is the default")
    else:
        click.echo(f"Default identity: {config.HLF_USER}")
    click.echo("Configuration OK")


if __name__ == "__main__":
    cli()
