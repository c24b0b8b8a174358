"""
lsc-credentials CLI - build local security check credentials.
"""

import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .builders import public_key_from_private
from .config import PackagerConfig, load_config
from .credentials import CredentialPackager
from .error_handling import LSCCredentialError
from .pipeline import Artifact

logger = logging.getLogger("lsc-credentials")

output_option = click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default stdout).",
)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _packager(ctx: click.Context) -> CredentialPackager:
    config: PackagerConfig = ctx.obj["config"]
    return CredentialPackager(config)


def _write_artifact(artifact: Artifact, output: Optional[Path]) -> None:
    if output is None:
        stdout = click.get_binary_stream("stdout")
        stdout.write(bytes(artifact))
        stdout.flush()
        return

    output.write_bytes(bytes(artifact))
    click.echo(
        f"Wrote {artifact.kind.value} to {output} "
        f"({artifact.size} bytes, sha256 {artifact.checksum})",
        err=True,
    )


@click.group()
@click.version_option(__version__)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="YAML configuration file (defaults to $LSC_CONFIG_PATH).")
@click.option("--scratch-root", type=click.Path(file_okay=False), default=None,
              help="Directory for temporary workspaces.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], scratch_root: Optional[str], verbose: bool):
    """Generate keys and user packages for local security checks."""
    try:
        config = load_config(config_path)
        if scratch_root:
            config = dataclasses.replace(config, scratch_root=scratch_root)
            config.validate()
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    _configure_logging("DEBUG" if verbose else config.log_level)
    logger.debug("Using scratch root %s", config.scratch_root)
    ctx.obj = {"config": config}


@main.command()
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True,
              help="Passphrase for the private key (at least 5 characters).")
@output_option
@click.pass_context
def keypair(ctx: click.Context, password: str, output: Optional[Path]):
    """Generate an SSH keypair and write the private key."""
    try:
        artifact = _packager(ctx).generate_keypair(password)
    except LSCCredentialError as e:
        raise click.ClickException(str(e))
    _write_artifact(artifact, output)


@main.command("public-key")
@click.argument("private_key", type=click.File("rb"))
@click.option("--password", prompt=True, hide_input=True, help="Passphrase of the private key.")
@click.option("--comment", default=None, help="Comment appended to the public key.")
def public_key(private_key, password: str, comment: Optional[str]):
    """Print the OpenSSH public key for PRIVATE_KEY."""
    try:
        line = public_key_from_private(private_key.read(), password, comment)
    except (LSCCredentialError, ImportError) as e:
        raise click.ClickException(str(e))
    click.echo(line.decode())


@main.command()
@click.argument("name")
@click.option("--public-key", "public_key_file", type=click.File("rb"), required=True,
              help="File holding the OpenSSH public key.")
@output_option
@click.pass_context
def rpm(ctx: click.Context, name: str, public_key_file, output: Optional[Path]):
    """Build an RPM that creates user NAME with a public key."""
    try:
        artifact = _packager(ctx).recreate_rpm(name, public_key_file.read())
    except LSCCredentialError as e:
        raise click.ClickException(str(e))
    _write_artifact(artifact, output)


@main.command()
@click.argument("name")
@click.option("--public-key", "public_key_file", type=click.File("rb"), required=True,
              help="File holding the OpenSSH public key.")
@click.option("--maintainer", required=True, help="Package maintainer e-mail address.")
@output_option
@click.pass_context
def deb(ctx: click.Context, name: str, public_key_file, maintainer: str, output: Optional[Path]):
    """Build a Debian package that creates user NAME with a public key."""
    try:
        artifact = _packager(ctx).recreate_deb(name, public_key_file.read(), maintainer)
    except LSCCredentialError as e:
        raise click.ClickException(str(e))
    _write_artifact(artifact, output)


@main.command()
@click.argument("name")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True,
              help="Password for the Windows account.")
@output_option
@click.pass_context
def exe(ctx: click.Context, name: str, password: str, output: Optional[Path]):
    """Build a Windows installer that creates user NAME with a password."""
    try:
        artifact = _packager(ctx).recreate_exe(name, password)
    except LSCCredentialError as e:
        raise click.ClickException(str(e))
    _write_artifact(artifact, output)


if __name__ == "__main__":
    main()
