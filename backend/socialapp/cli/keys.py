"""Flask CLI commands for provisioning RS256 signing keys."""

from __future__ import annotations

import click

from socialapp.core.keys import MIN_KEY_SIZE, KeyMaterialError, SigningKeyPair


@click.group("keys")
def keys_cli() -> None:
    """Signing key management."""


@keys_cli.command("generate")
@click.option(
    "--bits",
    type=int,
    default=MIN_KEY_SIZE,
    show_default=True,
    help="RSA modulus size.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["env", "pem"]),
    default="env",
    show_default=True,
    help="env: JWT_PRIVATE_KEY/JWT_PUBLIC_KEY lines (base64 DER); pem: two PEM blocks.",
)
def generate_command(bits: int, fmt: str) -> None:
    """Print a fresh key pair for JWT_PRIVATE_KEY / JWT_PUBLIC_KEY."""
    try:
        pair = SigningKeyPair.generate(key_size=bits)
    except KeyMaterialError as exc:
        raise click.BadParameter(str(exc), param_hint="--bits") from exc

    if fmt == "pem":
        click.echo(pair.private_pem.decode().rstrip())
        click.echo(pair.public_pem.decode().rstrip())
        return
    private_b64, public_b64 = pair.encode_der_b64()
    click.echo(f"JWT_PRIVATE_KEY={private_b64}")
    click.echo(f"JWT_PUBLIC_KEY={public_b64}")
    click.echo(f"# kid={pair.key_id}", err=True)
