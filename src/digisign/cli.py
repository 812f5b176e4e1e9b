# Command line interface: keygen, register, sign, verify, inspect, sha256.
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .config import AppConfig, load_config
from .crypto.hasher import sha256_file
from .crypto.keys import KeyCodec
from .exceptions import RegistryError, SigningError
from .logging import configure_logging
from .registry.client import HttpKeyRegistry
from .services.extractor import SignatureExtractor
from .services.signer import DocumentSigner
from .services.verifier import DocumentVerifier
from .storage.file_io import FileSink, FileSource

app = typer.Typer(help="DigiSign CLI")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"digisign {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", metavar="PATH", help="YAML configuration file"),
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True),
) -> None:
    ctx.obj = load_config(config)
    configure_logging(ctx.obj.logging.normalized_level())


def _config() -> AppConfig:
    return typer.get_current_context().obj


def _registry(url: Optional[str]) -> HttpKeyRegistry:
    cfg = _config().registry
    return HttpKeyRegistry(url or cfg.url, timeout=cfg.timeout)


async def _register(url: Optional[str], username: str, public_key: str) -> str:
    async with _registry(url) as registry:
        entry = await registry.register(username, public_key)
    return entry.username


@app.command("keygen")
def keygen(
    username: str = typer.Option(..., "--username", "-u", help="Owner of the new key pair"),
    out_dir: Path = typer.Option(Path("."), "--out-dir", help="Directory for the key files"),
    register: bool = typer.Option(False, "--register", help="Register the public key with the registry"),
    registry: Optional[str] = typer.Option(None, "--registry", help="Registry base URL"),
    with_headers: bool = typer.Option(False, "--with-headers", help="Add BEGIN/END lines to the key files"),
):
    """Create an ECDSA P-256 key pair"""
    codec = KeyCodec()
    pair = codec.generate()
    private_path = out_dir / f"{username}_private.pem"
    public_path = out_dir / f"{username}_public.pem"
    public_text = codec.encode_public(pair.public_key, with_headers=with_headers)

    async def _write() -> None:
        await FileSink(private_path, mode=0o600).write(
            codec.encode_private(pair.private_key, with_headers=with_headers).encode("ascii")
        )
        await FileSink(public_path).write(public_text.encode("ascii"))

    asyncio.run(_write())
    typer.echo(f"Private key -> {private_path} (keep it secret)")
    typer.echo(f"Public key  -> {public_path}")

    if register:
        try:
            name = asyncio.run(_register(registry, username, public_text))
        except RegistryError as exc:
            typer.echo(f"Registration failed: {exc}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Registered {name}")


@app.command("register")
def register_key(
    username: str = typer.Option(..., "--username", "-u"),
    public_key: Path = typer.Option(..., "--public-key", exists=True, readable=True),
    registry: Optional[str] = typer.Option(None, "--registry", help="Registry base URL"),
):
    """Register an existing public key under a username"""
    try:
        name = asyncio.run(_register(registry, username, public_key.read_text(encoding="utf-8")))
    except RegistryError as exc:
        typer.echo(f"Registration failed: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Registered {name}")


@app.command("sign")
def sign(
    input: Path = typer.Option(..., "-i", exists=True, readable=True, help="Document to sign"),
    key: Path = typer.Option(..., "--key", "-k", exists=True, readable=True, help="Private key file"),
    username: str = typer.Option(..., "--username", "-u"),
    output: Optional[Path] = typer.Option(None, "-o", help="Signed output (default: <stem>_signed<suffix>)"),
):
    """Append a signature block to a copy of the document"""
    out_path = output or input.with_name(f"{input.stem}_signed{input.suffix}")

    async def _run() -> None:
        signed = await DocumentSigner().sign(FileSource(input), key.read_text(encoding="utf-8"), username)
        await FileSink(out_path).write(signed)

    try:
        asyncio.run(_run())
    except SigningError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Signed -> {out_path}")


@app.command("verify")
def verify(
    input: Path = typer.Option(..., "-i", exists=True, readable=True, help="Signed document"),
    username: str = typer.Option(..., "--username", "-u", help="Claimed signer"),
    registry: Optional[str] = typer.Option(None, "--registry", help="Registry base URL"),
    public_key: Optional[Path] = typer.Option(
        None, "--public-key", exists=True, readable=True, help="Use this public key instead of the registry"
    ),
):
    """Verify integrity and signer of a signed document"""
    verifier = DocumentVerifier()

    async def _run():
        if public_key is not None:
            text = public_key.read_text(encoding="utf-8")

            async def _lookup(_username: str) -> Optional[str]:
                return text

            return await verifier.verify(FileSource(input), username, _lookup)
        async with _registry(registry) as client:
            return await verifier.verify(FileSource(input), username, client)

    result = asyncio.run(_run())
    typer.echo(json.dumps(result.to_dict(), indent=2))
    raise typer.Exit(code=0 if result.is_valid else 2)


@app.command("inspect")
def inspect(input: Path = typer.Option(..., "-i", exists=True, readable=True)):
    """Print the embedded signature package"""
    package = SignatureExtractor().extract(input.read_bytes())
    if package is None:
        typer.echo("No signature found", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(package.model_dump(by_alias=True), indent=2))


@app.command("sha256")
def sha256(input: Path = typer.Option(..., "-i", exists=True, readable=True)):
    """Print the SHA-256 of a file"""
    typer.echo(sha256_file(input))


if __name__ == "__main__":
    app()
