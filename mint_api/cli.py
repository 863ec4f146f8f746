"""
Admin CLI for the mint intake service.

Commands:
  - show-config : print the effective settings as JSON
  - inspect     : summarize the configured authority from the host snapshot
  - mint        : submit a mint request through the same service path as HTTP

Usage:
  python -m mint_api.cli <command> [options]
"""

from __future__ import annotations

import json
from typing import Optional

import typer
from pydantic import ValidationError

from .config import Settings, load_config
from .errors import ApiError
from .logging import setup_logging
from .models.mint import MintRequest
from .services.mint import MintService, authority_summary

app = typer.Typer(add_completion=False, help="Aurora NFT Mint API - Admin CLI")


def _echo_json(data: object) -> None:
    typer.echo(json.dumps(data, indent=2, sort_keys=True, default=str))


def _fail(err: ApiError) -> None:
    typer.echo(json.dumps(err.to_problem(), sort_keys=True), err=True)
    raise typer.Exit(code=1)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    backend: Optional[str] = typer.Option(None, "--backend", help="Override MINT_BACKEND (log|local)"),
    state: Optional[str] = typer.Option(None, "--state", help="Override STATE_PATH"),
):
    """
    Shared options for all subcommands.
    """
    cfg = load_config()
    overrides = {}
    if backend is not None:
        overrides["mint_backend"] = backend
    if state is not None:
        overrides["state_path"] = state
    try:
        ctx.obj = Settings(**{**cfg.model_dump(), **overrides}) if overrides else cfg
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e
    setup_logging(service_name=ctx.obj.service_name, level=ctx.obj.log_level)


@app.command("show-config")
def show_config(ctx: typer.Context):
    """
    Print the effective configuration.
    """
    _echo_json(_settings(ctx).summary())


@app.command("inspect")
def inspect(ctx: typer.Context):
    """
    Summarize the authority at AUTHORITY_ADDRESS in the host snapshot.
    """
    try:
        _echo_json(authority_summary(_settings(ctx)))
    except ApiError as e:
        _fail(e)


@app.command("mint")
def mint(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", help="NFT name"),
    img: str = typer.Option(..., "--img", help="Image / metadata pointer"),
    eth_address: str = typer.Option(..., "--eth-address", help="Receiver address"),
    description: str = typer.Option(..., "--description", help="NFT description"),
):
    """
    Submit a mint request exactly as POST /MintNFT would.
    """
    req = MintRequest(name=name, img=img, ethAddress=eth_address, description=description)
    try:
        accepted = MintService(_settings(ctx)).submit(req)
    except ApiError as e:
        _fail(e)
    else:
        _echo_json(accepted.model_dump(exclude_none=True))


if __name__ == "__main__":
    app()
