from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import anyio
import typer

from .bot import StickerBot, asset_renderer
from .composer import AssetUnavailable, load_assets
from .config import ConfigError, build_settings, load_config, resolve_config_path
from .constants import DEFAULT_ASSETS_DIR
from .onboarding import check_setup, render_setup_guide
from .stickers import MalformedAmount, parse_amount, plan_amount, render_amount
from .telegram_client import TelegramClient

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _amount_arg(text: str) -> int:
    try:
        return parse_amount(text)
    except MalformedAmount as e:
        raise typer.BadParameter(str(e)) from e


@app.command()
def run(
    config: Optional[str] = typer.Option(
        None, "--config", help="Path to bot.toml (defaults to ~/.socialcredit/bot.toml)."
    ),
    debug: bool = typer.Option(False, "--debug", help="Log at DEBUG level."),
) -> None:
    """Start the inline sticker bot."""
    _setup_logging(debug)
    config_path = resolve_config_path(config)
    try:
        settings = build_settings(load_config(config), config_path)
        assets = load_assets(settings.assets_dir)
    except (ConfigError, AssetUnavailable) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)

    bot = StickerBot(
        TelegramClient(settings.bot_token),
        asset_renderer(assets),
        storage_chat_id=settings.storage_chat_id,
        cache_time=settings.cache_time,
        poll_timeout=settings.poll_timeout,
    )
    try:
        anyio.run(bot.run)
    except KeyboardInterrupt:
        logger.info("[bot] stopped")


@app.command()
def render(
    amount: str = typer.Argument(..., help="Signed integer amount, e.g. 5000 or -15."),
    output: Path = typer.Option(Path("sticker.webp"), "--output", "-o"),
    assets_dir: Path = typer.Option(DEFAULT_ASSETS_DIR, "--assets-dir"),
) -> None:
    """Render one sticker to a file."""
    value = _amount_arg(amount)
    try:
        data = render_amount(value, load_assets(assets_dir))
    except AssetUnavailable as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    if data is None:
        typer.echo(f"amount {value} is out of range", err=True)
        raise typer.Exit(code=1)
    output.write_bytes(data)
    typer.echo(f"wrote {len(data)} bytes to {output}")


@app.command()
def plan(
    amount: str = typer.Argument(..., help="Signed integer amount, e.g. 5000 or -15."),
) -> None:
    """Print the draw instructions for an amount."""
    value = _amount_arg(amount)
    result = plan_amount(value)
    if result is None:
        typer.echo(f"amount {value} is out of range", err=True)
        raise typer.Exit(code=1)
    for step in result:
        typer.echo(f"{step.script:<5} {step.font_tier:<6} ({step.x},{step.y}) {step.text}")


@app.command()
def doctor(
    config: Optional[str] = typer.Option(None, "--config", help="Path to bot.toml."),
) -> None:
    """Check the config and asset files."""
    setup = check_setup(config)
    render_setup_guide(setup)
    if not setup.ok:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
