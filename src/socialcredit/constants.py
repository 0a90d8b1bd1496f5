from __future__ import annotations

from pathlib import Path

TELEGRAM_HARD_LIMIT = 4096
CONFIG_PATH = Path.home() / ".socialcredit" / "bot.toml"
DEFAULT_ASSETS_DIR = Path("3rdparty")
DEFAULT_POLL_TIMEOUT_S = 50
DEFAULT_CACHE_TIME_S = 300

CANVAS_SIZE = (512, 174)
STICKER_FILENAME = "sticker.webp"
STICKER_MIME = "image/webp"
