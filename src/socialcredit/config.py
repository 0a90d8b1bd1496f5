from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    CONFIG_PATH,
    DEFAULT_ASSETS_DIR,
    DEFAULT_CACHE_TIME_S,
    DEFAULT_POLL_TIMEOUT_S,
)


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class BotSettings:
    bot_token: str
    storage_chat_id: int
    assets_dir: Path
    poll_timeout: int = DEFAULT_POLL_TIMEOUT_S
    cache_time: int = DEFAULT_CACHE_TIME_S


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    import tomllib

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {path}: {e}") from e


def resolve_config_path(path: Optional[str] = None) -> Path:
    return Path(path).expanduser() if path else CONFIG_PATH


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    return _load_toml(resolve_config_path(path))


def config_get(config: Dict[str, Any], key: str) -> Any:
    if key in config:
        return config[key]
    nested = config.get("telegram")
    if isinstance(nested, dict) and key in nested:
        return nested[key]
    return None


def parse_chat_id(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        v = value.strip()
        if not v:
            return None
        try:
            return int(v)
        except ValueError as e:
            raise ConfigError(f"invalid chat id {value!r}") from e
    raise ConfigError(f"invalid chat id {value!r}")


def _positive_int(config: Dict[str, Any], key: str, default: int) -> int:
    value = config_get(config, key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def resolve_assets_dir(config: Dict[str, Any], config_path: Path) -> Path:
    raw = config_get(config, "assets_dir")
    if raw is None:
        return DEFAULT_ASSETS_DIR.resolve()
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigError(f"assets_dir must be a path, got {raw!r}")
    candidate = Path(raw).expanduser()
    if not candidate.is_absolute():
        candidate = (config_path.parent / candidate).resolve()
    return candidate


def build_settings(config: Dict[str, Any], config_path: Path) -> BotSettings:
    token = config_get(config, "bot_token")
    if not isinstance(token, str) or not token.strip():
        raise ConfigError(f"bot_token is missing (set it in {config_path})")
    storage_chat_id = parse_chat_id(config_get(config, "storage_chat_id"))
    if storage_chat_id is None:
        raise ConfigError(
            f"storage_chat_id is missing (set it in {config_path}); "
            "stickers are uploaded there before being offered inline"
        )
    return BotSettings(
        bot_token=token.strip(),
        storage_chat_id=storage_chat_id,
        assets_dir=resolve_assets_dir(config, config_path),
        poll_timeout=_positive_int(config, "poll_timeout", DEFAULT_POLL_TIMEOUT_S),
        cache_time=_positive_int(config, "cache_time", DEFAULT_CACHE_TIME_S),
    )
