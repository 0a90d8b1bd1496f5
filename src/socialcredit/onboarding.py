from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import typer

from .composer import ASSET_FILES
from .config import (
    ConfigError,
    config_get,
    load_config,
    parse_chat_id,
    resolve_assets_dir,
    resolve_config_path,
)


@dataclass(frozen=True, slots=True)
class SetupIssue:
    title: str
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SetupResult:
    issues: list[SetupIssue]
    config_path: Path

    @property
    def ok(self) -> bool:
        return not self.issues


Check = Callable[[dict[str, Any], Path], list[SetupIssue]]


def config_issue(config_path: Path) -> SetupIssue:
    return SetupIssue(
        f"create a config at {config_path}",
        (
            'bot_token = "123456:ABC..."',
            "storage_chat_id = -1001234567890",
            'assets_dir = "3rdparty"',
        ),
    )


def asset_issue(name: str, assets_dir: Path) -> SetupIssue:
    return SetupIssue(
        f"missing asset {name}",
        (f"put {name} into {assets_dir}",),
    )


def file_issue(name: str) -> Check:
    def _check(config: dict[str, Any], config_path: Path) -> list[SetupIssue]:
        assets_dir = resolve_assets_dir(config, config_path)
        return [] if (assets_dir / name).is_file() else [asset_issue(name, assets_dir)]

    return _check


def _check_token(config: dict[str, Any], config_path: Path) -> list[SetupIssue]:
    token = config_get(config, "bot_token")
    if isinstance(token, str) and token.strip():
        return []
    return [SetupIssue("set bot_token", ("get one from @BotFather and enable inline mode",))]


def _check_storage_chat(config: dict[str, Any], config_path: Path) -> list[SetupIssue]:
    if parse_chat_id(config_get(config, "storage_chat_id")) is not None:
        return []
    return [
        SetupIssue(
            "set storage_chat_id",
            ("a chat the bot can post to; stickers are uploaded there first",),
        )
    ]


CHECKS: tuple[Check, ...] = (
    _check_token,
    _check_storage_chat,
    *(file_issue(name) for name in ASSET_FILES),
)


def check_setup(path: str | None = None) -> SetupResult:
    config_path = resolve_config_path(path)
    if not config_path.exists():
        return SetupResult(issues=[config_issue(config_path)], config_path=config_path)
    try:
        config = load_config(path)
        issues = [issue for check in CHECKS for issue in check(config, config_path)]
    except ConfigError as e:
        issues = [SetupIssue("fix the config file", (str(e),))]
    return SetupResult(issues=issues, config_path=config_path)


def render_setup_guide(setup: SetupResult) -> None:
    if setup.ok:
        typer.echo(f"setup looks good ({setup.config_path})")
        return
    typer.echo(f"{len(setup.issues)} setup issue(s) for {setup.config_path}:", err=True)
    for issue in setup.issues:
        typer.echo(f"  - {issue.title}", err=True)
        for line in issue.lines:
            typer.echo(f"      {line}", err=True)
