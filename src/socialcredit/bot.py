from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Any, Protocol

import anyio

from .composer import AssetUnavailable, Assets, Composer
from .rendering import help_message
from .stickers import MalformedAmount, parse_amount, render_amount
from .telegram_client import TelegramError

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = ["message", "inline_query"]
POLL_RETRY_DELAY_S = 5.0
UNSUPPORTED_TEXT = "Can't draw that one: amounts go from 1 to 99999999 either way."

Renderer = Callable[[int], bytes | None]


class BotApi(Protocol):
    def get_me(self) -> dict[str, Any]: ...

    def get_updates(
        self,
        offset: int | None,
        timeout_s: int = 50,
        allowed_updates: list[str] | None = None,
    ) -> list[dict[str, Any]]: ...

    def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: int | None = None,
        entities: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]: ...

    def send_sticker(
        self,
        chat_id: int,
        sticker: bytes,
        reply_to_message_id: int | None = None,
        disable_notification: bool = True,
    ) -> dict[str, Any]: ...

    def answer_inline_query(
        self,
        inline_query_id: str,
        results: list[dict[str, Any]],
        cache_time: int | None = None,
        is_personal: bool = False,
    ) -> bool: ...

    def delete_message(self, chat_id: int, message_id: int) -> bool: ...


def asset_renderer(assets: Assets) -> Renderer:
    return partial(render_amount, assets=assets, composer=Composer(assets.fonts))


def sticker_file_id(message: dict[str, Any]) -> str:
    sticker = message.get("sticker")
    file_id = sticker.get("file_id") if isinstance(sticker, dict) else None
    if not isinstance(file_id, str) or not file_id:
        raise TelegramError(f"sendSticker returned no sticker file_id: {message!r}")
    return file_id


def sticker_result(amount: int, file_id: str) -> dict[str, Any]:
    return {
        "type": "sticker",
        "id": f"amount:{amount}",
        "sticker_file_id": file_id,
    }


class StickerBot:
    def __init__(
        self,
        client: BotApi,
        renderer: Renderer,
        *,
        storage_chat_id: int,
        cache_time: int = 300,
        poll_timeout: int = 50,
    ) -> None:
        self._client = client
        self._renderer = renderer
        self._storage_chat_id = storage_chat_id
        self._cache_time = cache_time
        self._poll_timeout = poll_timeout
        self._username: str | None = None
        self._render_limiter: anyio.CapacityLimiter | None = None

    async def _api(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await anyio.to_thread.run_sync(partial(fn, *args, **kwargs))

    async def render(self, amount: int) -> bytes | None:
        if self._render_limiter is None:
            # loaded fonts are shared, so draws go through a single thread
            self._render_limiter = anyio.CapacityLimiter(1)
        return await anyio.to_thread.run_sync(
            self._renderer, amount, limiter=self._render_limiter
        )

    async def upload(self, sticker: bytes) -> str:
        message = await self._api(
            self._client.send_sticker, self._storage_chat_id, sticker
        )
        file_id = sticker_file_id(message)
        message_id = message.get("message_id")
        if isinstance(message_id, int):
            # the file_id outlives the storage message
            try:
                await self._api(
                    self._client.delete_message, self._storage_chat_id, message_id
                )
            except TelegramError as e:
                logger.warning("[bot] could not clean up storage message: %s", e)
        return file_id

    async def handle_inline_query(self, query: dict[str, Any]) -> None:
        query_id = str(query.get("id", ""))
        text = query.get("query") or ""
        if not text.strip():
            return
        logger.info("[bot] query %r", text)
        amount = parse_amount(text)
        sticker = await self.render(amount)
        results: list[dict[str, Any]] = []
        if sticker is None:
            logger.info("[bot] no render for amount %d", amount)
        else:
            results.append(sticker_result(amount, await self.upload(sticker)))
        await self._api(
            self._client.answer_inline_query,
            query_id,
            results,
            cache_time=self._cache_time,
        )

    async def handle_message(self, message: dict[str, Any]) -> None:
        chat = message.get("chat") or {}
        sender = message.get("from") or {}
        if chat.get("type") != "private" or sender.get("is_bot"):
            return
        chat_id = chat.get("id")
        text = message.get("text")
        if not isinstance(chat_id, int) or not isinstance(text, str):
            return
        logger.info("[bot] responding to %s", sender.get("username") or chat_id)
        message_id = message.get("message_id")
        try:
            amount = parse_amount(text)
        except MalformedAmount:
            body, entities = help_message(self._username)
            await self._api(
                self._client.send_message,
                chat_id,
                body,
                reply_to_message_id=message_id,
                entities=entities,
            )
            return
        sticker = await self.render(amount)
        if sticker is None:
            await self._api(
                self._client.send_message,
                chat_id,
                UNSUPPORTED_TEXT,
                reply_to_message_id=message_id,
            )
            return
        await self._api(
            self._client.send_sticker,
            chat_id,
            sticker,
            reply_to_message_id=message_id,
            disable_notification=False,
        )

    async def handle_update(self, update: dict[str, Any]) -> None:
        try:
            if isinstance(update.get("inline_query"), dict):
                await self.handle_inline_query(update["inline_query"])
            elif isinstance(update.get("message"), dict):
                await self.handle_message(update["message"])
        except MalformedAmount as e:
            logger.debug("[bot] dropping request: %s", e)
        except AssetUnavailable as e:
            logger.error("[bot] asset unavailable: %s", e)
        except TelegramError as e:
            logger.warning("[bot] telegram call failed: %s", e)
        except Exception:
            logger.exception("[bot] error handling update %r", update.get("update_id"))

    async def poll(self, offset: int | None) -> list[dict[str, Any]]:
        return await anyio.to_thread.run_sync(
            partial(
                self._client.get_updates,
                offset,
                timeout_s=self._poll_timeout,
                allowed_updates=ALLOWED_UPDATES,
            ),
            abandon_on_cancel=True,
        )

    async def run(self) -> None:
        me = await self._api(self._client.get_me)
        self._username = me.get("username")
        logger.info("[bot] signed in as @%s, waiting for queries", self._username)
        offset: int | None = None
        async with anyio.create_task_group() as tg:
            while True:
                try:
                    updates = await self.poll(offset)
                except TelegramError as e:
                    logger.warning("[bot] getUpdates failed: %s", e)
                    await anyio.sleep(POLL_RETRY_DELAY_S)
                    continue
                for update in updates:
                    update_id = update.get("update_id")
                    if isinstance(update_id, int):
                        offset = update_id + 1
                    tg.start_soon(self.handle_update, update)
