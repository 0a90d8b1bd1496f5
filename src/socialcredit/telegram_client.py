from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
import uuid
from typing import Any, Dict, List, Optional, Tuple

from .constants import STICKER_FILENAME, STICKER_MIME, TELEGRAM_HARD_LIMIT

logger = logging.getLogger(__name__)

# (field name, filename, content type, payload)
FilePart = Tuple[str, str, str, bytes]


class TelegramError(RuntimeError):
    pass


def encode_multipart(
    fields: Dict[str, Any], files: List[FilePart], boundary: Optional[str] = None
) -> Tuple[bytes, str]:
    boundary = boundary or uuid.uuid4().hex
    lines: List[bytes] = []
    for name, value in fields.items():
        if value is None:
            continue
        if not isinstance(value, str):
            value = json.dumps(value) if isinstance(value, (dict, list, bool)) else str(value)
        lines.append(f"--{boundary}".encode())
        lines.append(f'Content-Disposition: form-data; name="{name}"'.encode())
        lines.append(b"")
        lines.append(value.encode("utf-8"))
    for name, filename, content_type, payload in files:
        lines.append(f"--{boundary}".encode())
        lines.append(
            f'Content-Disposition: form-data; name="{name}"; filename="{filename}"'.encode()
        )
        lines.append(f"Content-Type: {content_type}".encode())
        lines.append(b"")
        lines.append(payload)
    lines.append(f"--{boundary}--".encode())
    lines.append(b"")
    return b"\r\n".join(lines), f"multipart/form-data; boundary={boundary}"


class TelegramClient:
    """
    Minimal Telegram Bot API client using standard library (no requests dependency).
    """

    def __init__(self, token: str, timeout_s: int = 120) -> None:
        if not token:
            raise ValueError("Telegram token is empty")
        self._base = f"https://api.telegram.org/bot{token}"
        self._timeout_s = timeout_s

    def _post(self, method: str, data: bytes, content_type: str) -> Any:
        url = f"{self._base}/{method}"
        req = urllib.request.Request(
            url,
            data=data,
            headers={"Content-Type": content_type},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout_s) as resp:
                payload = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise TelegramError(f"Telegram HTTPError {e.code}: {body}") from e
        except urllib.error.URLError as e:
            raise TelegramError(f"Telegram URLError: {e}") from e

        if not payload.get("ok"):
            raise TelegramError(f"Telegram API error: {payload}")
        return payload["result"]

    def _call(self, method: str, params: Dict[str, Any]) -> Any:
        logger.debug("[telegram] %s", method)
        data = json.dumps(params).encode("utf-8")
        return self._post(method, data, "application/json")

    def _call_multipart(
        self, method: str, fields: Dict[str, Any], files: List[FilePart]
    ) -> Any:
        logger.debug("[telegram] %s (multipart, %d files)", method, len(files))
        data, content_type = encode_multipart(fields, files)
        return self._post(method, data, content_type)

    def get_me(self) -> Dict[str, Any]:
        return self._call("getMe", {})

    def get_updates(
        self,
        offset: Optional[int],
        timeout_s: int = 50,
        allowed_updates: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"timeout": timeout_s}
        if offset is not None:
            params["offset"] = offset
        if allowed_updates is not None:
            params["allowed_updates"] = allowed_updates
        return self._call("getUpdates", params)

    def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to_message_id: Optional[int] = None,
        entities: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        if len(text) > TELEGRAM_HARD_LIMIT:
            raise ValueError("send_message received too-long text")
        params: Dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
        }
        if reply_to_message_id is not None:
            params["reply_to_message_id"] = reply_to_message_id
        if entities is not None:
            params["entities"] = entities
        return self._call("sendMessage", params)

    def send_sticker(
        self,
        chat_id: int,
        sticker: bytes,
        reply_to_message_id: Optional[int] = None,
        disable_notification: bool = True,
    ) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "chat_id": chat_id,
            "disable_notification": disable_notification,
            "reply_to_message_id": reply_to_message_id,
        }
        files = [("sticker", STICKER_FILENAME, STICKER_MIME, sticker)]
        return self._call_multipart("sendSticker", fields, files)

    def answer_inline_query(
        self,
        inline_query_id: str,
        results: List[Dict[str, Any]],
        cache_time: Optional[int] = None,
        is_personal: bool = False,
    ) -> bool:
        params: Dict[str, Any] = {
            "inline_query_id": inline_query_id,
            "results": results,
            "is_personal": is_personal,
        }
        if cache_time is not None:
            params["cache_time"] = cache_time
        return bool(self._call("answerInlineQuery", params))

    def delete_message(self, chat_id: int, message_id: int) -> bool:
        params: Dict[str, Any] = {
            "chat_id": chat_id,
            "message_id": message_id,
        }
        res = self._call("deleteMessage", params)
        return bool(res)
