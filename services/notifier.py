"""Telegram Bot API delivery."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from models.errors import ConfigurationError, DeliveryError, EmptyMessageError

logger = logging.getLogger(__name__)

TELEGRAM_BASE_URL = "https://api.telegram.org"


class TelegramNotifier:
    """Posts one HTML message per call to a chat, optionally inside a forum topic."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        bot_token: str,
        chat_id: str,
        thread_id: Optional[str] = None,
        base_url: str = TELEGRAM_BASE_URL,
    ) -> None:
        self._http = http_client
        self._bot_token = bot_token
        self._chat_id = chat_id
        self._thread_id = thread_id
        self._base_url = base_url.rstrip("/")

    def _build_body(self, message: str) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "chat_id": self._chat_id,
            "text": message,
            "parse_mode": "HTML",
        }
        if self._thread_id:
            try:
                body["message_thread_id"] = int(self._thread_id.strip())
            except ValueError as exc:
                raise ConfigurationError(
                    f"TELEGRAM_THREAD_ID must be an integer, got {self._thread_id!r}"
                ) from exc
        return body

    async def send(self, message: str) -> None:
        if not message.strip():
            raise EmptyMessageError("Cannot send empty message to Telegram")
        if not self._bot_token or not self._chat_id:
            raise ConfigurationError("TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID must be configured")

        body = self._build_body(message)
        url = f"{self._base_url}/bot{self._bot_token}/sendMessage"
        try:
            response = await self._http.post(url, json=body)
        except httpx.HTTPError as exc:
            # Never echo the URL: it embeds the bot token.
            raise DeliveryError(f"Telegram API request failed: {type(exc).__name__}") from None

        if not response.is_success:
            raise DeliveryError(
                f"Telegram API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        logger.debug("Telegram message delivered", extra={"status_code": response.status_code})
