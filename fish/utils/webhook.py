"""Webhook sink: posts room updates to an HTTP endpoint using httpx."""

from __future__ import annotations

import logging

import httpx

from fish.notify.publisher import RoomChanged

logger = logging.getLogger("fish.webhook")


class WebhookSink:
    """Synchronous POST of each RoomChanged event as JSON."""

    def __init__(
        self,
        url: str,
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._client = client or httpx.Client(timeout=timeout)

    def __call__(self, event: RoomChanged) -> None:
        self.send(event)

    def send(self, event: RoomChanged) -> bool:
        try:
            response = self._client.post(self._url, json=event.to_dict())
        except httpx.HTTPError as e:
            logger.error("Webhook delivery failed for %s: %s", event.room_code, e)
            return False
        if response.is_error:
            logger.error(
                "Webhook %s rejected update for %s: %s",
                self._url, event.room_code, response.status_code,
            )
            return False
        return True

    def close(self) -> None:
        self._client.close()
