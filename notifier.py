#!/usr/bin/env python3
"""Best-effort delivery of run summaries to a chat webhook."""

from __future__ import annotations

from typing import Optional

import requests

from logging_utils import Logger

DEFAULT_TIMEOUT_S = 10.0


class WebhookNotifier:
    """Posts summary text to a Discord-compatible webhook.

    Delivery problems are logged and swallowed; a failed notification never
    changes the outcome of a run and is not retried.
    """

    SENDER = "GitHub Mirror Bot"

    def __init__(self, webhook_url: Optional[str], timeout_s: Optional[float] = None) -> None:
        self.webhook_url = webhook_url
        self.timeout_s = timeout_s or DEFAULT_TIMEOUT_S

    def _payload(self, message: str) -> dict:
        return {"content": message, "username": self.SENDER}

    def send(self, message: str) -> bool:
        """Return True if the endpoint accepted the message."""
        if not self.webhook_url:
            return False
        try:
            response = requests.post(
                self.webhook_url,
                json=self._payload(message),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_s,
            )
        except requests.RequestException as e:
            Logger.warn(f"failed to send notification: {e}")
            return False

        if response.status_code >= 400:
            Logger.warn(
                f"notification endpoint rejected message: {response.status_code}"
            )
            return False
        Logger.debug("notification delivered")
        return True
