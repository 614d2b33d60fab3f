import asyncio
import logging

import requests

from orderbot.core.exceptions import ContentFetchError

log = logging.getLogger(__name__)


class LineMessenger:
    """Outbound side of the LINE Messaging API: replies and message content download."""

    def __init__(self, channel_token, api_base="https://api.line.me",
                 data_api_base="https://api-data.line.me", timeout=10.0, session=None):
        self.channel_token = channel_token
        self.api_base = api_base.rstrip("/")
        self.data_api_base = data_api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self):
        return {"Authorization": f"Bearer {self.channel_token}"}

    def _post_reply(self, reply_token, text):
        return self.session.post(
            f"{self.api_base}/v2/bot/message/reply",
            headers=self._headers(),
            json={"replyToken": reply_token, "messages": [{"type": "text", "text": text}]},
            timeout=self.timeout,
        )

    async def reply(self, reply_token: str, text: str) -> bool:
        """Sends one text reply. Failures are logged and reported as False, never raised."""
        try:
            response = await asyncio.to_thread(self._post_reply, reply_token, text)
        except requests.exceptions.RequestException as e:
            log.error(f"LINE reply failed: {e}")
            return False

        if not response.ok:
            log.error(f"LINE reply rejected ({response.status_code}): {response.text}")
            return False
        return True

    def _get_content(self, message_id):
        response = self.session.get(
            f"{self.data_api_base}/v2/bot/message/{message_id}/content",
            headers=self._headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.content

    async def fetch_content(self, message_id: str) -> bytes:
        """Downloads the raw bytes of an audio (or other media) message."""
        try:
            return await asyncio.to_thread(self._get_content, message_id)
        except requests.exceptions.RequestException as e:
            raise ContentFetchError(f"Could not fetch content of message {message_id}: {e}") from e
