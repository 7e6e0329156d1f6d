"""
Slack Web API client for channel history and private file downloads.
"""
import logging
from pathlib import Path
from typing import Optional

import httpx

from image_archiver.constants import (
    DOWNLOAD_CHUNK_SIZE,
    HTTP_TIMEOUT_SECONDS,
    SLACK_API_BASE_URL,
)
from image_archiver.exceptions import FeedFetchException
from image_archiver.schemas import FeedPage

logger = logging.getLogger("image_archiver.slack")


class SlackMessageFeed:
    """Reads conversations.history one page at a time"""

    def __init__(
        self,
        token: str,
        base_url: str = SLACK_API_BASE_URL,
        client: Optional[httpx.Client] = None
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=HTTP_TIMEOUT_SECONDS)

    @property
    def headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}

    def list_page(self, channel_id: str, cursor: Optional[str], page_size: int) -> FeedPage:
        """
        Fetch one page of channel history.

        Raises:
            FeedFetchException: on transport errors or a Slack error response
        """
        params = {"channel": channel_id, "limit": page_size}
        if cursor:
            params["cursor"] = cursor

        try:
            response = self.client.get(
                f"{self.base_url}/conversations.history",
                params=params,
                headers=self.headers
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise FeedFetchException(channel_id, str(e)) from e

        if not data.get("ok"):
            raise FeedFetchException(channel_id, data.get("error", "unknown error"))

        metadata = data.get("response_metadata") or {}
        page = FeedPage(
            messages=data.get("messages", []),
            next_cursor=metadata.get("next_cursor") or None
        )
        logger.debug(f"Fetched {len(page.messages)} messages from {channel_id}")
        return page

    def download(self, url: str, destination: Path) -> Path:
        """Stream a private file to destination using the bot token"""
        with self.client.stream("GET", url, headers=self.headers, follow_redirects=True) as response:
            response.raise_for_status()
            with open(destination, "wb") as f:
                for chunk in response.iter_bytes(DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
        return destination

    def close(self) -> None:
        self.client.close()
