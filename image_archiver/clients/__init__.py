"""
Provider clients.

The archiver core only depends on these two capabilities; tests pass in
fakes that implement the same methods.
"""
from typing import Optional, Protocol

from image_archiver.schemas import FeedPage


class MessageFeed(Protocol):
    def list_page(self, channel_id: str, cursor: Optional[str], page_size: int) -> FeedPage:
        ...


class FileStore(Protocol):
    def upload(self, name: str, folder_id: str, file_path: str) -> str:
        """Upload a local file and return the store's file ID"""
        ...
