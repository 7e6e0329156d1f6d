"""
History walker.
Pages through a Slack channel's history and archives new image attachments.
"""
import logging
from typing import Optional

from image_archiver.clients import MessageFeed
from image_archiver.constants import HISTORY_PAGE_SIZE, IMAGE_MIMETYPE_PREFIX
from image_archiver.exceptions import FeedFetchException, TransferFailureException
from image_archiver.schemas import CandidateItem, WalkSummary
from image_archiver.services.retry import RetryPolicy

logger = logging.getLogger("image_archiver.walker")


def is_image(item: CandidateItem) -> bool:
    """True if the file's declared content type is an image type"""
    return bool(item.mimetype) and item.mimetype.startswith(IMAGE_MIMETYPE_PREFIX)


class HistoryWalker:
    """
    One pass over the channel history.

    Files are handled strictly in feed order, one at a time. A page fetch
    error or a file that still fails after all retries aborts the walk.
    """

    def __init__(
        self,
        feed: MessageFeed,
        ledger,
        transfer,
        channel_id: str,
        retry: Optional[RetryPolicy] = None,
        page_size: int = HISTORY_PAGE_SIZE
    ):
        self.feed = feed
        self.ledger = ledger
        self.transfer = transfer
        self.channel_id = channel_id
        self.retry = retry or RetryPolicy()
        self.page_size = page_size

    def run(self) -> WalkSummary:
        summary = WalkSummary()
        cursor: Optional[str] = None

        while True:
            page = self._fetch_page(cursor)
            summary.pages += 1

            for message in page.messages:
                for item in message.files:
                    self._process(item, summary)

            cursor = page.next_cursor
            if not cursor:
                break

        logger.info(
            f"Walk finished: {summary.pages} pages, {summary.transferred} transferred, "
            f"{summary.skipped_exported} already exported, "
            f"{summary.skipped_non_image} non-image"
        )
        return summary

    def _fetch_page(self, cursor: Optional[str]):
        try:
            return self.feed.list_page(self.channel_id, cursor, self.page_size)
        except FeedFetchException:
            raise
        except Exception as e:
            raise FeedFetchException(self.channel_id, str(e)) from e

    def _process(self, item: CandidateItem, summary: WalkSummary) -> None:
        if not is_image(item):
            summary.skipped_non_image += 1
            return

        if self.ledger.is_exported(item.id):
            summary.skipped_exported += 1
            return

        logger.info(f"Transferring {item.id} ({item.name})")
        try:
            drive_file_id = self.retry.call(self.transfer.transfer, item)
        except TransferFailureException:
            raise
        except Exception as e:
            raise TransferFailureException(item.id, str(e)) from e

        self.ledger.mark_exported(item.id, item.name, drive_file_id)
        summary.transferred += 1
