"""
Single file transfer: Slack download into a scratch file, then Drive upload.
"""
import logging
import os
from pathlib import Path

from image_archiver.clients import FileStore
from image_archiver.exceptions import TransferFailureException
from image_archiver.schemas import CandidateItem

logger = logging.getLogger("image_archiver.transfer")


class ItemTransfer:
    """
    Copies one Slack file into the Drive folder.

    Transfers run one at a time; scratch paths are derived from the Slack
    file ID and name and are not unique across concurrent calls.
    """

    def __init__(self, downloader, store: FileStore, folder_id: str, scratch_dir: str):
        self.downloader = downloader
        self.store = store
        self.folder_id = folder_id
        self.scratch_dir = Path(scratch_dir)

    def scratch_path(self, item: CandidateItem) -> Path:
        # Slack file names are user supplied; keep only the final component
        safe_name = Path(item.name or "file").name or "file"
        return self.scratch_dir / f"{item.id}_{safe_name}"

    def transfer(self, item: CandidateItem) -> str:
        """
        Download the file and upload it to Drive.

        Returns:
            Drive file ID of the uploaded copy

        Raises:
            TransferFailureException: on any download or upload failure
        """
        if not item.url_private:
            raise TransferFailureException(item.id, "file has no download URL")

        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        file_path = self.scratch_path(item)

        try:
            self.downloader.download(item.url_private, file_path)
            drive_file_id = self.store.upload(item.name or item.id, self.folder_id, str(file_path))
        except Exception as e:
            self._remove_scratch(file_path)
            raise TransferFailureException(item.id, str(e)) from e

        if not drive_file_id:
            self._remove_scratch(file_path)
            raise TransferFailureException(item.id, "upload returned no file ID")

        self._remove_scratch(file_path)
        return drive_file_id

    def _remove_scratch(self, file_path: Path) -> None:
        """Best-effort cleanup; a leftover scratch file is not an error"""
        try:
            if file_path.exists():
                os.remove(file_path)
        except OSError as e:
            logger.warning(f"Could not remove scratch file {file_path}: {e}")
