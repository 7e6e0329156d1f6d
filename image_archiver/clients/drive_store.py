"""
Google Drive file store.
"""
import logging
from typing import Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.http import MediaFileUpload

from image_archiver.config import ArchiverConfig
from image_archiver.constants import GOOGLE_DRIVE_SCOPES

logger = logging.getLogger("image_archiver.drive")


def load_credentials(config: ArchiverConfig) -> service_account.Credentials:
    """Service account credentials from a JSON file or inline env values"""
    if config.google_drive_credentials:
        return service_account.Credentials.from_service_account_file(
            config.google_drive_credentials, scopes=GOOGLE_DRIVE_SCOPES
        )

    info = {
        "type": "service_account",
        "client_email": config.google_client_email,
        "private_key": config.google_private_key,
        "token_uri": "https://oauth2.googleapis.com/token",
    }
    return service_account.Credentials.from_service_account_info(
        info, scopes=GOOGLE_DRIVE_SCOPES
    )


class GoogleDriveFileStore:
    """Uploads files into a Drive folder"""

    def __init__(self, service):
        self.service = service

    @classmethod
    def from_config(cls, config: ArchiverConfig) -> "GoogleDriveFileStore":
        credentials = load_credentials(config)
        service = build("drive", "v3", credentials=credentials, cache_discovery=False)
        return cls(service)

    def upload(self, name: str, folder_id: Optional[str], file_path: str) -> str:
        """Upload file_path as name inside folder_id; return the Drive file ID"""
        file_metadata = {
            "name": name,
            "parents": [folder_id] if folder_id else []
        }
        media = MediaFileUpload(file_path, resumable=True)

        file = self.service.files().create(
            body=file_metadata,
            media_body=media,
            fields="id"
        ).execute()

        file_id = file.get("id")
        logger.info(f"Uploaded to Google Drive: {name} ({file_id})")
        return file_id
