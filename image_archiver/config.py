"""
Runtime configuration loaded from environment variables.

Values may also come from a ``.env`` file in the working directory.
Nothing here fails at import time: required settings are checked by
``ArchiverConfig.require`` when a backup run is wired up.
"""
import os
import tempfile
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from image_archiver.constants import (
    DEFAULT_CRON_SCHEDULE,
    DEFAULT_PORT,
    HISTORY_PAGE_SIZE,
    TRANSFER_MAX_ATTEMPTS,
)
from image_archiver.exceptions import ConfigurationException


class ArchiverConfig(BaseModel):
    slack_bot_token: Optional[str] = None
    slack_channel_id: Optional[str] = None

    google_drive_folder_id: Optional[str] = None
    google_drive_credentials: Optional[str] = None  # Path to service account JSON
    google_client_email: Optional[str] = None
    google_private_key: Optional[str] = None

    cron_schedule: str = DEFAULT_CRON_SCHEDULE
    scratch_dir: str = tempfile.gettempdir()
    api_key: Optional[str] = None
    port: int = DEFAULT_PORT

    page_size: int = HISTORY_PAGE_SIZE
    max_attempts: int = TRANSFER_MAX_ATTEMPTS

    def require(self) -> "ArchiverConfig":
        """Check that everything a backup run needs is present"""
        for setting in ("slack_bot_token", "slack_channel_id", "google_drive_folder_id"):
            if not getattr(self, setting):
                raise ConfigurationException(setting.upper())

        has_inline_key = self.google_client_email and self.google_private_key
        if not self.google_drive_credentials and not has_inline_key:
            raise ConfigurationException(
                "GOOGLE_DRIVE_CREDENTIALS",
                "or GOOGLE_CLIENT_EMAIL/GOOGLE_PRIVATE_KEY must be set",
            )
        return self


def load_config() -> ArchiverConfig:
    """Build configuration from the process environment"""
    load_dotenv()

    private_key = os.getenv("GOOGLE_PRIVATE_KEY")
    if private_key:
        # Keys pasted into env files usually carry escaped newlines
        private_key = private_key.replace("\\n", "\n")

    return ArchiverConfig(
        slack_bot_token=os.getenv("SLACK_BOT_TOKEN"),
        slack_channel_id=os.getenv("SLACK_CHANNEL_ID"),
        google_drive_folder_id=os.getenv("GOOGLE_DRIVE_FOLDER_ID"),
        google_drive_credentials=os.getenv("GOOGLE_DRIVE_CREDENTIALS"),
        google_client_email=os.getenv("GOOGLE_CLIENT_EMAIL"),
        google_private_key=private_key,
        cron_schedule=os.getenv("CRON_SCHEDULE") or DEFAULT_CRON_SCHEDULE,
        scratch_dir=os.getenv("ARCHIVER_SCRATCH_DIR", tempfile.gettempdir()),
        api_key=os.getenv("ARCHIVER_API_KEY"),
        port=int(os.getenv("PORT", DEFAULT_PORT)),
    )
