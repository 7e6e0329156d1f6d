"""
Application constants.
Fixed values shared by the archiver services, scheduler and API.
"""

# Slack history pagination
HISTORY_PAGE_SIZE = 200

# Attempts per file transfer (first try included)
TRANSFER_MAX_ATTEMPTS = 3

# Only attachments with this mimetype prefix are archived
IMAGE_MIMETYPE_PREFIX = "image/"

# Singleton lock row
BACKUP_LOCK_ROW_ID = 1

# Scheduler
DEFAULT_CRON_SCHEDULE = "0 2 * * *"  # 2am nightly
BACKUP_JOB_ID = "image_backup"

# HTTP clients
SLACK_API_BASE_URL = "https://slack.com/api"
HTTP_TIMEOUT_SECONDS = 60.0
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# Google Drive
GOOGLE_DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]

# Defaults
DEFAULT_DATABASE_URL = "sqlite:///./archiver.db"
DEFAULT_PORT = 3000
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/image-archiver"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"
