"""
Custom exceptions for the image archiver.
Provides specific exception types for the failure modes of a backup run.
"""


class ArchiverException(Exception):
    """Base exception for the image archiver"""
    pass


class ConfigurationException(ArchiverException):
    """Raised when a required setting is missing or invalid"""
    def __init__(self, setting: str, message: str = "is not set"):
        self.setting = setting
        super().__init__(f"Configuration error: {setting} {message}")


class FeedFetchException(ArchiverException):
    """Raised when a page of channel history cannot be fetched"""
    def __init__(self, channel_id: str, details: str):
        self.channel_id = channel_id
        self.details = details
        super().__init__(f"Failed to fetch history for channel {channel_id}: {details}")


class TransferFailureException(ArchiverException):
    """Raised when downloading or uploading a single file fails"""
    def __init__(self, file_id: str, details: str):
        self.file_id = file_id
        self.details = details
        super().__init__(f"Transfer of file {file_id} failed: {details}")


class LedgerConflictException(ArchiverException):
    """Raised when a file is recorded as exported twice"""
    def __init__(self, file_id: str):
        self.file_id = file_id
        super().__init__(f"File {file_id} is already recorded as exported")


class LockReleaseException(ArchiverException):
    """Raised when the backup lock cannot be released"""
    def __init__(self, details: str):
        self.details = details
        super().__init__(f"Failed to release backup lock: {details}")
