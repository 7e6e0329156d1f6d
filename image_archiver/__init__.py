"""Slack channel image archiver: copies image attachments into Google Drive."""

__version__ = "1.0.0"
