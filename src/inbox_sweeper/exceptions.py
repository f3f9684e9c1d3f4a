"""Custom exceptions for Inbox Sweeper."""


class InboxSweeperError(Exception):
    """Base exception for all Inbox Sweeper errors."""


class MailStoreError(InboxSweeperError):
    """Exception raised when the mail store (Gmail API) fails."""


class StorageError(InboxSweeperError):
    """Exception raised when a log workbook or folder cannot be used."""


class ThreadProcessingError(InboxSweeperError):
    """Exception raised when a single thread cannot be classified."""


class ConfigurationError(InboxSweeperError):
    """Exception raised for configuration related errors."""


class AuthenticationError(InboxSweeperError):
    """Exception raised for authentication failures."""
