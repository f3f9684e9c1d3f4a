"""Gmail-backed mail store."""

from .client import GmailMailStore, GmailThread, build_gmail_service
from .parsing import GmailMessage, message_to_gmail_message

__all__ = [
    "GmailMailStore",
    "GmailMessage",
    "GmailThread",
    "build_gmail_service",
    "message_to_gmail_message",
]
