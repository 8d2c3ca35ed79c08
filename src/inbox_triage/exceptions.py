"""Exception hierarchy for inbox-triage."""


class InboxTriageError(Exception):
    """Base exception for all inbox-triage errors."""


class ConfigError(InboxTriageError):
    """Required configuration is missing or invalid."""


# Inbox
class InboxError(InboxTriageError):
    """Base exception for mailbox operations."""


class InboxUnavailableError(InboxError):
    """The mailbox could not be listed or a message could not be fetched."""


# Record store
class RecordStoreError(InboxTriageError):
    """Failed to write a classification, alert or log row."""


# Deal directory
class DealDirectoryError(InboxTriageError):
    """Failed to look up a deal association."""


# Style reference
class StyleSourceError(InboxTriageError):
    """The tone guide or style profile could not be fetched."""
