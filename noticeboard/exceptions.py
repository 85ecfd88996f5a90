"""
Custom exception hierarchy for the noticeboard.

Each exception type maps to one category of failure in the poll cycle.
None of them is fatal: callers log and degrade to stale data or a
"waiting" status.
"""

from __future__ import annotations


class NoticeboardError(Exception):
    """Base exception for all noticeboard failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class UpstreamFetchError(NoticeboardError):
    """The upstream cause-list feed could not be fetched or decoded."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("UPSTREAM_FETCH_FAILED", message, details)


class UpstreamFormatError(NoticeboardError):
    """The upstream payload does not have the shape of the feed contract."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("UPSTREAM_FORMAT_INVALID", message, details)


class MatterParseError(NoticeboardError):
    """A tracked-matter token is not of the form <court>/<item>."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("MATTER_INVALID", message, details)


class NotificationError(NoticeboardError):
    """A notification sink could not deliver an alert."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("NOTIFICATION_FAILED", message, details)
