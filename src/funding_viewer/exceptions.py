"""Custom exceptions for the funding rate viewer.

Kept in one module so the upstream, history and analytics layers can
share them without circular imports.
"""


class ViewerError(Exception):
    """Base exception for all funding viewer errors."""


class UpstreamError(ViewerError):
    """Raised when the upstream data provider fails or returns a malformed payload.

    Covers network failures, non-2xx responses, non-JSON bodies and
    payloads whose shape does not match the documented contract.
    """


class ValidationError(ViewerError):
    """Raised when a caller passes invalid arguments (e.g. days < 1, no coins)."""
