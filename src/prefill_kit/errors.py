"""Exception hierarchy for user-facing failures.

Expected "nothing to do" outcomes (an empty field list, an unparsable URL)
are signalled with ``None`` returns instead; these exceptions are reserved
for input the caller must fix.
"""

from __future__ import annotations


class PrefillError(ValueError):
    """Base class for errors whose message is safe to show to a user."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TransformError(PrefillError):
    """Raised when a text transform cannot be applied (e.g. a bad regex)."""


class BatchError(PrefillError):
    """Raised when a batch template or form URL fails validation."""


class RecipientsError(PrefillError):
    """Raised when recipient data cannot be mapped or a bulk payload is incomplete."""
