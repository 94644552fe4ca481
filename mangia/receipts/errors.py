"""Exceptions raised when a receipt scan cannot produce a result."""

from __future__ import annotations

GENERIC_MESSAGE = "Failed to process receipt. Please try again."


class ReceiptScanError(Exception):
    """Base class for scan failures that abort the whole document.

    ``str(exc)`` carries the internal detail for logs; ``user_message``
    is what a person looking at the screen should see.
    """

    user_message = GENERIC_MESSAGE
    retryable = True


class AcquisitionFailure(ReceiptScanError):
    """The receipt image could not be read or decoded."""

    user_message = "Could not read the receipt image. Please try again."


class RecognitionFailure(ReceiptScanError):
    """The OCR or document-extraction backend did not return a result."""
