"""
Errors raised by the delivery receipt store.
"""


class ReceiptStoreError(Exception):
    """Base class for receipt store failures."""


class StorageUnavailable(ReceiptStoreError):
    """The receipts database could not be opened or created."""


class TransactionFailure(ReceiptStoreError):
    """A step of the filter-and-record unit of work failed and was rolled back."""
