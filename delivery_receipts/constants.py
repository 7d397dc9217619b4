"""
Constants for the delivery receipt store.
"""

DB_NAME = "delivery_receipts.db"

# How many receipts survive the trim step. The upstream feed returns at most
# MAX_ITEMS_PER_FETCH items, so this covers roughly 20 fetches.
RECEIPT_CAPACITY = 1000

MAX_ITEMS_PER_FETCH = 50

# How long a writer waits on a locked database file before giving up
SQLITE_BUSY_TIMEOUT_SECONDS = 30
