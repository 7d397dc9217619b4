"""
One fetch-filter-present cycle, as run on each periodic wake-up.
"""

from enum import Enum
from typing import Callable, List

from alerts.presenter import AlertPresenter
from delivery_receipts.constants import RECEIPT_CAPACITY
from delivery_receipts.database import filter_undelivered
from delivery_receipts.errors import ReceiptStoreError
from delivery_receipts.models import CandidateItem
from util.logging_util import setup_logger

logger = setup_logger(__name__)


class CycleResult(Enum):
    """Completion signal reported back to whatever scheduled the cycle."""
    NEW_DATA = "new_data"
    NO_DATA = "no_data"
    FAILED = "failed"


def run_fetch_cycle(
    fetch: Callable[[], List[CandidateItem]],
    presenter: AlertPresenter,
    capacity: int = RECEIPT_CAPACITY,
) -> CycleResult:
    """
    Fetch candidates, keep the ones never delivered before, and present them.

    If the receipt store fails nothing is presented, since there is no way
    to tell which items would be duplicates.
    """
    try:
        candidates = fetch()
    except Exception:
        logger.exception("Fetching candidates failed")
        return CycleResult.FAILED

    try:
        undelivered = filter_undelivered(candidates, capacity=capacity)
    except ReceiptStoreError:
        # Already logged by the store
        return CycleResult.FAILED

    if not undelivered:
        logger.info(f"Cycle complete: {len(candidates)} candidates, nothing new")
        return CycleResult.NO_DATA

    shown = presenter.present(undelivered)
    logger.info(
        f"Cycle complete: {len(candidates)} candidates, {len(undelivered)} new, {shown} presented"
    )
    if presenter.alerts_enabled and shown < len(undelivered):
        return CycleResult.FAILED
    return CycleResult.NEW_DATA


def next_poll_interval(result: CycleResult, current: int, base: int, maximum: int) -> int:
    """Seconds until the next cycle: back to `base` after new data, otherwise doubled up to `maximum`."""
    if result == CycleResult.NEW_DATA:
        return base
    return min(current * 2, maximum)
