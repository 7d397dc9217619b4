"""
Database operations for the delivery receipt store.

Uses SQLAlchemy ORM for database access. The public API uses dataclass
models from models.py, with conversion to/from ORM models handled internally.

Every operation runs as one unit of work: a process-wide lock is held while
a single BEGIN IMMEDIATE transaction ensures the schema, does its reads and
writes, and commits. Any failure rolls the whole unit back and is raised as
a ReceiptStoreError.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Generator, Iterable, List, Set

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from delivery_receipts.constants import RECEIPT_CAPACITY
from delivery_receipts.db_engine import get_session
from delivery_receipts.errors import ReceiptStoreError, StorageUnavailable, TransactionFailure
from delivery_receipts.models import CandidateItem, DeliveryReceipt
from delivery_receipts.orm_models import Base, DeliveryReceiptORM, receipt_orm_to_dataclass
from util.logging_util import setup_logger

logger = setup_logger(__name__)

# Single serialization point for every transaction against the receipts file
_write_lock = threading.Lock()


def _ensure_schema(session: Session):
    """Open the session's connection and create the receipts table if missing."""
    try:
        connection = session.connection()
    except DBAPIError as e:
        raise StorageUnavailable(f"Cannot open receipts database: {e}") from e
    Base.metadata.create_all(connection)


@contextmanager
def _unit_of_work() -> Generator[Session, None, None]:
    with _write_lock:
        try:
            with get_session() as session:
                _ensure_schema(session)
                yield session
        except ReceiptStoreError:
            logger.exception("Receipt store unavailable")
            raise
        except SQLAlchemyError as e:
            logger.exception("Receipt transaction failed and was rolled back")
            raise TransactionFailure(f"Receipt transaction failed: {e}") from e


def init_db():
    """Initialize the database schema."""
    with _unit_of_work():
        pass


def _find_delivered_ids(session: Session, content_ids: List[str]) -> Set[str]:
    """Return which of the given ids already have a receipt, in one query."""
    stmt = select(DeliveryReceiptORM.content_id).where(
        DeliveryReceiptORM.content_id.in_(content_ids)
    )
    return set(session.execute(stmt).scalars().all())


def _insert_receipts(session: Session, content_ids: List[str]):
    if not content_ids:
        return
    session.execute(
        insert(DeliveryReceiptORM),
        [{"content_id": content_id} for content_id in content_ids],
    )


def _trim_receipts(session: Session, capacity: int) -> int:
    """Delete every receipt outside the `capacity` highest sequences.

    Returns the number of receipts deleted.
    """
    newest = (
        select(DeliveryReceiptORM.sequence)
        .order_by(DeliveryReceiptORM.sequence.desc())
        .limit(capacity)
    )
    stmt = (
        delete(DeliveryReceiptORM)
        .where(DeliveryReceiptORM.sequence.not_in(newest))
        .execution_options(synchronize_session=False)
    )
    return session.execute(stmt).rowcount


def filter_undelivered(
    batch: Iterable[CandidateItem], capacity: int = RECEIPT_CAPACITY
) -> Set[CandidateItem]:
    """Return the items of `batch` that have never been delivered, and record them.

    The returned items each have exactly one receipt once this returns; items
    left out already had one and are untouched. Receipts beyond the newest
    `capacity` are deleted in the same transaction.

    Raises ValueError if the batch holds more distinct ids than `capacity`, and
    StorageUnavailable or TransactionFailure if nothing was recorded.
    """
    if capacity < 1:
        raise ValueError(f"capacity must be at least 1, got {capacity}")

    # First occurrence wins when the batch repeats an id
    items_by_id: Dict[str, CandidateItem] = {}
    for item in batch:
        items_by_id.setdefault(item.id, item)

    if not items_by_id:
        return set()

    # The trim below must never remove a receipt this call is about to return
    if len(items_by_id) > capacity:
        raise ValueError(
            f"batch of {len(items_by_id)} distinct ids exceeds receipt capacity {capacity}"
        )

    with _unit_of_work() as session:
        delivered = _find_delivered_ids(session, list(items_by_id))
        undelivered = [
            item for content_id, item in items_by_id.items() if content_id not in delivered
        ]
        _insert_receipts(session, [item.id for item in undelivered])
        trimmed = _trim_receipts(session, capacity)

    logger.debug(
        f"Filtered {len(items_by_id)} candidates: {len(delivered)} already delivered, "
        f"{len(undelivered)} recorded, {trimmed} receipts trimmed"
    )
    return set(undelivered)


def count_receipts() -> int:
    """Get the number of stored receipts."""
    with _unit_of_work() as session:
        return session.execute(select(func.count()).select_from(DeliveryReceiptORM)).scalar_one()


def get_receipts() -> List[DeliveryReceipt]:
    """Get all stored receipts, oldest first."""
    with _unit_of_work() as session:
        stmt = select(DeliveryReceiptORM).order_by(DeliveryReceiptORM.sequence.asc())
        orms = session.execute(stmt).scalars().all()
        return [receipt_orm_to_dataclass(orm) for orm in orms]


def has_receipt(content_id: str) -> bool:
    """Check if an alert for this content id has already been delivered."""
    with _unit_of_work() as session:
        stmt = select(DeliveryReceiptORM.sequence).where(
            DeliveryReceiptORM.content_id == content_id
        ).limit(1)
        return session.execute(stmt).first() is not None
