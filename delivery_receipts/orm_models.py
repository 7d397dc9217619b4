"""
SQLAlchemy ORM models for the delivery receipt store.

These models are internal to the database layer. The public interface
uses the dataclass models from models.py.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from delivery_receipts.models import DeliveryReceipt


class Base(DeclarativeBase):
    pass


class DeliveryReceiptORM(Base):
    """SQLAlchemy model for receipts table."""

    __tablename__ = "receipts"

    sequence: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_id: Mapped[str] = mapped_column(Text, nullable=False)

    # AUTOINCREMENT keeps sequence values from being reused after a trim
    __table_args__ = {"sqlite_autoincrement": True}


def receipt_orm_to_dataclass(orm: DeliveryReceiptORM) -> DeliveryReceipt:
    """Convert a DeliveryReceiptORM instance to a DeliveryReceipt dataclass."""
    return DeliveryReceipt(
        sequence=orm.sequence,
        content_id=orm.content_id,
    )
