"""
Data models for the delivery receipt store.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CandidateItem:
    """A piece of content that may become a user-visible alert.

    Only `id` takes part in equality and hashing, so a set of items holds
    at most one item per id.
    """
    id: str
    title: str = field(default="", compare=False)
    body: str = field(default="", compare=False)
    url: Optional[str] = field(default=None, compare=False)
    metadata: dict = field(default_factory=dict, compare=False)


@dataclass
class DeliveryReceipt:
    """Record that an alert for `content_id` has already been shown."""
    sequence: int
    content_id: str
