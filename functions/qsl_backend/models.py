"""
Card record types.

A card is an open map: the fields the service understands are typed, and
anything else the caller sends is carried through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class CardRole(str, Enum):
    SENT = "sent"
    RECEIVED = "received"


CARD_TYPES = ("online", "physical")
STATUSES_BY_ROLE = {
    CardRole.SENT: ("pending", "sent"),
    CardRole.RECEIVED: ("received", "verified"),
}


class Card(BaseModel):
    """A QSL card. Unknown keys are kept in ``model_extra``."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    callSign: Optional[str] = None
    myCallSign: Optional[str] = None
    date: Optional[str] = None
    mode: Optional[str] = None
    cardType: Optional[str] = None
    status: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    def to_record(self) -> dict[str, Any]:
        """Dump only the keys that were supplied, extras included."""
        record = {
            name: getattr(self, name)
            for name in type(self).model_fields
            if name in self.model_fields_set
        }
        record.update(self.model_extra or {})
        return record


@dataclass(frozen=True)
class CollectionConfig:
    """Where each role's collection lives in the bucket."""

    sent_key: str
    received_key: str
    bucket: str = ""
    region: str = ""

    def key_for(self, role: CardRole) -> str:
        return self.sent_key if role == CardRole.SENT else self.received_key
