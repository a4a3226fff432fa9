"""
Whole-document collection store.

Each role's cards live in a single JSON array blob. Every write loads the
full collection, changes it in memory and overwrites the blob. There is no
locking or version check: two concurrent writers on the same key can each
read the same snapshot, and the later put wins, discarding the other's
change. Callers that need stronger guarantees must serialize writes per key
themselves.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Sequence

from pydantic import ValidationError

from qsl_backend.errors import (
    AccessDeniedError,
    CardNotFoundError,
    InvalidBucketError,
    InvalidRegionError,
    MalformedInputError,
    QslError,
    SignatureMismatchError,
    StoreReadError,
    StoreWriteError,
)
from qsl_backend.models import Card, CardRole, CollectionConfig
from qsl_backend.storage import StorageClient, StorageError

logger = logging.getLogger(__name__)


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def _new_card_id() -> str:
    return str(uuid.uuid4())


class CardStore:
    """Loads, rewrites and edits card collections held in object storage."""

    def __init__(
        self,
        storage: StorageClient,
        config: CollectionConfig,
        *,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] = _new_card_id,
    ):
        self.storage = storage
        self.config = config
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._id_factory = id_factory

    def key_for(self, role: CardRole) -> str:
        return self.config.key_for(role)

    def _classify(self, key: str, exc: StorageError, *, writing: bool) -> QslError:
        logger.error(
            "COS %s failed (%s): code=%s request_id=%s bucket=%s region=%s: %s",
            "write" if writing else "read",
            key,
            exc.code,
            exc.request_id,
            self.config.bucket,
            self.config.region,
            exc.message,
        )
        if exc.code == "SignatureDoesNotMatch":
            return SignatureMismatchError(exc.request_id)
        if exc.code == "AccessDenied":
            return AccessDeniedError(exc.request_id)
        if exc.code in ("InvalidBucketName", "NoSuchBucket"):
            return InvalidBucketError(self.config.bucket, exc.request_id)
        if exc.code == "InvalidRegion":
            return InvalidRegionError(self.config.region, exc.request_id)
        if writing:
            return StoreWriteError(f"{exc.message} ({exc.code})")
        return StoreReadError(f"{exc.message} ({exc.code})")

    def load(self, key: str) -> list[Card]:
        """Return the collection stored at ``key``; a missing blob is empty."""
        try:
            raw = self.storage.get_bytes(key)
        except FileNotFoundError:
            logger.info("Collection %s not created yet, treating as empty", key)
            return []
        except StorageError as exc:
            raise self._classify(key, exc, writing=False) from exc

        try:
            content = raw.decode("utf-8").strip()
            payload = json.loads(content) if content else []
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StoreReadError(f"{key} is not valid UTF-8 JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise StoreReadError(f"{key} does not hold a JSON array")
        if not all(isinstance(item, dict) for item in payload):
            raise StoreReadError(f"{key} holds an entry that is not a card object")
        return [self._stored_card(key, item) for item in payload]

    def _stored_card(self, key: str, item: dict) -> Card:
        # Older records may carry non-string known fields; keep them as stored.
        try:
            return Card.model_validate(item)
        except ValidationError:
            logger.warning(
                "Card %r in %s has non-string fields, keeping it unvalidated",
                item.get("id"),
                key,
            )
            return Card.model_construct(
                _fields_set=set(item) & set(Card.model_fields),
                **item,
            )

    def save(self, key: str, cards: Sequence[Card]) -> None:
        """Overwrite the blob at ``key`` with the full collection."""
        if not isinstance(cards, (list, tuple)):
            raise MalformedInputError("Cards to write must be a list", 1002)
        if not all(isinstance(card, Card) for card in cards):
            raise MalformedInputError("Cards to write must be Card records", 1002)
        records = [card.to_record() for card in cards]
        body = json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")
        try:
            self.storage.put_bytes(key, body, content_type="application/json")
        except StorageError as exc:
            raise self._classify(key, exc, writing=True) from exc
        logger.info("Saved %d cards to %s", len(records), key)

    def upsert(self, key: str, card: Card) -> Card:
        """Replace the card with the same id in place, or append a new one."""
        cards = self.load(key)
        now = utc_timestamp(self._clock())
        record = card.to_record()

        index = None
        if card.id:
            index = next(
                (i for i, existing in enumerate(cards) if existing.id == card.id),
                None,
            )

        if index is not None:
            created = cards[index].createdAt
            if not (isinstance(created, str) and created):
                created = now
            record["createdAt"] = created
            record["updatedAt"] = now
            stored = Card.model_validate(record)
            cards[index] = stored
        else:
            record["id"] = self._id_factory()
            record["createdAt"] = now
            record["updatedAt"] = now
            stored = Card.model_validate(record)
            cards.append(stored)

        self.save(key, cards)
        return stored

    def remove_by_id(self, key: str, card_id: str | None) -> bool:
        if not card_id:
            raise MalformedInputError("Card id is required", 2002)

        cards = self.load(key)
        remaining = [card for card in cards if card.id != card_id]
        if len(remaining) == len(cards):
            raise CardNotFoundError(card_id)

        self.save(key, remaining)
        return True
