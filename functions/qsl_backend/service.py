"""
Operation surface for the QSL card API.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from qsl_backend.aggregation import GrowthEstimator, build_chart_data, build_stats
from qsl_backend.card_store import CardStore, utc_timestamp
from qsl_backend.errors import CardValidationError, RequestError
from qsl_backend.models import Card, CardRole
from qsl_backend.validation import validate_card

logger = logging.getLogger(__name__)


class CardService:
    def __init__(
        self,
        store: CardStore,
        *,
        growth: Optional[GrowthEstimator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.growth = growth
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _load(self, role: CardRole) -> list[Card]:
        return self.store.load(self.store.key_for(role))

    def ping(self) -> dict:
        return {
            "status": "normal",
            "message": "Service is running",
            "timestamp": utc_timestamp(self._clock()),
        }

    def get_stats(self) -> dict:
        return build_stats(
            self._load(CardRole.SENT), self._load(CardRole.RECEIVED), self.growth
        )

    def get_chart_data(self) -> dict:
        return build_chart_data(
            self._load(CardRole.SENT),
            self._load(CardRole.RECEIVED),
            today=self._clock().date(),
        )

    def get_sent_cards(self) -> list[dict]:
        return [card.to_record() for card in self._load(CardRole.SENT)]

    def get_received_cards(self) -> list[dict]:
        return [card.to_record() for card in self._load(CardRole.RECEIVED)]

    def save_card(self, card_data: Any, role: CardRole = CardRole.SENT) -> dict:
        """Validate and upsert a card, returning it as stored."""
        if not isinstance(card_data, dict):
            raise RequestError("cardData must be a JSON object", 3005)
        try:
            card = Card.model_validate(card_data)
        except ValidationError as exc:
            raise CardValidationError(
                [
                    f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                    for err in exc.errors()
                ]
            ) from exc
        validate_card(card, role)

        stored = self.store.upsert(self.store.key_for(role), card)
        logger.info("Saved %s card %s", role.value, stored.id)
        return stored.to_record()

    def delete_card(self, card_id: Optional[str], role: CardRole) -> bool:
        removed = self.store.remove_by_id(self.store.key_for(role), card_id)
        logger.info("Deleted %s card %s", role.value, card_id)
        return removed
