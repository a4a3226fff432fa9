"""
Rules a card must pass before it is stored.
"""

from __future__ import annotations

import re

from qsl_backend.errors import CardValidationError
from qsl_backend.models import CARD_TYPES, STATUSES_BY_ROLE, Card, CardRole

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


def card_violations(card: Card, role: CardRole = CardRole.SENT) -> list[str]:
    """Return every rule the card breaks, in rule order."""
    violations = []
    if _blank(card.callSign):
        violations.append("callSign is required")
    if _blank(card.myCallSign):
        violations.append("myCallSign is required")
    # Syntax only; 2024-02-31 passes.
    if not DATE_PATTERN.fullmatch(card.date or ""):
        violations.append("date must be formatted as YYYY-MM-DD")
    if _blank(card.mode):
        violations.append("mode is required")
    if card.cardType not in CARD_TYPES:
        violations.append("cardType must be online or physical")

    allowed = STATUSES_BY_ROLE[role]
    if role == CardRole.SENT and card.status not in allowed:
        violations.append("sent card status must be pending or sent")
    if role == CardRole.RECEIVED and card.status and card.status not in allowed:
        violations.append("received card status must be received or verified")
    return violations


def validate_card(card: Card, role: CardRole = CardRole.SENT) -> None:
    violations = card_violations(card, role)
    if violations:
        raise CardValidationError(violations)
