"""
Read-only statistics and chart views over the card collections.
"""

from __future__ import annotations

import random
from datetime import date, datetime
from typing import Iterable, Optional, Protocol, Sequence

from qsl_backend.models import Card

CHART_MONTHS = 6


class GrowthEstimator(Protocol):
    """Supplies the growth figures shown next to the headline counts."""

    def growth(
        self, sent: Sequence[Card], received: Sequence[Card]
    ) -> dict[str, int]:
        ...


class PlaceholderGrowthEstimator:
    """
    Stub returning random growth figures.

    Nothing here is derived from history; swap in a real estimator once
    per-month snapshots are kept.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def growth(
        self, sent: Sequence[Card], received: Sequence[Card]
    ) -> dict[str, int]:
        return {
            "receivedGrowth": self._rng.randint(1, 20),
            "sentGrowth": self._rng.randint(1, 20),
            "countryGrowth": self._rng.randint(1, 10),
        }


def _text(value: object) -> str:
    """Non-string values from legacy records count as absent."""
    return value if isinstance(value, str) else ""


def country_prefix(call_sign: str) -> str:
    """Approximate a call sign's country by its first two characters."""
    return call_sign[:2].upper()


def build_stats(
    sent: Sequence[Card],
    received: Sequence[Card],
    growth: Optional[GrowthEstimator] = None,
) -> dict:
    growth = growth or PlaceholderGrowthEstimator()
    everything = [*sent, *received]

    countries = {
        country_prefix(_text(card.callSign))
        for card in everything
        if _text(card.callSign)
    }
    eye_qso = sum(1 for card in everything if _text(card.mode).lower() == "eye")

    stats = {
        "received": len(received),
        "sent": len(sent),
        "pending": sum(1 for card in sent if card.status == "pending"),
        "countries": len(countries),
        "eyeQso": eye_qso,
    }
    stats.update(growth.growth(sent, received))
    return stats


def month_key(value: object) -> Optional[str]:
    """Return ``YYYY-MM`` for a card date, or None if it cannot be parsed."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    return f"{parsed.year:04d}-{parsed.month:02d}"


def trailing_months(today: date, count: int = CHART_MONTHS) -> list[str]:
    """Month labels for the ``count`` months ending with ``today``'s month."""
    labels = []
    for offset in range(count - 1, -1, -1):
        total = today.year * 12 + (today.month - 1) - offset
        labels.append(f"{total // 12:04d}-{total % 12 + 1:02d}")
    return labels


def _count_by_month(cards: Iterable[Card], labels: list[str]) -> list[int]:
    counts = dict.fromkeys(labels, 0)
    for card in cards:
        key = month_key(card.date)
        if key in counts:
            counts[key] += 1
    return [counts[label] for label in labels]


def mode_breakdown(cards: Iterable[Card]) -> dict[str, list]:
    modes: dict[str, int] = {}
    for card in cards:
        mode = _text(card.mode).upper() or "OTHER"
        modes[mode] = modes.get(mode, 0) + 1
    return {"labels": list(modes.keys()), "data": list(modes.values())}


def build_chart_data(
    sent: Sequence[Card], received: Sequence[Card], today: Optional[date] = None
) -> dict:
    labels = trailing_months(today or date.today())
    monthly_sent = _count_by_month(sent, labels)
    return {
        "monthly": {
            "labels": labels,
            "sent": monthly_sent,
            # Mirrors the sent series rather than filtering by status.
            "pending": list(monthly_sent),
            "received": _count_by_month(received, labels),
        },
        "modes": mode_breakdown([*sent, *received]),
    }
