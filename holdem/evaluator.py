from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar

from .cards import Card, Rank, Suit

K = TypeVar("K", bound=Hashable)


class HandCategory(IntEnum):
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    ROYAL_FLUSH = 9


@dataclass(frozen=True, order=True)
class Hand:
    """Hand category plus the ranks that break ties inside it, most significant first."""

    category: HandCategory
    ranks: Tuple[Rank, ...] = ()

    def __str__(self) -> str:
        title = self.category.name.replace("_", " ").title()
        if not self.ranks:
            return title
        return f"{title} ({', '.join(rank.symbol for rank in self.ranks)})"


WHEEL = frozenset({Rank.ACE, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE})


def evaluate_best(cards: Iterable[Card]) -> Hand:
    """Classify the best five-card hand available in ``cards`` (five or more distinct cards)."""
    unique = list(dict.fromkeys(cards))
    if len(unique) < 5:
        raise ValueError(f"Need at least 5 cards, got {len(unique)}")

    for detect in _DETECTORS:
        hand = detect(unique)
        if hand is not None:
            return hand
    return _high_card(unique)


def compare_hands(left: Hand, right: Hand) -> int:
    if left > right:
        return 1
    if left < right:
        return -1
    return 0


def best_hands(hands: Mapping[K, Hand]) -> List[K]:
    """Keys whose hand equals the strongest hand in ``hands``."""
    if not hands:
        return []
    best = max(hands.values())
    return [key for key, hand in hands.items() if hand == best]


def describe_rank(hand: Hand) -> str:
    return hand.category.name.lower()


# Detectors -----------------------------------------------------------


def _straight_high(ranks: Iterable[Rank]) -> Optional[Rank]:
    ordered = sorted(set(ranks))
    for idx in range(len(ordered) - 5, -1, -1):
        window = ordered[idx : idx + 5]
        if window[-1] - window[0] == 4:
            return window[-1]
    if WHEEL.issubset(ordered):
        return Rank.FIVE
    return None


def _by_suit(cards: Sequence[Card]) -> Dict[Suit, List[Rank]]:
    suits: Dict[Suit, List[Rank]] = {}
    for card in cards:
        suits.setdefault(card.suit, []).append(card.rank)
    return suits


def _descending(ranks: Iterable[Rank]) -> List[Rank]:
    return sorted(ranks, reverse=True)


def _straight_flush(cards: Sequence[Card]) -> Optional[Hand]:
    best: Optional[Hand] = None
    for ranks in _by_suit(cards).values():
        if len(ranks) < 5:
            continue
        high = _straight_high(ranks)
        if high is None:
            continue
        if high == Rank.ACE:
            return Hand(HandCategory.ROYAL_FLUSH)
        hand = Hand(HandCategory.STRAIGHT_FLUSH, (high,))
        if best is None or hand > best:
            best = hand
    return best


def _four_of_a_kind(cards: Sequence[Card]) -> Optional[Hand]:
    counts = Counter(card.rank for card in cards)
    quads = _descending(rank for rank, count in counts.items() if count == 4)
    if not quads:
        return None
    quad = quads[0]
    kicker = max(card.rank for card in cards if card.rank != quad)
    return Hand(HandCategory.FOUR_OF_A_KIND, (quad, kicker))


def _full_house(cards: Sequence[Card]) -> Optional[Hand]:
    counts = Counter(card.rank for card in cards)
    trips = _descending(rank for rank, count in counts.items() if count == 3)
    if not trips:
        return None
    # a second set of trips can fill the pair slot
    pairs = _descending(rank for rank, count in counts.items() if count >= 2 and rank != trips[0])
    if not pairs:
        return None
    return Hand(HandCategory.FULL_HOUSE, (trips[0], pairs[0]))


def _flush(cards: Sequence[Card]) -> Optional[Hand]:
    highs = [max(ranks) for ranks in _by_suit(cards).values() if len(ranks) >= 5]
    if not highs:
        return None
    return Hand(HandCategory.FLUSH, (max(highs),))


def _straight(cards: Sequence[Card]) -> Optional[Hand]:
    high = _straight_high(card.rank for card in cards)
    if high is None:
        return None
    return Hand(HandCategory.STRAIGHT, (high,))


def _three_of_a_kind(cards: Sequence[Card]) -> Optional[Hand]:
    counts = Counter(card.rank for card in cards)
    trips = _descending(rank for rank, count in counts.items() if count == 3)
    if not trips:
        return None
    kickers = _descending(card.rank for card in cards if card.rank != trips[0])[:2]
    return Hand(HandCategory.THREE_OF_A_KIND, (trips[0], *kickers))


def _pairs(cards: Sequence[Card]) -> Optional[Hand]:
    counts = Counter(card.rank for card in cards)
    pairs = _descending(rank for rank, count in counts.items() if count == 2)
    if not pairs:
        return None
    if len(pairs) >= 2:
        high, low = pairs[:2]
        # a third pair competes with the singles for the kicker
        kicker = max(card.rank for card in cards if card.rank not in (high, low))
        return Hand(HandCategory.TWO_PAIR, (high, low, kicker))
    kickers = _descending(card.rank for card in cards if card.rank != pairs[0])[:3]
    return Hand(HandCategory.PAIR, (pairs[0], *kickers))


def _high_card(cards: Sequence[Card]) -> Hand:
    return Hand(HandCategory.HIGH_CARD, tuple(_descending(card.rank for card in cards)[:5]))


_DETECTORS = (
    _straight_flush,
    _four_of_a_kind,
    _full_house,
    _flush,
    _straight,
    _three_of_a_kind,
    _pairs,
)
