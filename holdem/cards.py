from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Sequence


class Rank(IntEnum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def symbol(self) -> str:
        return RANK_SYMBOLS[self - 2]

    @classmethod
    def from_symbol(cls, symbol: str) -> Rank:
        idx = RANK_SYMBOLS.find(symbol.upper())
        if idx < 0 or len(symbol) != 1:
            raise ValueError(f"Invalid rank: {symbol}")
        return cls(idx + 2)


class Suit(str, Enum):
    SPADES = "s"
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self.value]


RANK_SYMBOLS = "23456789TJQKA"
SUIT_SYMBOLS = {"s": "♠", "h": "♥", "d": "♦", "c": "♣"}

RANKS = tuple(Rank)
SUITS = tuple(Suit)


@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        if not isinstance(self.rank, Rank):
            raise ValueError(f"Invalid rank: {self.rank}")
        if not isinstance(self.suit, Suit):
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{self.rank.symbol}{self.suit.value}"

    @property
    def pretty(self) -> str:
        return f"{self.rank.symbol}{self.suit.symbol}"

    def __str__(self) -> str:
        return self.label


def build_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Return the 52 distinct cards shuffled by ``rng`` (a fresh RNG when omitted)."""
    rng = rng if rng is not None else random.Random()
    deck = [Card(rank, suit) for rank in RANKS for suit in SUITS]
    rng.shuffle(deck)
    return deck


def deal(deck: List[Card], count: int) -> List[Card]:
    if len(deck) < count:
        raise ValueError("Not enough cards left in deck")
    cards = deck[:count]
    del deck[:count]
    return cards


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    if len(label) != 2:
        raise ValueError(f"Invalid card label: {label}")
    try:
        suit = Suit(label[1].lower())
    except ValueError:
        raise ValueError(f"Invalid suit: {label[1]}") from None
    return Card(Rank.from_symbol(label[0]), suit)


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
