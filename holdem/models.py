from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .cards import Card


class Street(str, Enum):
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"

    def next(self) -> Street:
        if self is Street.SHOWDOWN:
            raise RuntimeError("Showdown is the last street")
        order = list(Street)
        return order[order.index(self) + 1]


# Community cards revealed when a street opens.
STREET_DEALS = {
    Street.FLOP: 3,
    Street.TURN: 1,
    Street.RIVER: 1,
}

HOLE_SIZE = 2
BOARD_SIZE = 5


class ActionType(str, Enum):
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    FOLD = "FOLD"


@dataclass(frozen=True)
class Action:
    type: ActionType
    amount: Optional[int] = None

    @classmethod
    def check(cls) -> Action:
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls) -> Action:
        return cls(ActionType.CALL)

    @classmethod
    def raise_to(cls, amount: int) -> Action:
        return cls(ActionType.RAISE, amount)

    @classmethod
    def fold(cls) -> Action:
        return cls(ActionType.FOLD)


@dataclass
class TableConfig:
    min_bet: int = 5
    starting_balance: int = 500

    @property
    def opening_bet(self) -> int:
        return self.min_bet * 2


@dataclass
class Player:
    name: str
    balance: int
    hole_cards: List[Card] = field(default_factory=list)
    bet: int = 0
    total_in_pot: int = 0
    active: bool = True
    folded: bool = False

    def reset_for_hand(self) -> None:
        self.hole_cards.clear()
        self.bet = 0
        self.total_in_pot = 0
        self.active = True
        self.folded = False

    def reset_for_round(self) -> None:
        self.bet = 0

    @property
    def in_hand(self) -> bool:
        return self.active and not self.folded


@dataclass(frozen=True)
class PlayerView:
    seat: int
    name: str
    balance: int
    bet: int
    active: bool
    folded: bool
    hole_cards: Tuple[Card, ...]


@dataclass(frozen=True)
class TableView:
    """Read-only picture of the table handed to action providers and renderers."""

    hand_id: str
    street: Street
    turn: int
    actor: str
    community: Tuple[Card, ...]
    pot: int
    current_bet: int
    to_call: int
    players: Tuple[PlayerView, ...]
    ended: bool = False
    legal: Tuple[ActionType, ...] = ()
    call_amount: Optional[int] = None
    min_raise_to: Optional[int] = None
    max_raise_to: Optional[int] = None

    def player(self, name: str) -> PlayerView:
        for entry in self.players:
            if entry.name == name:
                return entry
        raise KeyError(name)
