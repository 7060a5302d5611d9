"""Texas Hold'em hand simulator: hand ranking and the betting state machine."""

from .cards import Card, RANKS, SUITS, Rank, Suit, build_deck, deal, parse_cards
from .errors import ActionParseError, InputRejected, InsufficientFunds, InvariantViolation
from .evaluator import Hand, HandCategory, best_hands, compare_hands, evaluate_best
from .game import GameEngine, split_pot
from .models import Action, ActionType, Player, Street, TableConfig, TableView
from .session import Session

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "RANKS",
    "SUITS",
    "build_deck",
    "deal",
    "parse_cards",
    "Hand",
    "HandCategory",
    "evaluate_best",
    "compare_hands",
    "best_hands",
    "GameEngine",
    "split_pot",
    "Session",
    "Action",
    "ActionType",
    "Player",
    "Street",
    "TableConfig",
    "TableView",
    "InputRejected",
    "ActionParseError",
    "InsufficientFunds",
    "InvariantViolation",
]
