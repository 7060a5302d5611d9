from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from .cards import Card
from .models import Action, ActionType, Street, TableView

LOGGER = logging.getLogger("holdem_bots")

_RNG = random.Random()


def _rough_hand_strength(hole: Sequence[Card]) -> int:
    """Very rough proxy for hand quality used to drive aggression choices."""
    if len(hole) < 2:
        return 0

    values = [int(card.rank) for card in hole]
    score = sum(values)
    if values[0] == values[1]:
        score += 14  # pairs are quite strong pre-flop
    else:
        gap = abs(values[0] - values[1])
        if gap == 1:
            score += 4
        elif gap == 2:
            score += 2
    if hole[0].suit == hole[1].suit:
        score += 3
    if min(values) >= 11:
        score += 2

    return score


def _should_raise(strength: int, street: Street, facing_bet: bool, rng: random.Random) -> bool:
    base = 0.1 if facing_bet else 0.2
    street_bonus = {
        Street.PRE_FLOP: 0.0,
        Street.FLOP: 0.03,
        Street.TURN: 0.05,
        Street.RIVER: 0.06,
    }.get(street, 0.0)
    scaled_strength = min(strength / 60.0, 0.35)
    probability = min(0.6, base + street_bonus + scaled_strength)

    # Always attack with premium holdings.
    if strength >= 36:
        return True
    return rng.random() < probability


def _choose_raise_amount(
    min_raise_to: Optional[int],
    max_raise_to: Optional[int],
    min_bet: int,
    rng: random.Random,
) -> int:
    if min_raise_to is None:
        raise ValueError("Raise requested without a minimum amount")
    if max_raise_to is None or max_raise_to <= min_raise_to:
        return min_raise_to

    # Raise in whole betting units, rarely shoving.
    target = min_raise_to - 1 + min_bet * rng.randint(1, 4)
    if rng.random() > 0.95:
        target = max_raise_to
    return max(min_raise_to, min(target, max_raise_to))


def baseline_strategy(view: TableView, min_bet: int = 5, rng: Optional[random.Random] = None) -> Action:
    """Demo opponent: calls most bets, checks when free, raises with the better holdings."""
    rng = rng if rng is not None else _RNG
    legal = view.legal

    # Always fold if folding is only option.
    if not legal or legal == (ActionType.FOLD,):
        return Action.fold()

    hole = view.player(view.actor).hole_cards
    strength = _rough_hand_strength(hole)
    facing_bet = view.call_amount is not None

    if ActionType.RAISE in legal and hole and _should_raise(strength, view.street, facing_bet, rng):
        return Action.raise_to(_choose_raise_amount(view.min_raise_to, view.max_raise_to, min_bet, rng))

    if ActionType.CHECK in legal:
        return Action.check()

    if ActionType.CALL in legal:
        return Action.call()

    return Action.fold()


class BotPlayer:
    """Action provider that plays ``baseline_strategy`` for one seat."""

    def __init__(self, name: str, min_bet: int = 5, seed: Optional[int] = None) -> None:
        self.name = name
        self.min_bet = min_bet
        self.rng = random.Random(seed)

    def request_action(self, view: TableView) -> Action:
        action = baseline_strategy(view, self.min_bet, self.rng)
        LOGGER.debug("%s chooses %s %s", self.name, action.type.value, action.amount or "")
        return action

    def reject(self, view: TableView, message: str) -> None:
        LOGGER.warning("%s had an action rejected: %s", self.name, message)
