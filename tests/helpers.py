from __future__ import annotations

import random
from collections import deque
from typing import Iterable, List, Optional, Sequence, Union

from holdem.cards import Card, build_deck, parse_cards
from holdem.console import parse_action
from holdem.game import Event, GameEngine
from holdem.models import Action, ActionType, Player, TableConfig, TableView


def create_engine(
    balances: Sequence[int] = (500, 500, 500),
    *,
    names: Optional[Sequence[str]] = None,
    min_bet: int = 5,
    seed: int = 42,
    first_hand: bool = False,
) -> GameEngine:
    """Instantiate a hand with one player per balance, seated in the given order."""
    names = list(names) if names else [f"Player{idx}" for idx in range(len(balances))]
    players = [Player(name=name, balance=balance) for name, balance in zip(names, balances)]
    return GameEngine(
        players,
        TableConfig(min_bet=min_bet),
        first_hand=first_hand,
        rng=random.Random(seed),
        hand_id="H-TEST-00000",
    )


def rigged_deck(labels: Sequence[str]) -> List[Card]:
    """Deck that deals ``labels`` first, followed by every other card."""
    head = parse_cards(labels)
    rest = [card for card in build_deck(random.Random(0)) if card not in head]
    return head + rest


def play_scripted(engine: GameEngine, actions: Iterable[Action]) -> List[Event]:
    """Apply actions in turn order, skipping seats that cannot act."""
    events: List[Event] = []
    pending = deque(actions)
    while pending and not engine.is_hand_complete():
        if not engine.current_player.in_hand:
            events.extend(engine.skip_turn())
            continue
        events.extend(engine.apply_action(pending.popleft()))
    return events


def check_down(engine: GameEngine) -> List[Event]:
    """Check when free, call otherwise, until the hand is over."""
    events: List[Event] = []
    while not engine.is_hand_complete():
        if not engine.current_player.in_hand:
            events.extend(engine.skip_turn())
            continue
        legal, *_ = engine.legal_actions()
        if ActionType.CHECK in legal:
            events.extend(engine.apply_action(Action.check()))
        elif ActionType.CALL in legal:
            events.extend(engine.apply_action(Action.call()))
        else:
            events.extend(engine.apply_action(Action.fold()))
    return events


def chips_conserved(engine: GameEngine) -> bool:
    return all(
        player.balance + player.total_in_pot == engine.starting_balances[player.name]
        for player in engine.players
    )


class ScriptedAgent:
    """Agent fed from a list of actions or raw console strings."""

    def __init__(self, script: Iterable[Union[Action, str]]) -> None:
        self.script = deque(script)
        self.rejections: List[str] = []
        self.views: List[TableView] = []

    def request_action(self, view: TableView) -> Action:
        self.views.append(view)
        item = self.script.popleft()
        if isinstance(item, str):
            return parse_action(item)
        return item

    def reject(self, view: TableView, message: str) -> None:
        self.rejections.append(message)
