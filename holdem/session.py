from __future__ import annotations

import logging
import random
import time
from typing import Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from .game import Event, GameEngine
from .models import Action, Player, TableConfig, TableView

LOGGER = logging.getLogger("holdem_session")


class Agent(Protocol):
    def request_action(self, view: TableView) -> Action:
        ...

    def reject(self, view: TableView, message: str) -> None:
        ...


class Session:
    """Consecutive hands at one table with balances carried between them.

    Seats are shuffled once, on the first hand; later hands keep that order.
    """

    def __init__(self, players: Sequence[Player], config: TableConfig, seed: Optional[int] = None) -> None:
        if len(players) < 2:
            raise ValueError("A session needs at least two players")
        self.config = config
        self.players: List[Player] = list(players)
        self.rng = random.Random(seed)
        self.hand_counter = 0
        self.hand: Optional[GameEngine] = None

    @classmethod
    def from_names(cls, names: Sequence[str], config: TableConfig, seed: Optional[int] = None) -> Session:
        return cls([Player(name=name, balance=config.starting_balance) for name in names], config, seed=seed)

    def can_start_hand(self) -> bool:
        funded = [player for player in self.players if player.balance >= self.config.opening_bet]
        return len(funded) >= 2

    def is_match_over(self) -> bool:
        return not self.can_start_hand()

    def start_hand(self) -> GameEngine:
        if not self.can_start_hand():
            raise RuntimeError("Not enough active players to start a hand")

        hand_id = f"H-{time.strftime('%Y%m%d')}-{self.hand_counter:05d}"
        engine = GameEngine(
            self.players,
            self.config,
            first_hand=self.hand_counter == 0,
            rng=self.rng,
            hand_id=hand_id,
        )
        # Keep the seating chosen for the first hand.
        self.players = list(engine.players)
        self.hand_counter += 1
        self.hand = engine
        LOGGER.info("Starting hand %s: %s", hand_id, ", ".join(player.name for player in self.players))
        return engine

    def play_hand(
        self,
        agents: Mapping[str, Agent],
        on_events: Optional[Callable[[List[Event]], None]] = None,
    ) -> GameEngine:
        missing = [player.name for player in self.players if player.name not in agents]
        if missing:
            raise ValueError(f"No agent for {', '.join(missing)}")

        engine = self.start_hand()
        while not engine.is_hand_complete():
            agent = agents[engine.current_player.name]
            events = engine.play_turn(agent.request_action, agent.reject)
            if on_events is not None:
                on_events(events)
        return engine

    def standings(self) -> Dict[str, int]:
        return {player.name: player.balance for player in sorted(self.players, key=lambda p: -p.balance)}
