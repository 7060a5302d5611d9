from __future__ import annotations

import logging
import random
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .cards import Card, build_deck, cards_to_labels, deal
from .errors import InputRejected, InsufficientFunds, InvariantViolation
from .evaluator import Hand, best_hands, describe_rank, evaluate_best
from .models import (
    BOARD_SIZE,
    HOLE_SIZE,
    STREET_DEALS,
    Action,
    ActionType,
    Player,
    PlayerView,
    Street,
    TableConfig,
    TableView,
)

LOGGER = logging.getLogger("holdem_engine")

# GameEngine owns a single hand: deck, players, pot and betting order. It never
# reads input or prints; callers feed it actions and render the events it returns.

Event = Dict[str, object]
ActionProvider = Callable[[TableView], Action]
RejectHandler = Callable[[TableView, str], None]

MAX_PLAYERS = (52 - BOARD_SIZE) // HOLE_SIZE


def split_pot(pot: int, winners: int) -> Tuple[int, int]:
    """Return the share each winner receives and the chips left undistributed."""
    if winners <= 0:
        raise ValueError("Pot needs at least one winner")
    return divmod(pot, winners)


class GameEngine:
    """Texas Hold'em hand for one table, from the deal to the payout."""

    def __init__(
        self,
        players: Sequence[Player],
        config: TableConfig,
        *,
        first_hand: bool = False,
        rng: Optional[random.Random] = None,
        hand_id: Optional[str] = None,
    ) -> None:
        names = [player.name for player in players]
        if len(set(names)) != len(names):
            raise ValueError("Player names must be unique")
        if len(players) > MAX_PLAYERS:
            raise ValueError(f"At most {MAX_PLAYERS} players fit one deck")

        if sum(1 for player in players if player.balance >= config.opening_bet) < 2:
            raise RuntimeError("Not enough active players to start a hand")

        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.players: List[Player] = list(players)
        if first_hand:
            self.rng.shuffle(self.players)

        for player in self.players:
            player.reset_for_hand()
            player.active = player.balance >= config.opening_bet

        self.hand_id = hand_id or f"H-{time.strftime('%Y%m%d')}-00000"
        self.starting_balances: Dict[str, int] = {player.name: player.balance for player in self.players}
        self.deck: List[Card] = build_deck(self.rng)
        self.community: List[Card] = []
        self.street = Street.PRE_FLOP
        self.turn = 0
        self.pot = 0
        self.current_bet = config.opening_bet
        self.last_raise_seat: Optional[int] = None
        self.looped = self.turn == self._closing_seat()
        self.ended = False
        self.winners: List[str] = []

        self._deal_hole_cards()
        LOGGER.debug("Hand %s dealt to %s", self.hand_id, ", ".join(player.name for player in self.players))

    def _deal_hole_cards(self) -> None:
        seated = [player for player in self.players if player.active]
        for _ in range(HOLE_SIZE):
            for player in seated:
                player.hole_cards.extend(deal(self.deck, 1))

    # Accessors -------------------------------------------------------

    @property
    def current_player(self) -> Player:
        return self.players[self.turn]

    def remaining_players(self) -> List[Player]:
        return [player for player in self.players if player.in_hand]

    def is_hand_complete(self) -> bool:
        return self.ended

    def legal_actions(self) -> Tuple[List[ActionType], Optional[int], Optional[int], Optional[int]]:
        if self.ended:
            raise RuntimeError("Hand not active")
        player = self.current_player
        if not player.in_hand:
            raise RuntimeError("Seat not active")

        legal: List[ActionType] = [ActionType.FOLD]
        call_amount = None
        to_call = self.current_bet - player.bet
        if to_call <= 0:
            legal.append(ActionType.CHECK)
        elif to_call <= player.balance:
            legal.append(ActionType.CALL)
            call_amount = to_call

        min_raise_to = None
        max_raise_to = None
        if player.balance + player.bet > self.current_bet:
            min_raise_to = self.current_bet + 1
            max_raise_to = player.balance + player.bet
            legal.append(ActionType.RAISE)

        return legal, call_amount, min_raise_to, max_raise_to

    def view(self) -> TableView:
        actor = self.current_player
        legal: Sequence[ActionType] = ()
        call_amount = min_raise_to = max_raise_to = None
        if not self.ended and actor.in_hand:
            legal, call_amount, min_raise_to, max_raise_to = self.legal_actions()

        return TableView(
            hand_id=self.hand_id,
            street=self.street,
            turn=self.turn,
            actor=actor.name,
            community=tuple(self.community),
            pot=self.pot,
            current_bet=self.current_bet,
            to_call=max(self.current_bet - actor.bet, 0),
            players=tuple(
                PlayerView(
                    seat=idx,
                    name=player.name,
                    balance=player.balance,
                    bet=player.bet,
                    active=player.active,
                    folded=player.folded,
                    hole_cards=tuple(player.hole_cards),
                )
                for idx, player in enumerate(self.players)
            ),
            ended=self.ended,
            legal=tuple(legal),
            call_amount=call_amount,
            min_raise_to=min_raise_to,
            max_raise_to=max_raise_to,
        )

    # Turn handling ---------------------------------------------------

    def play_turn(self, request_action: ActionProvider, on_reject: Optional[RejectHandler] = None) -> List[Event]:
        """Run the current turn.

        A seat that cannot act is skipped. Otherwise ``request_action`` is asked
        until it returns an action the table accepts; every rejection is passed to
        ``on_reject`` and leaves the hand untouched.
        """
        if self.ended:
            raise RuntimeError("Hand not active")
        if not self.current_player.in_hand:
            return self.skip_turn()

        while True:
            view = self.view()
            try:
                return self.apply_action(request_action(view))
            except InputRejected as exc:
                LOGGER.info("Rejected action from %s: %s", view.actor, exc)
                if on_reject is not None:
                    on_reject(view, str(exc))

    def skip_turn(self) -> List[Event]:
        if self.ended:
            raise RuntimeError("Hand not active")
        if self.current_player.in_hand:
            raise RuntimeError("Seat must act")
        events = [self._event("SKIP", self.turn)]
        events.extend(self._advance())
        return events

    def apply_action(self, action: Action) -> List[Event]:
        if self.ended:
            raise RuntimeError("Hand not active")
        seat_idx = self.turn
        player = self.players[seat_idx]
        if not player.in_hand:
            raise RuntimeError("Seat not active")

        events: List[Event] = []

        # Every check happens before any chips move, so a rejection leaves no trace.
        if action.type == ActionType.CHECK:
            if player.bet < self.current_bet:
                raise InputRejected(f"Cannot check when facing a bet of {self.current_bet}")
            events.append(self._event("CHECK", seat_idx))
        elif action.type == ActionType.CALL:
            difference = self.current_bet - player.bet
            if difference > player.balance:
                raise InsufficientFunds(f"Not enough chips to call {difference}: {player.balance} remaining")
            self._commit_chips(player, difference)
            events.append(self._event("CALL", seat_idx, amount=difference))
        elif action.type == ActionType.RAISE:
            amount = action.amount
            if amount is None or amount < 0:
                raise InputRejected("Raise requires a non-negative amount")
            if amount <= self.current_bet:
                raise InputRejected(f"Raise must exceed the current bet of {self.current_bet}")
            difference = amount - player.bet
            if difference > player.balance:
                raise InsufficientFunds(f"Not enough chips to raise to {amount}: {player.balance} remaining")
            self._commit_chips(player, difference)
            self.current_bet = amount
            self.last_raise_seat = seat_idx
            # The raiser's own turn is the first pass over the new marker.
            self.looped = True
            events.append(self._event("RAISE", seat_idx, amount=difference, to=amount))
        elif action.type == ActionType.FOLD:
            player.folded = True
            events.append(self._event("FOLD", seat_idx))
        else:
            raise InputRejected(f"Unsupported action {action.type}")

        events.extend(self._advance())
        return events

    def _commit_chips(self, player: Player, amount: int) -> None:
        player.balance -= amount
        player.bet += amount
        player.total_in_pot += amount
        self.pot += amount

    def _event(self, ev: str, seat_idx: int, **extra: object) -> Event:
        event: Event = {"ev": ev, "seat": seat_idx, "player": self.players[seat_idx].name}
        event.update(extra)
        return event

    # Betting order ---------------------------------------------------

    def _closing_seat(self) -> int:
        if self.last_raise_seat is not None:
            return self.last_raise_seat
        # Without a raise the street closes back on the first active seat. Seats
        # that folded this street stay active until the street ends.
        closing: Optional[int] = None
        for seat_idx in range(len(self.players) - 1, -1, -1):
            if self.players[seat_idx].active:
                closing = seat_idx
        if closing is None:
            raise InvariantViolation("No active players left")
        return closing

    def _advance(self) -> List[Event]:
        if len(self.remaining_players()) == 1:
            return self._award_uncontested()

        self.turn = (self.turn + 1) % len(self.players)
        if self.turn != self._closing_seat():
            return []
        if not self.looped:
            self.looped = True
            return []
        return self._advance_street()

    def _advance_street(self) -> List[Event]:
        for player in self.players:
            player.reset_for_round()
            if player.folded:
                player.active = False
        self.current_bet = 0
        self.last_raise_seat = None
        self.street = self.street.next()
        LOGGER.debug("Hand %s moves to %s (pot %s)", self.hand_id, self.street.value, self.pot)

        if self.street == Street.SHOWDOWN:
            return self._resolve_showdown()
        if len(self.remaining_players()) == 1:
            return self._award_uncontested()

        cards = deal(self.deck, STREET_DEALS[self.street])
        self.community.extend(cards)
        self.turn = self._closing_seat()
        self.looped = True
        return [{"ev": self.street.value, "cards": cards_to_labels(cards)}]

    # Payout ----------------------------------------------------------

    def _award_uncontested(self) -> List[Event]:
        seat_idx = next(idx for idx, player in enumerate(self.players) if player.in_hand)
        winner = self.players[seat_idx]
        amount = self.pot
        winner.balance += amount
        self.pot = 0
        self.winners = [winner.name]
        self._finish()
        return [self._event("POT_AWARD", seat_idx, amount=amount)]

    def _resolve_showdown(self) -> List[Event]:
        events: List[Event] = []
        board = list(self.community)

        hands: Dict[int, Hand] = {}
        for seat_idx, player in enumerate(self.players):
            if not player.in_hand:
                continue
            hand = evaluate_best(player.hole_cards + board)
            hands[seat_idx] = hand
            events.append(
                self._event(
                    "SHOWDOWN",
                    seat_idx,
                    hole=cards_to_labels(player.hole_cards),
                    board=cards_to_labels(board),
                    rank=describe_rank(hand),
                    hand=str(hand),
                )
            )

        winners = best_hands(hands)
        if not winners:
            raise InvariantViolation("No players left at showdown")

        share, remainder = split_pot(self.pot, len(winners))
        for seat_idx in winners:
            self.players[seat_idx].balance += share
            events.append(self._event("POT_AWARD", seat_idx, amount=share))
        if remainder:
            # Known limitation: odd chips from a split stay on the table.
            events.append({"ev": "POT_REMAINDER", "amount": remainder})

        self.pot = remainder
        self.winners = [self.players[seat_idx].name for seat_idx in winners]
        self._finish()
        return events

    def _finish(self) -> None:
        self.ended = True
        LOGGER.info(
            "Hand %s finished on %s, winners: %s",
            self.hand_id,
            self.street.value,
            ", ".join(self.winners),
        )
