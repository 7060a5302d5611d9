from __future__ import annotations

from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from .cards import Card, parse_label
from .errors import ActionParseError
from .models import Action, ActionType, Street, TableView

# Terminal shim around the engine: reads actions from a prompt and renders
# views and events. Nothing here changes game state.

USE_UNICODE_CARDS = True


def parse_action(text: str, read_amount: Optional[Callable[[], str]] = None) -> Action:
    """Read ``check``, ``call``, ``fold``, ``raise N`` or ``raise`` (amount on the next prompt)."""
    words = text.strip().lower().split()
    if not words:
        raise ActionParseError("Invalid action: empty input")

    verb, rest = words[0], words[1:]
    if verb in ("check", "call", "fold") and not rest:
        return Action(ActionType(verb.upper()))
    if verb == "raise" and len(rest) <= 1:
        if rest:
            raw_amount = rest[0]
        elif read_amount is not None:
            raw_amount = read_amount().strip()
        else:
            raise ActionParseError("Raise needs an amount")
        return Action.raise_to(_parse_amount(raw_amount))
    raise ActionParseError(f"Invalid action: {text.strip()}")


def _parse_amount(raw: str) -> int:
    try:
        amount = int(raw)
    except ValueError:
        raise ActionParseError(f"Enter a whole number of chips, got {raw!r}") from None
    if amount < 0:
        raise ActionParseError("Raise amount cannot be negative")
    return amount


def format_card(card: Card) -> str:
    return card.pretty if USE_UNICODE_CARDS else card.label


def format_cards(cards: Iterable[Card]) -> str:
    rendered = " ".join(format_card(card) for card in cards)
    return rendered or "--"


def render_table(view: TableView, reveal: Optional[str] = None) -> str:
    """Describe the table; hole cards are shown only for ``reveal`` (or everyone once the hand ended)."""
    if view.street == Street.SHOWDOWN or view.ended:
        header = f"[{view.hand_id}] {view.street.value.replace('_', ' ').title()}"
    else:
        header = f"[{view.hand_id}] {view.street.value.replace('_', ' ').title()}: {view.actor}'s turn"

    lines = [
        header,
        f"Board: {format_cards(view.community)}",
        f"Pot: {view.pot}  Bet to call: {view.current_bet}",
    ]
    for player in view.players:
        if player.folded:
            status = "folded"
        elif not player.active:
            status = "out"
        else:
            status = f"bet {player.bet}"
        marker = ">" if player.seat == view.turn and not view.ended else " "
        show_hole = view.ended or player.name == reveal
        hole = format_cards(player.hole_cards) if show_hole and player.hole_cards else "?? ??"
        lines.append(f"{marker} {player.name:<12} {player.balance:>6}  {status:<10} {hole}")
    return "\n".join(lines)


def render_event(event: Mapping[str, object]) -> str:
    ev = event.get("ev")
    who = event.get("player", "")
    if ev == "CHECK":
        return f"{who} checks"
    if ev == "CALL":
        return f"{who} calls {event['amount']}"
    if ev == "RAISE":
        return f"{who} raises to {event['to']}"
    if ev == "FOLD":
        return f"{who} folds"
    if ev == "SKIP":
        return f"{who} is out of the hand, turn skipped"
    if ev in ("FLOP", "TURN", "RIVER"):
        cards = [parse_label(str(label)) for label in event["cards"]]  # type: ignore[union-attr]
        return f"{str(ev).title()}: {format_cards(cards)}"
    if ev == "SHOWDOWN":
        hole = [parse_label(str(label)) for label in event["hole"]]  # type: ignore[union-attr]
        return f"{who} shows {format_cards(hole)}: {event['hand']}"
    if ev == "POT_AWARD":
        return f"{who} wins {event['amount']}"
    if ev == "POT_REMAINDER":
        return f"{event['amount']} chip(s) left undistributed"
    return str(dict(event))


def render_events(events: Sequence[Mapping[str, object]]) -> List[str]:
    return [render_event(event) for event in events]


class ConsolePlayer:
    """Hot-seat human player reading actions from ``input_func``."""

    def __init__(
        self,
        name: str,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ) -> None:
        self.name = name
        self.input_func = input_func
        self.output_func = output_func

    def request_action(self, view: TableView) -> Action:
        self.output_func(render_table(view, reveal=self.name))
        options = "/".join(action.value.lower() for action in view.legal)
        prompt = f"{self.name}, action [{options}]"
        if view.call_amount:
            prompt += f" (call {view.call_amount})"
        raw = self.input_func(f"{prompt}: ")
        return parse_action(raw, lambda: self.input_func("How much? "))

    def reject(self, view: TableView, message: str) -> None:
        self.output_func(message)
