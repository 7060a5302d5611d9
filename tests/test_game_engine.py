import random

import pytest

from holdem.cards import Card, Rank, Suit
from holdem.game import GameEngine, split_pot
from holdem.models import Action, ActionType, Player, Street, TableConfig

from .helpers import check_down, chips_conserved, create_engine, play_scripted, rigged_deck


def test_new_hand_starts_pre_flop_at_seat_zero():
    engine = create_engine()
    assert engine.street == Street.PRE_FLOP
    assert engine.turn == 0
    assert engine.pot == 0
    assert engine.current_bet == 10
    assert engine.community == []
    assert all(len(player.hole_cards) == 2 for player in engine.players)
    dealt = [card for player in engine.players for card in player.hole_cards]
    assert len(set(dealt)) == 6
    assert len(engine.deck) == 46
    assert not set(dealt) & set(engine.deck)


def test_legal_actions_for_opening_bet():
    engine = create_engine()
    legal, call_amount, min_raise_to, max_raise_to = engine.legal_actions()
    assert legal == [ActionType.FOLD, ActionType.CALL, ActionType.RAISE]
    assert call_amount == 10
    assert min_raise_to == 11
    assert max_raise_to == 500


def test_street_completes_after_each_player_acts_once():
    engine = create_engine()

    play_scripted(engine, [Action.call(), Action.call()])
    assert engine.street == Street.PRE_FLOP
    assert engine.turn == 2

    play_scripted(engine, [Action.call()])
    assert engine.street == Street.FLOP
    assert engine.turn == 0
    assert engine.pot == 30
    assert engine.current_bet == 0
    assert len(engine.community) == 3
    assert all(player.bet == 0 for player in engine.players)

    play_scripted(engine, [Action.check()] * 3)
    assert engine.street == Street.TURN
    assert len(engine.community) == 4

    play_scripted(engine, [Action.check()] * 3)
    assert engine.street == Street.RIVER
    assert len(engine.community) == 5

    events = play_scripted(engine, [Action.check()] * 3)
    assert engine.street == Street.SHOWDOWN
    assert engine.is_hand_complete()
    assert any(ev["ev"] == "SHOWDOWN" for ev in events)
    assert sum(player.balance for player in engine.players) + engine.pot == 1500


def test_raise_makes_everyone_else_act_again():
    engine = create_engine()
    events = play_scripted(engine, [Action.call(), Action.raise_to(30), Action.call()])
    assert any(ev["ev"] == "RAISE" and ev["to"] == 30 and ev["amount"] == 30 for ev in events)
    assert engine.last_raise_seat == 1
    assert engine.street == Street.PRE_FLOP
    assert engine.turn == 0

    play_scripted(engine, [Action.call()])
    assert engine.street == Street.FLOP
    assert engine.pot == 90
    assert engine.last_raise_seat is None
    assert [player.balance for player in engine.players] == [470, 470, 470]


def test_reraise_moves_the_marker():
    engine = create_engine()
    play_scripted(engine, [Action.raise_to(20), Action.raise_to(40), Action.call()])
    assert engine.last_raise_seat == 1
    play_scripted(engine, [Action.call()])
    assert engine.street == Street.FLOP
    assert engine.pot == 120


def test_check_rejected_when_facing_bet():
    engine = create_engine()
    with pytest.raises(ValueError, match="Cannot check"):
        engine.apply_action(Action.check())
    assert engine.turn == 0


def test_raise_must_exceed_current_bet():
    engine = create_engine()
    with pytest.raises(ValueError, match="must exceed"):
        engine.apply_action(Action.raise_to(10))
    with pytest.raises(ValueError, match="non-negative"):
        engine.apply_action(Action(ActionType.RAISE, None))


def test_raise_beyond_balance_leaves_state_untouched():
    engine = create_engine(balances=(50, 500, 500))
    with pytest.raises(ValueError, match="Not enough chips"):
        engine.apply_action(Action.raise_to(60))
    player = engine.players[0]
    assert player.balance == 50
    assert player.bet == 0
    assert engine.pot == 0
    assert engine.current_bet == 10
    assert engine.turn == 0
    assert engine.last_raise_seat is None


def test_call_beyond_balance_rejected():
    engine = create_engine(balances=(500, 500, 500))
    play_scripted(engine, [Action.raise_to(400)])
    engine.players[1].balance = 100
    with pytest.raises(ValueError, match="Not enough chips to call"):
        engine.apply_action(Action.call())
    assert engine.pot == 400


def test_all_in_raise_is_allowed():
    engine = create_engine(balances=(50, 500, 500))
    play_scripted(engine, [Action.raise_to(50)])
    assert engine.players[0].balance == 0
    assert engine.current_bet == 50


def test_two_folds_end_the_hand_immediately():
    engine = create_engine()
    play_scripted(engine, [Action.call()] * 3)
    assert engine.street == Street.FLOP

    events = play_scripted(engine, [Action.check(), Action.fold()])
    assert not engine.is_hand_complete()

    events = play_scripted(engine, [Action.fold()])
    assert engine.is_hand_complete()
    assert engine.street == Street.FLOP
    assert engine.winners == ["Player0"]
    assert events[-1] == {"ev": "POT_AWARD", "seat": 0, "player": "Player0", "amount": 30}
    assert [player.balance for player in engine.players] == [520, 490, 490]
    assert engine.pot == 0


def test_fold_of_the_closing_seat_still_closes_the_street():
    engine = create_engine(balances=(500, 500, 500, 500))
    play_scripted(engine, [Action.fold(), Action.call(), Action.call(), Action.call()])
    # seat 0 folded but stays the marker until the street ends
    assert engine.street == Street.FLOP
    assert engine.players[0].folded
    assert not engine.players[0].active
    assert engine.turn == 1


def test_folded_players_are_skipped_on_later_streets():
    engine = create_engine()
    play_scripted(engine, [Action.call(), Action.fold(), Action.call()])
    assert engine.street == Street.FLOP

    events = play_scripted(engine, [Action.check(), Action.check()])
    assert [ev["ev"] for ev in events[:3]] == ["CHECK", "SKIP", "CHECK"]
    assert engine.street == Street.TURN


def test_underfunded_player_sits_out_and_is_skipped():
    engine = create_engine(balances=(5, 500, 500))
    poor = engine.players[0]
    assert not poor.active
    assert poor.hole_cards == []
    assert not engine.looped

    events = engine.skip_turn()
    assert events[0]["ev"] == "SKIP"
    assert engine.turn == 1
    assert engine.looped

    play_scripted(engine, [Action.call(), Action.call()])
    assert engine.street == Street.PRE_FLOP
    engine.skip_turn()
    assert engine.street == Street.FLOP
    assert engine.turn == 1
    assert poor.balance == 5


def test_chips_are_conserved_through_every_action():
    engine = create_engine(balances=(300, 200, 100, 400), seed=8)
    script = [
        Action.raise_to(25),
        Action.call(),
        Action.raise_to(60),
        Action.fold(),
        Action.call(),
        Action.call(),
    ]
    for action in script:
        play_scripted(engine, [action])
        assert chips_conserved(engine)
        assert engine.pot == sum(player.total_in_pot for player in engine.players)


def test_showdown_splits_pot_and_keeps_remainder(monkeypatch):
    deck = rigged_deck(["Ah", "Ad", "2c", "3c", "4c", "2d", "Ts", "Js", "Qd", "Kc", "2h"])
    monkeypatch.setattr("holdem.game.build_deck", lambda rng=None: list(deck))
    engine = create_engine(names=["Alice", "Bob", "Carol"])

    play_scripted(engine, [Action.raise_to(11), Action.call(), Action.call()])
    assert engine.street == Street.FLOP
    events = check_down(engine)

    assert engine.street == Street.SHOWDOWN
    assert engine.winners == ["Alice", "Bob"]
    shown = {ev["player"]: ev["rank"] for ev in events if ev["ev"] == "SHOWDOWN"}
    assert shown == {"Alice": "straight", "Bob": "straight", "Carol": "three_of_a_kind"}
    awards = [ev for ev in events if ev["ev"] == "POT_AWARD"]
    assert [award["amount"] for award in awards] == [16, 16]
    assert {"ev": "POT_REMAINDER", "amount": 1} in events
    assert engine.pot == 1
    assert [player.balance for player in engine.players] == [505, 505, 489]


def test_showdown_single_winner_takes_pot(monkeypatch):
    deck = rigged_deck(["As", "7d", "Ac", "2h", "Ad", "9c", "Kh", "Qs", "4c"])
    monkeypatch.setattr("holdem.game.build_deck", lambda rng=None: list(deck))
    engine = create_engine(balances=(500, 500))
    check_down(engine)
    assert engine.winners == ["Player0"]
    assert [player.balance for player in engine.players] == [510, 490]


def test_split_pot_rounds_down():
    assert split_pot(33, 2) == (16, 1)
    assert split_pot(30, 3) == (10, 0)
    with pytest.raises(ValueError, match="at least one winner"):
        split_pot(10, 0)


def test_first_hand_shuffles_seats_with_injected_rng():
    names = ["A", "B", "C", "D", "E"]
    engine = create_engine(balances=[500] * 5, names=names, seed=3, first_hand=True)
    expected = list(names)
    random.Random(3).shuffle(expected)
    assert [player.name for player in engine.players] == expected

    kept = create_engine(balances=[500] * 5, names=names, seed=3, first_hand=False)
    assert [player.name for player in kept.players] == names


def test_view_exposes_read_only_table_state():
    engine = create_engine(names=["Alice", "Bob", "Carol"])
    play_scripted(engine, [Action.call()])
    view = engine.view()
    assert view.street == Street.PRE_FLOP
    assert view.actor == "Bob"
    assert view.pot == 10
    assert view.current_bet == 10
    assert view.to_call == 10
    assert view.call_amount == 10
    assert view.legal == (ActionType.FOLD, ActionType.CALL, ActionType.RAISE)
    assert view.player("Alice").balance == 490
    assert len(view.player("Carol").hole_cards) == 2
    with pytest.raises(AttributeError):
        view.pot = 0  # type: ignore[misc]


def test_construction_validates_players():
    with pytest.raises(ValueError, match="unique"):
        GameEngine([Player("A", 100), Player("A", 100)], TableConfig())
    with pytest.raises(ValueError, match="At most 23"):
        GameEngine([Player(f"P{idx}", 100) for idx in range(24)], TableConfig())
    with pytest.raises(RuntimeError, match="Not enough active players"):
        GameEngine([Player("A", 100), Player("B", 9)], TableConfig(min_bet=5))


def test_failed_construction_leaves_players_untouched():
    sentinel = Card(Rank.ACE, Suit.SPADES)
    funded = Player("A", 100, hole_cards=[sentinel], bet=7)
    short = Player("B", 9)
    with pytest.raises(RuntimeError, match="Not enough active players"):
        GameEngine([funded, short], TableConfig(min_bet=5))
    assert funded.hole_cards == [sentinel]
    assert funded.bet == 7
    assert short.active
