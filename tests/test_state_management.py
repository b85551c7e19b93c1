from holdem.game import GameEngine
from holdem.models import PlayerAction, Stage, TableConfig

from .helpers import auto_complete_hand, create_engine, start_hand


def test_abandoned_hand_refunds_committed_chips():
    engine = create_engine(players=3, starting_stack=200, small_blind=5, big_blind=10)
    start_hand(engine, seed=11)
    engine.apply_action("p0", PlayerAction.raise_by(30))
    engine.abandon_hand()

    assert engine.state is None
    assert engine.stacks() == {"p0": 200, "p1": 200, "p2": 200}
    state = start_hand(engine, seed=12)
    assert state.hand_number == 2
    for player in state.players:
        assert len(player.hole_cards) == 2


def test_button_rotates_between_hands():
    engine = create_engine(players=3)
    buttons = []
    for seed in range(3):
        state = start_hand(engine, seed=seed)
        buttons.append(state.players[state.dealer_index].id)
        auto_complete_hand(engine)
    assert buttons == ["p0", "p1", "p2"]


def test_button_rotation_skips_eliminated_players():
    engine = GameEngine(TableConfig(small_blind=5, big_blind=10))
    engine.seat_player("p0", "A", stack=200)
    engine.seat_player("p1", "B", stack=0)
    engine.seat_player("p2", "C", stack=200)
    state = start_hand(engine, seed=21)
    assert state.dealer_index == 0
    auto_complete_hand(engine)
    state = start_hand(engine, seed=22)
    assert state.dealer_index == 2


def test_stacks_carry_over_between_hands():
    engine = create_engine(players=2)
    start_hand(engine, seed=5)
    engine.apply_action("p1", PlayerAction.fold())
    assert engine.stacks() == {"p0": 1010, "p1": 990}

    state = start_hand(engine, seed=6)
    assert state.dealer_index == 1
    assert state.get_player("p0").stack + state.get_player("p0").current_bet == 1010


def test_match_over_when_one_stack_remains():
    engine = create_engine(players=2, starting_stack=100)
    start_hand(engine, seed=5)
    engine.apply_action("p1", PlayerAction.all_in())
    engine.apply_action("p0", PlayerAction.call())
    state = engine.state
    assert state.stage == Stage.SHOWDOWN
    if len(state.hand_over.winners) == 1:
        assert engine.is_match_over()
        assert not engine.can_start_hand()
        result = engine.match_result_payload()
        assert result["winner"]["id"] == state.hand_over.winners[0].player_id
    else:
        assert engine.stacks() == {"p0": 100, "p1": 100}
        assert engine.can_start_hand()


def test_commit_never_drops_stack_below_zero():
    engine = GameEngine(TableConfig(small_blind=5, big_blind=10))
    engine.seat_player("p0", "Short", stack=15)
    engine.seat_player("p1", "Deep", stack=120)
    start_hand(engine, seed=33)
    actor = engine.next_actor()
    window = engine.action_window(actor)
    engine.apply_action(actor, PlayerAction.raise_by(window.max_amount))
    state = engine.state
    for player in state.players:
        assert player.stack >= 0
    assert state.total_chips == 135


def test_state_serializes_for_clients():
    engine = create_engine(players=2)
    state = start_hand(engine)
    payload = state.to_dict()
    assert payload["stage"] == "PRE_FLOP"
    assert payload["total_pot"] == 30
    assert payload["current_player_id"] == "p1"
    assert payload["players"][1]["last_action"] is None
    assert payload["hand_over"] is None
