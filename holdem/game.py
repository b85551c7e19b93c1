from __future__ import annotations

import copy
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Set, Union

from . import betting
from .cards import draw, new_shuffled_deck
from .errors import TableError
from .evaluator import HandValue, evaluate_best
from .models import (
    ActionKind,
    GameState,
    HandResult,
    Player,
    PlayerAction,
    PlayerSeed,
    PotAward,
    SeatActionWindow,
    Stage,
    TableConfig,
    WinnerEntry,
)
from .pots import award_pots, build_pots

# Hand orchestration: dealing, street changes and settlement on top of the
# betting rules. The public functions never mutate their input; they return
# a fresh GameState. GameEngine below is the stateful wrapper for hosts.

SeatLike = Union[PlayerSeed, Player]

STREET_CARDS = {
    Stage.PRE_FLOP: (Stage.FLOP, 3),
    Stage.FLOP: (Stage.TURN, 1),
    Stage.TURN: (Stage.RIVER, 1),
}


def _as_seed(seat: SeatLike) -> PlayerSeed:
    return seat.to_seed() if isinstance(seat, Player) else seat


def _check_roster(seeds: Sequence[PlayerSeed], config: TableConfig) -> None:
    if len(seeds) > config.max_players:
        raise TableError(f"Table seats at most {config.max_players} players")
    ids = [seed.id for seed in seeds]
    if len(set(ids)) != len(ids):
        raise TableError("Player ids must be unique")


def new_table(seeds: Sequence[PlayerSeed], config: TableConfig) -> GameState:
    """A table before its first hand (stage PRE_DEAL, no button yet)."""
    _check_roster(seeds, config)
    return GameState(
        config=config,
        players=[Player.from_seed(seed) for seed in seeds],
        min_raise=config.big_blind,
        game_message="Waiting for the first hand.",
    )


def start_hand(
    players: Sequence[SeatLike],
    dealer_index: int,
    config: TableConfig,
    seed: Optional[int] = None,
    hand_number: int = 1,
) -> GameState:
    """Deal a new hand.

    ``dealer_index`` is the previous button (-1 before the first hand); the
    button moves to the next seat with chips. Seats with an empty stack sit
    the hand out.
    """
    seeds = [_as_seed(seat) for seat in players]
    _check_roster(seeds, config)
    seats = [Player.from_seed(seed) for seed in seeds]
    if len([player for player in seats if player.stack > 0]) < 2:
        raise TableError("Not enough players with chips to start a hand")

    for player in seats:
        player.reset_for_hand()
        if player.stack == 0:
            player.is_folded = True

    state = GameState(
        config=config,
        players=seats,
        deck=new_shuffled_deck(seed),
        stage=Stage.PRE_FLOP,
        min_raise=config.big_blind,
        hand_number=hand_number,
    )
    state.dealer_index = betting.next_seat_in_hand(state, dealer_index + 1)

    _deal_hole_cards(state)
    betting.post_blinds(state)
    assert state.big_blind_index is not None
    _open_betting(state, start=state.big_blind_index + 1)
    if state.current_player is not None:
        state.game_message = f"Blinds posted. {state.current_player.name}'s turn."
    return state


def next_hand(state: GameState, seed: Optional[int] = None) -> GameState:
    """Start the following hand with the same seats and carried-over stacks."""
    if state.is_hand_in_progress:
        raise TableError("Hand still in progress")
    return start_hand(state.players, state.dealer_index, state.config, seed, hand_number=state.hand_number + 1)


def apply_action(state: GameState, player_id: str, action: PlayerAction) -> GameState:
    """Return the state after ``action``; raises IllegalActionError and leaves
    ``state`` as it was when the action is rejected."""
    next_state = copy.deepcopy(state)
    idx = betting.apply_action(next_state, player_id, action)
    _after_action(next_state, idx)
    return next_state


def get_valid_actions(state: GameState, player_id: str) -> Set[ActionKind]:
    return betting.valid_actions(state, player_id)


def action_window(state: GameState, player_id: str) -> SeatActionWindow:
    return betting.action_window(state, player_id)


def get_public_view(state: GameState, viewer_id: str) -> GameState:
    """Copy of ``state`` safe to show ``viewer_id``: the deck is removed and,
    until the hand is over, so are other players' hole cards."""
    view = copy.deepcopy(state)
    view.deck = []
    if state.hand_over is not None:
        return view
    for player in view.players:
        if player.id != viewer_id:
            player.hole_cards = []
    return view


def settle(state: GameState) -> HandResult:
    """Showdown in place: evaluate live hands, pay every pot, return the result."""
    betting.collect_bets(state)
    state.stage = Stage.SHOWDOWN
    order = _seat_order_from(state, state.dealer_index + 1)
    contenders = [player for player in state.players if not player.is_folded]
    hands: Dict[str, HandValue] = {
        player.id: evaluate_best(player.hole_cards + state.community_cards) for player in contenders
    }
    pots = build_pots(
        {player.id: player.total_committed for player in state.players},
        folded={player.id for player in state.players if player.is_folded},
        order=order,
    )
    payouts = award_pots(pots, hands, order)

    winners: List[WinnerEntry] = []
    for player_id in order:
        amount = payouts.get(player_id)
        if not amount:
            continue
        player = state.get_player(player_id)
        assert player is not None
        player.stack += amount
        hand = hands.get(player_id)
        winners.append(
            WinnerEntry(
                player_id=player_id,
                name=player.name,
                amount=amount,
                hand_name=hand.name if hand else None,
                hand_rank=hand.rank if hand else None,
                cards=list(hand.cards) if hand else [],
            )
        )
    result = HandResult(winners=winners, pot=state.pot, pots=pots, showdown=hands)
    state.pot = 0
    return result


def _seat_order_from(state: GameState, start: int) -> List[str]:
    count = len(state.players)
    return [state.players[(start + offset) % count].id for offset in range(count)]


def _deal_hole_cards(state: GameState) -> None:
    count = len(state.players)
    for _ in range(2):
        for offset in range(count):
            player = state.players[(state.dealer_index + 1 + offset) % count]
            if player.is_folded:
                continue
            cards, state.deck = draw(state.deck, 1)
            player.hole_cards.extend(cards)


def _open_betting(state: GameState, start: int) -> None:
    actionable = [player for player in state.players if player.can_act]
    if not actionable or (len(actionable) == 1 and actionable[0].current_bet >= state.current_bet):
        # Nobody left to bet against: run the board out.
        _close_round(state)
        return
    state.current_player_index = betting.next_to_act(state, start)


def _after_action(state: GameState, idx: int) -> None:
    live = [seat for seat, player in enumerate(state.players) if not player.is_folded]
    if len(live) == 1:
        _award_uncontested(state, live[0])
        return
    if betting.is_round_complete(state):
        _close_round(state)
        return
    state.current_player_index = betting.next_to_act(state, idx + 1)
    if state.current_player is not None:
        state.game_message = f"{state.current_player.name}'s turn."


def _close_round(state: GameState) -> None:
    betting.collect_bets(state)
    while state.stage in STREET_CARDS:
        next_stage, count = STREET_CARDS[state.stage]
        cards, state.deck = draw(state.deck, count)
        state.community_cards.extend(cards)
        state.stage = next_stage
        if len([player for player in state.players if player.can_act]) >= 2:
            state.current_player_index = betting.next_to_act(state, state.dealer_index + 1)
            assert state.current_player is not None
            street = next_stage.value.replace("_", " ").title()
            state.game_message = f"{street}. {state.current_player.name}'s turn."
            return
    _finish(state, settle(state))


def _award_uncontested(state: GameState, winner_idx: int) -> None:
    betting.collect_bets(state)
    winner = state.players[winner_idx]
    amount = state.pot
    winner.stack += amount
    state.pot = 0
    result = HandResult(
        winners=[WinnerEntry(player_id=winner.id, name=winner.name, amount=amount)],
        pot=amount,
        pots=[PotAward(amount=amount, eligible=[winner.id], winners=[winner.id])],
    )
    _finish(state, result)


def _finish(state: GameState, result: HandResult) -> None:
    state.hand_over = result
    state.stage = Stage.SHOWDOWN
    state.current_player_index = None
    state.current_bet = 0
    parts = []
    for entry in result.winners:
        hand = f" with {entry.hand_name}" if entry.hand_name else ""
        parts.append(f"{entry.name} wins {entry.amount}{hand}")
    state.game_message = "; ".join(parts) + "."


class GameEngine:
    """Stateful single-table host over the pure hand functions."""

    def __init__(self, config: TableConfig) -> None:
        self.config = config
        self.roster: List[PlayerSeed] = []
        self.state: Optional[GameState] = None
        self.dealer_index = -1
        self.hand_counter = 0

    # Seat management -------------------------------------------------

    def seat_player(self, player_id: str, name: str, is_human: bool = False, stack: Optional[int] = None) -> PlayerSeed:
        if any(seed.id == player_id for seed in self.roster):
            raise TableError(f"Player {player_id} is already seated")
        if len(self.roster) >= self.config.max_players:
            raise TableError("Table is full")
        seed = PlayerSeed(
            id=player_id,
            name=name,
            is_human=is_human,
            stack=self.config.starting_stack if stack is None else stack,
        )
        self.roster.append(seed)
        return seed

    def stacks(self) -> Dict[str, int]:
        self._sync_roster()
        return {seed.id: seed.stack for seed in self.roster}

    def _sync_roster(self) -> None:
        if self.state is None or self.state.is_hand_in_progress:
            return
        current = {player.id: player.stack for player in self.state.players}
        self.roster = [replace(seed, stack=current.get(seed.id, seed.stack)) for seed in self.roster]

    # Hand lifecycle --------------------------------------------------

    def can_start_hand(self) -> bool:
        if self.state is not None and self.state.is_hand_in_progress:
            return False
        return len([stack for stack in self.stacks().values() if stack > 0]) >= 2

    def start_hand(self, seed: Optional[int] = None) -> GameState:
        if self.state is not None and self.state.is_hand_in_progress:
            raise TableError("Hand already in progress")
        self._sync_roster()
        state = start_hand(self.roster, self.dealer_index, self.config, seed, hand_number=self.hand_counter + 1)
        self.hand_counter += 1
        self.dealer_index = state.dealer_index
        self.state = state
        return state

    def abandon_hand(self) -> None:
        """Drop the current hand and hand every committed chip back."""
        if self.state is None or not self.state.is_hand_in_progress:
            return
        refunds = {player.id: player.stack + player.total_committed for player in self.state.players}
        self.roster = [replace(seed, stack=refunds.get(seed.id, seed.stack)) for seed in self.roster]
        self.state = None

    def apply_action(self, player_id: str, action: PlayerAction) -> GameState:
        state = self._require_state()
        self.state = apply_action(state, player_id, action)
        return self.state

    def _require_state(self) -> GameState:
        if self.state is None:
            raise TableError("Hand not active")
        return self.state

    # Queries ---------------------------------------------------------

    def next_actor(self) -> Optional[str]:
        if self.state is None or self.state.current_player is None:
            return None
        return self.state.current_player.id

    def valid_actions(self, player_id: str) -> Set[ActionKind]:
        return get_valid_actions(self._require_state(), player_id)

    def action_window(self, player_id: str) -> SeatActionWindow:
        return action_window(self._require_state(), player_id)

    def public_view(self, viewer_id: str) -> GameState:
        return get_public_view(self._require_state(), viewer_id)

    def is_hand_complete(self) -> bool:
        return bool(self.state and self.state.hand_over is not None)

    def is_match_over(self) -> bool:
        return len([stack for stack in self.stacks().values() if stack > 0]) <= 1

    # Payloads --------------------------------------------------------

    def snapshot_payload(self, viewer_id: str) -> Dict[str, object]:
        return snapshot_payload(self._require_state(), viewer_id)

    def act_payload(self, player_id: str) -> Dict[str, object]:
        return act_payload(self._require_state(), player_id)

    def match_result_payload(self) -> Dict[str, object]:
        stacks = self.stacks()
        funded = [seed for seed in self.roster if stacks[seed.id] > 0]
        winner = funded[0] if len(funded) == 1 else None
        return {
            "winner": {"id": winner.id, "name": winner.name} if winner else None,
            "final_stacks": [
                {"id": seed.id, "name": seed.name, "stack": stacks[seed.id]} for seed in self.roster
            ],
        }


def snapshot_payload(state: GameState, viewer_id: str) -> Dict[str, object]:
    return {"you": viewer_id, "view": get_public_view(state, viewer_id).to_dict()}


def act_payload(state: GameState, player_id: str) -> Dict[str, object]:
    window = action_window(state, player_id)
    payload = snapshot_payload(state, player_id)
    payload.update(
        {
            "hand_number": state.hand_number,
            "legal": [kind.value for kind in window.legal],
            "call_amount": window.call_amount,
            "min_amount": window.min_amount,
            "max_amount": window.max_amount,
        }
    )
    return payload
