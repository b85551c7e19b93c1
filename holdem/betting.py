from __future__ import annotations

from typing import Optional, Set

from .errors import IllegalActionError, TableError
from .models import ActionKind, GameState, Player, PlayerAction, SeatActionWindow

# Betting rules for one street. Everything here mutates the GameState it is
# handed; callers that must keep theirs unchanged pass a copy.


def next_to_act(state: GameState, start: int) -> Optional[int]:
    """First seat at or after ``start`` (clockwise) that can still act."""
    count = len(state.players)
    for offset in range(count):
        idx = (start + offset) % count
        if state.players[idx].can_act:
            return idx
    return None


def next_seat_in_hand(state: GameState, start: int) -> int:
    count = len(state.players)
    for offset in range(count):
        idx = (start + offset) % count
        if not state.players[idx].is_folded:
            return idx
    raise TableError("No seated player is in the hand")


def amount_to_call(state: GameState, player: Player) -> int:
    return max(state.current_bet - player.current_bet, 0)


def commit_chips(player: Player, amount: int) -> int:
    amount = min(amount, player.stack)
    player.stack -= amount
    player.current_bet += amount
    player.total_committed += amount
    if player.stack == 0:
        player.is_all_in = True
    return amount


def post_blinds(state: GameState) -> None:
    config = state.config
    in_hand = [idx for idx, player in enumerate(state.players) if not player.is_folded]
    if len(in_hand) < 2:
        raise TableError("Not enough active seats for blinds")

    if len(in_hand) == 2 and config.heads_up_button_posts_small_blind:
        sb_idx = state.dealer_index
    else:
        sb_idx = next_seat_in_hand(state, state.dealer_index + 1)
    bb_idx = next_seat_in_hand(state, sb_idx + 1)
    sb_player = state.players[sb_idx]
    bb_player = state.players[bb_idx]

    commit_chips(sb_player, config.small_blind)
    commit_chips(bb_player, config.big_blind)

    state.small_blind_index = sb_idx
    state.big_blind_index = bb_idx
    state.current_bet = max(sb_player.current_bet, bb_player.current_bet)
    state.min_raise = config.big_blind
    state.last_raiser_index = bb_idx
    if not config.big_blind_option:
        bb_player.has_acted = True


def opponents_can_respond(state: GameState, idx: int) -> bool:
    return any(player.can_act for other, player in enumerate(state.players) if other != idx)


def action_window(state: GameState, player_id: str) -> SeatActionWindow:
    """Legal moves for ``player_id`` plus the amounts a UI or bot needs.

    ``min_amount``/``max_amount`` are bet sizes for BET and increments over
    the table bet for RAISE; ``max_amount`` is the all-in size.
    """
    idx = state.player_index(player_id)
    if not state.is_hand_in_progress or idx is None or idx != state.current_player_index:
        return SeatActionWindow(legal=[], call_amount=None, min_amount=None, max_amount=None)
    player = state.players[idx]
    if not player.can_act:
        return SeatActionWindow(legal=[], call_amount=None, min_amount=None, max_amount=None)

    to_call = amount_to_call(state, player)
    can_respond = opponents_can_respond(state, idx)
    legal = [ActionKind.FOLD]
    legal.append(ActionKind.CALL if to_call > 0 else ActionKind.CHECK)

    # A short all-in does not reopen raising for players who already acted.
    can_raise = can_respond and not player.raise_closed
    min_amount = max_amount = None
    if player.stack > to_call and can_raise:
        legal.append(ActionKind.BET if state.current_bet == 0 else ActionKind.RAISE)
        max_amount = player.stack - to_call
        min_amount = min(state.min_raise, max_amount)
    if can_raise or player.stack <= to_call:
        legal.append(ActionKind.ALL_IN)

    call_amount = min(to_call, player.stack) if to_call > 0 else None
    return SeatActionWindow(legal=legal, call_amount=call_amount, min_amount=min_amount, max_amount=max_amount)


def valid_actions(state: GameState, player_id: str) -> Set[ActionKind]:
    return set(action_window(state, player_id).legal)


def apply_action(state: GameState, player_id: str, action: PlayerAction) -> int:
    """Validate and apply one action in place; returns the actor's seat index.

    Every check runs before the first chip moves, so a rejected action
    leaves ``state`` untouched.
    """
    if not state.is_hand_in_progress:
        raise IllegalActionError("HAND_OVER", "No hand in progress")
    idx = state.player_index(player_id)
    if idx is None:
        raise IllegalActionError("UNKNOWN_PLAYER", f"Unknown player {player_id}")
    player = state.players[idx]
    if player.is_folded:
        raise IllegalActionError("PLAYER_INACTIVE", f"{player.name} has folded")
    if player.is_all_in:
        raise IllegalActionError("PLAYER_INACTIVE", f"{player.name} is all-in")
    if idx != state.current_player_index:
        raise IllegalActionError("OUT_OF_TURN", f"It is not {player.name}'s turn")

    kind = action.kind
    to_call = amount_to_call(state, player)

    if kind == ActionKind.FOLD:
        player.is_folded = True
    elif kind == ActionKind.CHECK:
        if to_call > 0:
            raise IllegalActionError("INVALID_ACTION", f"Cannot check when facing a bet of {to_call}")
    elif kind == ActionKind.CALL:
        if to_call == 0:
            raise IllegalActionError("INVALID_ACTION", "Nothing to call")
        commit_chips(player, to_call)
    elif kind in (ActionKind.BET, ActionKind.RAISE):
        target = _validated_target(state, idx, action)
        if target > state.current_bet:
            _raise_to(state, idx, target)
        else:
            commit_chips(player, target - player.current_bet)
    elif kind == ActionKind.ALL_IN:
        if player.stack > to_call and not opponents_can_respond(state, idx):
            raise IllegalActionError("INVALID_ACTION", "No opponent can call an all-in")
        if player.stack > to_call and player.raise_closed:
            raise IllegalActionError("INVALID_ACTION", "Action was not reopened; call or fold")
        target = player.current_bet + player.stack
        if target > state.current_bet:
            _raise_to(state, idx, target)
        else:
            commit_chips(player, player.stack)
    else:
        raise IllegalActionError("INVALID_ACTION", f"Unsupported action {kind}")

    player.has_acted = True
    player.last_action = kind
    return idx


def _validated_target(state: GameState, idx: int, action: PlayerAction) -> int:
    player = state.players[idx]
    verb = "bet" if action.kind == ActionKind.BET else "raise"
    if action.kind == ActionKind.BET and state.current_bet > 0:
        raise IllegalActionError("INVALID_ACTION", "Cannot bet into a live bet; raise instead")
    if action.kind == ActionKind.RAISE and state.current_bet == 0:
        raise IllegalActionError("INVALID_ACTION", "Nothing to raise; bet instead")
    amount = action.amount
    if amount is None or isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise IllegalActionError("INVALID_ACTION", f"A {verb} requires a positive amount")
    if not opponents_can_respond(state, idx):
        raise IllegalActionError("INVALID_ACTION", f"No opponent can respond to a {verb}")
    if player.raise_closed:
        raise IllegalActionError("INVALID_ACTION", "Action was not reopened; call or fold")

    available = player.current_bet + player.stack
    target = state.current_bet + amount
    if target >= available:
        # Over-sized bets are capped to an all-in.
        return available
    if amount < state.min_raise:
        raise IllegalActionError("BELOW_MINIMUM", f"Minimum {verb} is {state.min_raise}")
    return target


def _raise_to(state: GameState, idx: int, target: int) -> None:
    player = state.players[idx]
    increment = target - state.current_bet
    full_raise = increment >= state.min_raise
    commit_chips(player, target - player.current_bet)
    if full_raise:
        state.min_raise = increment
        state.last_raiser_index = idx
    state.current_bet = target
    for other_idx, other in enumerate(state.players):
        if other_idx == idx or not other.can_act or other.current_bet >= target:
            continue
        if full_raise:
            other.raise_closed = False
        elif other.has_acted and other.last_action is not None:
            # Posting a blind is not acting, so the big blind keeps its raise.
            other.raise_closed = True
        other.has_acted = False


def is_round_complete(state: GameState) -> bool:
    live = [player for player in state.players if not player.is_folded]
    if len(live) <= 1:
        return True
    return all(
        player.has_acted and player.current_bet == state.current_bet
        for player in state.players
        if player.can_act
    )


def collect_bets(state: GameState) -> None:
    """Close the street: move live bets into the pot and reset round flags."""
    state.pot += sum(player.current_bet for player in state.players)
    for player in state.players:
        player.current_bet = 0
        player.reset_for_round()
    state.current_bet = 0
    state.min_raise = state.config.big_blind
    state.last_raiser_index = None
    state.current_player_index = None
