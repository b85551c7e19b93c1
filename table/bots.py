from __future__ import annotations

import random
from typing import List, Optional

from holdem.cards import Card
from holdem.evaluator import evaluate_best
from holdem.game import action_window
from holdem.models import ActionKind, BotPersonality, GameState, PlayerAction, Stage

_PHASE_BONUS = {
    Stage.PRE_FLOP: 0.0,
    Stage.FLOP: 0.05,
    Stage.TURN: 0.1,
    Stage.RIVER: 0.12,
}
PREMIUM_STRENGTH = 36
WEAK_STRENGTH = 24


def rough_hand_strength(hole: List[Card]) -> int:
    """Very rough proxy for pre-flop hand quality used to drive aggression."""
    if len(hole) < 2:
        return 0

    values = [card.value for card in hole]
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


def made_hand_strength(hole: List[Card], board: List[Card]) -> int:
    """Post-flop strength on the same scale as ``rough_hand_strength``."""
    value = evaluate_best(hole + board)
    return 12 + value.rank * 7 + max(card.value for card in hole) // 2


def _should_raise(
    strength: int,
    stage: Stage,
    facing_bet: bool,
    personality: BotPersonality,
    rng: random.Random,
) -> bool:
    if strength >= PREMIUM_STRENGTH:
        return True
    base = personality.raise_rate * (0.6 if facing_bet else 1.0)
    scaled_strength = min(strength / 45.0, 0.45)
    probability = min(0.85, base + _PHASE_BONUS.get(stage, 0.0) + scaled_strength / 2)
    return rng.random() < probability


def _choose_amount(min_amount: int, max_amount: int, facing_bet: bool, rng: random.Random) -> int:
    if max_amount <= min_amount:
        return min_amount

    span = max_amount - min_amount
    roll = rng.random()
    # Facing a bet: lean toward bigger responses; otherwise mostly probe small.
    if facing_bet:
        if roll < 0.2:
            return min_amount
        if roll > 0.9:
            return max_amount
    else:
        if roll < 0.4:
            return min_amount
        if roll > 0.95:
            return max_amount
    return min_amount + int(span * rng.random() * 0.5)


def choose_action(
    view: GameState,
    seat_id: str,
    personality: BotPersonality,
    rng: Optional[random.Random] = None,
) -> PlayerAction:
    """House bot: strength, pot odds and personality decide fold/call/raise.
    Only ever returns an action from the seat's legal set."""
    rng = rng or random.Random()
    window = action_window(view, seat_id)
    if not window.legal or window.legal == [ActionKind.FOLD]:
        return PlayerAction.fold()

    player = view.get_player(seat_id)
    assert player is not None
    if len(view.community_cards) >= 3:
        strength = made_hand_strength(player.hole_cards, view.community_cards)
    else:
        strength = rough_hand_strength(player.hole_cards)
    facing_bet = window.call_amount is not None

    raise_kind = next((kind for kind in (ActionKind.BET, ActionKind.RAISE) if kind in window.legal), None)
    if raise_kind and window.min_amount is not None and window.max_amount is not None:
        if _should_raise(strength, view.stage, facing_bet, personality, rng):
            amount = _choose_amount(window.min_amount, window.max_amount, facing_bet, rng)
            return PlayerAction(raise_kind, amount)

    if not facing_bet:
        return PlayerAction.check()

    call_amount = window.call_amount or 0
    pot_odds = call_amount / (view.total_pot + call_amount)
    if strength < WEAK_STRENGTH:
        if call_amount > player.stack * 0.15 or rng.random() < personality.fold_rate * (0.5 + pot_odds):
            return PlayerAction.fold()
    elif strength < PREMIUM_STRENGTH and call_amount > player.stack * 0.5:
        if rng.random() < personality.fold_rate:
            return PlayerAction.fold()

    if ActionKind.CALL in window.legal:
        return PlayerAction.call()
    return PlayerAction.all_in()
