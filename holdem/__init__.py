"""Texas Hold'em betting and hand-resolution engine."""

from .cards import Card, RANKS, SUITS, draw, new_shuffled_deck, parse_card, parse_cards
from .errors import (
    ExternalDecisionTimeoutError,
    IllegalActionError,
    InsufficientCardsError,
    PokerError,
    TableError,
)
from .evaluator import HandCategory, HandValue, evaluate_best, evaluate_five
from .game import (
    GameEngine,
    action_window,
    apply_action,
    get_public_view,
    get_valid_actions,
    new_table,
    next_hand,
    settle,
    start_hand,
)
from .models import (
    BLIND_LEVELS,
    BOT_PERSONALITIES,
    ActionKind,
    BotPersonality,
    GameState,
    HandResult,
    Player,
    PlayerAction,
    PlayerSeed,
    Stage,
    TableConfig,
)
from .reducer import Act, SetMessage, StartHand, reduce

__all__ = [
    "Card",
    "RANKS",
    "SUITS",
    "draw",
    "new_shuffled_deck",
    "parse_card",
    "parse_cards",
    "ExternalDecisionTimeoutError",
    "IllegalActionError",
    "InsufficientCardsError",
    "PokerError",
    "TableError",
    "HandCategory",
    "HandValue",
    "evaluate_best",
    "evaluate_five",
    "GameEngine",
    "action_window",
    "apply_action",
    "get_public_view",
    "get_valid_actions",
    "new_table",
    "next_hand",
    "settle",
    "start_hand",
    "BLIND_LEVELS",
    "BOT_PERSONALITIES",
    "ActionKind",
    "BotPersonality",
    "GameState",
    "HandResult",
    "Player",
    "PlayerAction",
    "PlayerSeed",
    "Stage",
    "TableConfig",
    "Act",
    "SetMessage",
    "StartHand",
    "reduce",
]
