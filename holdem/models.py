from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional

from .cards import Card, cards_to_labels
from .evaluator import HandValue


class Stage(str, Enum):
    PRE_DEAL = "PRE_DEAL"
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"


BETTING_STAGES = (Stage.PRE_FLOP, Stage.FLOP, Stage.TURN, Stage.RIVER)


class ActionKind(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    BET = "BET"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


@dataclass(frozen=True)
class PlayerAction:
    """One decision. ``amount`` is the bet size for BET and the increment over
    the table bet for RAISE; other kinds ignore it."""

    kind: ActionKind
    amount: Optional[int] = None

    @classmethod
    def fold(cls) -> "PlayerAction":
        return cls(ActionKind.FOLD)

    @classmethod
    def check(cls) -> "PlayerAction":
        return cls(ActionKind.CHECK)

    @classmethod
    def call(cls) -> "PlayerAction":
        return cls(ActionKind.CALL)

    @classmethod
    def bet(cls, amount: int) -> "PlayerAction":
        return cls(ActionKind.BET, amount)

    @classmethod
    def raise_by(cls, amount: int) -> "PlayerAction":
        return cls(ActionKind.RAISE, amount)

    @classmethod
    def all_in(cls) -> "PlayerAction":
        return cls(ActionKind.ALL_IN)

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "PlayerAction":
        kind = ActionKind(payload.get("action"))
        amount = payload.get("amount")
        if amount is not None and (isinstance(amount, bool) or not isinstance(amount, int)):
            raise ValueError("amount must be an integer")
        return cls(kind, amount)

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"action": self.kind.value}
        if self.amount is not None:
            payload["amount"] = self.amount
        return payload


@dataclass(frozen=True)
class BotPersonality:
    name: str
    fold_rate: float
    raise_rate: float


BOT_PERSONALITIES: Dict[str, BotPersonality] = {
    "TIGHT": BotPersonality("TIGHT", fold_rate=0.7, raise_rate=0.1),
    "LOOSE": BotPersonality("LOOSE", fold_rate=0.3, raise_rate=0.4),
    "AGGRESSIVE": BotPersonality("AGGRESSIVE", fold_rate=0.4, raise_rate=0.5),
    "PASSIVE": BotPersonality("PASSIVE", fold_rate=0.5, raise_rate=0.1),
}

BLIND_LEVELS = ((5, 10), (10, 20), (25, 50), (50, 100))


@dataclass(frozen=True)
class TableConfig:
    max_players: int = 9
    starting_stack: int = 1_000
    small_blind: int = 10
    big_blind: int = 20
    decision_timeout_ms: int = 15_000
    think_delay_ms: int = 0
    max_decision_attempts: int = 3
    heads_up_button_posts_small_blind: bool = False
    big_blind_option: bool = False

    def __post_init__(self) -> None:
        if not 2 <= self.max_players <= 9:
            raise ValueError("max_players must be between 2 and 9")
        if self.small_blind <= 0 or self.big_blind < self.small_blind:
            raise ValueError("Blinds must be positive with big_blind >= small_blind")
        if self.max_decision_attempts < 1:
            raise ValueError("max_decision_attempts must be at least 1")


@dataclass(frozen=True)
class PlayerSeed:
    id: str
    name: str
    is_human: bool = False
    stack: int = 0


@dataclass
class Player:
    id: str
    name: str
    is_human: bool
    stack: int
    hole_cards: List[Card] = field(default_factory=list)
    current_bet: int = 0
    total_committed: int = 0
    is_folded: bool = False
    is_all_in: bool = False
    has_acted: bool = False
    raise_closed: bool = False
    last_action: Optional[ActionKind] = None

    @classmethod
    def from_seed(cls, seed: PlayerSeed) -> "Player":
        if seed.stack < 0:
            raise ValueError(f"Stack for {seed.id} cannot be negative")
        return cls(id=seed.id, name=seed.name, is_human=seed.is_human, stack=seed.stack)

    def to_seed(self) -> PlayerSeed:
        return PlayerSeed(id=self.id, name=self.name, is_human=self.is_human, stack=self.stack)

    def reset_for_hand(self) -> None:
        self.hole_cards = []
        self.current_bet = 0
        self.total_committed = 0
        self.is_folded = False
        self.is_all_in = False
        self.reset_for_round()

    def reset_for_round(self) -> None:
        self.has_acted = False
        self.raise_closed = False
        self.last_action = None

    @property
    def can_act(self) -> bool:
        return not self.is_folded and not self.is_all_in

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "is_human": self.is_human,
            "stack": self.stack,
            "hole_cards": cards_to_labels(self.hole_cards),
            "current_bet": self.current_bet,
            "total_committed": self.total_committed,
            "is_folded": self.is_folded,
            "is_all_in": self.is_all_in,
            "has_acted": self.has_acted,
            "raise_closed": self.raise_closed,
            "last_action": self.last_action.value if self.last_action else None,
        }


@dataclass
class WinnerEntry:
    player_id: str
    name: str
    amount: int
    hand_name: Optional[str] = None
    hand_rank: Optional[int] = None
    cards: List[Card] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "amount": self.amount,
            "hand_name": self.hand_name,
            "hand_rank": self.hand_rank,
            "cards": cards_to_labels(self.cards),
        }


@dataclass
class PotAward:
    amount: int
    eligible: List[str]
    winners: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {"amount": self.amount, "eligible": list(self.eligible), "winners": list(self.winners)}


@dataclass
class HandResult:
    """What a wallet or ledger needs to settle one hand."""

    winners: List[WinnerEntry]
    pot: int
    pots: List[PotAward] = field(default_factory=list)
    showdown: Dict[str, HandValue] = field(default_factory=dict)

    def amount_for(self, player_id: str) -> int:
        return sum(entry.amount for entry in self.winners if entry.player_id == player_id)

    def to_dict(self) -> Dict[str, object]:
        return {
            "winners": [entry.to_dict() for entry in self.winners],
            "pot": self.pot,
            "pots": [pot.to_dict() for pot in self.pots],
            "showdown": {
                player_id: {
                    "hand_name": value.name,
                    "hand_rank": value.rank,
                    "cards": cards_to_labels(value.cards),
                }
                for player_id, value in self.showdown.items()
            },
        }


@dataclass
class SeatActionWindow:
    legal: List[ActionKind]
    call_amount: Optional[int]
    min_amount: Optional[int]
    max_amount: Optional[int]


@dataclass
class GameState:
    config: TableConfig
    players: List[Player]
    deck: List[Card] = field(default_factory=list)
    community_cards: List[Card] = field(default_factory=list)
    pot: int = 0
    current_bet: int = 0
    min_raise: int = 0
    dealer_index: int = -1
    small_blind_index: Optional[int] = None
    big_blind_index: Optional[int] = None
    current_player_index: Optional[int] = None
    last_raiser_index: Optional[int] = None
    stage: Stage = Stage.PRE_DEAL
    game_message: str = ""
    hand_over: Optional[HandResult] = None
    hand_number: int = 0

    @property
    def total_pot(self) -> int:
        return self.pot + sum(player.current_bet for player in self.players)

    @property
    def total_chips(self) -> int:
        return sum(player.stack for player in self.players) + self.total_pot

    @property
    def current_player(self) -> Optional[Player]:
        if self.current_player_index is None:
            return None
        return self.players[self.current_player_index]

    @property
    def is_hand_in_progress(self) -> bool:
        return self.stage in BETTING_STAGES and self.hand_over is None

    def player_index(self, player_id: str) -> Optional[int]:
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                return idx
        return None

    def get_player(self, player_id: str) -> Optional[Player]:
        idx = self.player_index(player_id)
        return None if idx is None else self.players[idx]

    def to_dict(self) -> Dict[str, object]:
        current = self.current_player
        return {
            "hand_number": self.hand_number,
            "stage": self.stage.value,
            "players": [player.to_dict() for player in self.players],
            "community_cards": cards_to_labels(self.community_cards),
            "pot": self.pot,
            "total_pot": self.total_pot,
            "current_bet": self.current_bet,
            "min_raise": self.min_raise,
            "dealer_index": self.dealer_index,
            "small_blind_index": self.small_blind_index,
            "big_blind_index": self.big_blind_index,
            "current_player_id": current.id if current else None,
            "last_raiser_index": self.last_raiser_index,
            "game_message": self.game_message,
            "hand_over": self.hand_over.to_dict() if self.hand_over else None,
            "small_blind": self.config.small_blind,
            "big_blind": self.config.big_blind,
        }
