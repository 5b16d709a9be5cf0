"""Game engine and state management."""

from blackjack.game.events import EventEmitter, GameEvent, EventType
from blackjack.game.state import GamePhase, GameStatus, Move, Outcome, PlayerStatus
from blackjack.game.participants import Croupier, Player
from blackjack.game.engine import BlackjackGame

__all__ = [
    "EventEmitter",
    "GameEvent",
    "EventType",
    "GamePhase",
    "GameStatus",
    "Move",
    "Outcome",
    "PlayerStatus",
    "Croupier",
    "Player",
    "BlackjackGame",
]
