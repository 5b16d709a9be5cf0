"""What happened during a game, as a log observers can follow."""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable


class EventType(Enum):
    """Things a game reports."""

    GAME_STARTED = auto()
    GAME_FINISHED = auto()
    GAME_ABANDONED = auto()

    BET_PLACED = auto()
    CARD_DEALT = auto()

    PLAYER_HIT = auto()
    PLAYER_STAND = auto()
    PLAYER_BLACKJACK = auto()
    PLAYER_BUSTS = auto()

    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()

    PLAYER_WINS = auto()
    PLAYER_LOSES = auto()
    PUSH = auto()

    SETTLEMENT_COMPLETED = auto()
    SETTLEMENT_FAILED = auto()


@dataclass(frozen=True)
class GameEvent:
    """One accepted state change, with whatever details go with it."""

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


EventHandler = Callable[[GameEvent], None]

# Key for handlers that receive every event
ANY_EVENT = None


class EventEmitter:
    """Keeps a game's event log and notifies subscribers as it grows."""

    def __init__(self) -> None:
        self._subscribers: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._log: list[GameEvent] = []

    def subscribe(self, handler: EventHandler, event_type: EventType | None = ANY_EVENT) -> None:
        """Call ``handler`` for events of ``event_type``, or for all events when it is None."""
        self._subscribers[event_type].append(handler)

    def emit(self, event: GameEvent) -> None:
        self._log.append(event)
        # Type-specific handlers run before catch-all ones
        for key in (event.event_type, ANY_EVENT):
            for handler in self._subscribers.get(key, ()):
                handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data, emit it and return it."""
        event = GameEvent(event_type, data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """A copy of the log, oldest first."""
        return list(self._log)

    def types(self) -> list[EventType]:
        return [event.event_type for event in self._log]
