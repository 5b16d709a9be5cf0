"""Game and player state enumerations."""

from enum import Enum, auto


class GamePhase(Enum):
    """
    Game state machine phases.

    Flow: DEALING → BETTING → PLAYER_TURN → DEALER_TURN → RESOLVING → FINISHED
    """

    # Initial hands being dealt
    DEALING = auto()

    # Hands dealt, waiting for the bet
    BETTING = auto()

    # Player hits or stands
    PLAYER_TURN = auto()

    # Dealer plays automatically
    DEALER_TURN = auto()

    # Determining the winner
    RESOLVING = auto()

    # Outcome decided
    FINISHED = auto()

    # Deck ran out, game cannot continue
    ABANDONED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class GameStatus(Enum):
    """Overall status of a game."""

    IN_PROGRESS = auto()
    FINISHED = auto()
    ABANDONED = auto()


class PlayerStatus(Enum):
    """
    Player state machine states.

    Flow: PLAYING → HIT* → STAND | BUST | BLACKJACK → WIN | LOSE
    """

    PLAYING = auto()
    HIT = auto()
    STAND = auto()
    BUST = auto()
    BLACKJACK = auto()
    WIN = auto()
    LOSE = auto()

    def __str__(self) -> str:
        return self.name.title()

    @property
    def ends_turn(self) -> bool:
        """Check if the player can no longer move."""
        return self in (PlayerStatus.STAND, PlayerStatus.BUST, PlayerStatus.BLACKJACK)


class Move(Enum):
    """Player moves."""

    HIT = "hit"
    STAND = "stand"


class Outcome(Enum):
    """Result of a finished game from the player's side."""

    WIN = "win"
    LOSE = "lose"
    PUSH = "push"


# Valid player status transitions
VALID_TRANSITIONS: dict[PlayerStatus, list[PlayerStatus]] = {
    PlayerStatus.PLAYING: [PlayerStatus.HIT, PlayerStatus.STAND, PlayerStatus.BLACKJACK],
    PlayerStatus.HIT: [PlayerStatus.HIT, PlayerStatus.STAND, PlayerStatus.BUST],
    PlayerStatus.STAND: [PlayerStatus.WIN, PlayerStatus.LOSE],
    PlayerStatus.BUST: [PlayerStatus.WIN, PlayerStatus.LOSE],
    PlayerStatus.BLACKJACK: [PlayerStatus.WIN],
    PlayerStatus.WIN: [],  # Terminal
    PlayerStatus.LOSE: [],  # Terminal
}


def is_valid_transition(from_status: PlayerStatus, to_status: PlayerStatus) -> bool:
    """
    Check if a player status transition is valid.

    Args:
        from_status: Current status
        to_status: Desired status

    Returns:
        True if the transition is allowed
    """
    return to_status in VALID_TRANSITIONS.get(from_status, [])
