"""Player and croupier state during a game."""

from transitions import Machine

from blackjack.cards import Card
from blackjack.errors import InvalidMoveError
from blackjack.hand import Hand
from blackjack.game.state import VALID_TRANSITIONS, PlayerStatus, is_valid_transition


class Participant:
    """Anyone holding a hand at the table."""

    def __init__(self) -> None:
        self.hand = Hand()

    def take(self, card: Card) -> None:
        """Add a dealt card to the hand."""
        self.hand.add_card(card)

    @property
    def hand_value(self) -> int:
        """Current value of the hand."""
        return self.hand.value

    @property
    def is_busted(self) -> bool:
        """Check if the hand is over 21."""
        return self.hand.is_busted


class Player(Participant):
    """
    The player: hand, status, bet and running win count.

    Status changes go through a state machine built from VALID_TRANSITIONS,
    with one trigger per target status (``stand``, ``bust``, ...).
    """

    STATES = [s.name.lower() for s in PlayerStatus]

    TRANSITIONS = [
        {
            "trigger": target.name.lower(),
            "source": [s.name.lower() for s, targets in VALID_TRANSITIONS.items() if target in targets],
            "dest": target.name.lower(),
        }
        for target in PlayerStatus
        if any(target in targets for targets in VALID_TRANSITIONS.values())
    ]

    def __init__(self, player_id: str, games_won: int = 0) -> None:
        super().__init__()
        self.player_id = player_id
        self.initial_bet = 0
        self.games_won = games_won

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="playing",
            auto_transitions=False,
            model_attribute="_status_state",
        )

    @property
    def status(self) -> PlayerStatus:
        """Get current player status as enum."""
        return PlayerStatus[self._status_state.upper()]  # type: ignore

    def advance(self, status: PlayerStatus) -> None:
        """Move to a new status; raises InvalidMoveError if not allowed."""
        if not is_valid_transition(self.status, status):
            raise InvalidMoveError(f"Player cannot go from {self.status.name} to {status.name}")
        self.trigger(status.name.lower())  # type: ignore

    @property
    def has_bet(self) -> bool:
        """Check if a bet has been recorded."""
        return self.initial_bet > 0


class Croupier(Participant):
    """The dealer. No bet, no win count, no status beyond the hand value."""
