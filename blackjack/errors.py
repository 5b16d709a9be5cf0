"""Exceptions raised by the blackjack rules engine."""


class BlackjackError(Exception):
    """Base class for all rules engine errors."""


class InvalidMoveError(BlackjackError):
    """An action was attempted that the current game phase does not allow."""


class InvalidBetError(InvalidMoveError):
    """Bet amount falls outside the table limits."""

    def __init__(self, amount: int, min_bet: int, max_bet: int) -> None:
        self.amount = amount
        self.min_bet = min_bet
        self.max_bet = max_bet
        super().__init__(
            f"Invalid bet {amount}: minimum bet is {min_bet}, maximum bet is {max_bet}"
        )


class MoveBeforeBetError(InvalidMoveError):
    """A move was submitted before any bet was recorded."""

    def __init__(self) -> None:
        super().__init__("It is compulsory to bet before making a move")


class EmptyDeckError(BlackjackError):
    """A card was drawn from an exhausted deck."""

    def __init__(self) -> None:
        super().__init__("Cannot draw from empty deck")


class SettlementFailure(BlackjackError):
    """The balance collaborator could not settle a finished game."""

    def __init__(self, player_id: str, step: str, reason: str) -> None:
        self.player_id = player_id
        self.step = step
        self.reason = reason
        super().__init__(f"Settlement step '{step}' failed for player {player_id}: {reason}")
