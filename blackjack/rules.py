"""Table rules."""

from dataclasses import dataclass

from config import GameConfig, config
from blackjack.errors import InvalidBetError


@dataclass(frozen=True)
class TableRules:
    """
    Blackjack table rules configuration.

    Betting limits and the dealer's standing total for one table.
    """

    # Betting limits
    min_bet: int = 5
    max_bet: int = 150

    # Dealer draws while below this value
    dealer_stands_on: int = 17

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.min_bet < 1:
            raise ValueError("min_bet must be at least 1")
        if self.max_bet < self.min_bet:
            raise ValueError("max_bet must not be lower than min_bet")
        if not 2 <= self.dealer_stands_on <= 21:
            raise ValueError("dealer_stands_on must be between 2 and 21")

    @classmethod
    def from_config(cls, game_config: GameConfig | None = None) -> "TableRules":
        """Build table rules from the game configuration."""
        game_config = game_config or config.game
        return cls(
            min_bet=game_config.min_bet,
            max_bet=game_config.max_bet,
            dealer_stands_on=game_config.dealer_stands_on,
        )

    def allows_bet(self, amount: int) -> bool:
        """Check if a bet is within the table limits."""
        return self.min_bet <= amount <= self.max_bet

    def validate_bet(self, amount: int) -> None:
        """Raise InvalidBetError if a bet is outside the table limits."""
        if not self.allows_bet(amount):
            raise InvalidBetError(amount, self.min_bet, self.max_bet)
