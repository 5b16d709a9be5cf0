"""Balance collaborator contract and an in-memory implementation."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class PlayerProfile:
    """Persisted player data touched by settlement."""

    player_id: str
    name: str = ""
    balance: int = 0
    games_won: int = 0


class BalanceCollaborator(ABC):
    """
    Keeps player balances and win counts.

    Every call reports success with True and failure with False; raising is
    also treated as failure by the caller.
    """

    @abstractmethod
    async def credit(self, player_id: str, amount: int) -> bool:
        """Add an amount to a player's balance."""
        ...

    @abstractmethod
    async def debit(self, player_id: str, amount: int) -> bool:
        """Subtract an amount from a player's balance."""
        ...

    @abstractmethod
    async def record_win(self, player_id: str) -> bool:
        """Increment a player's persisted win count."""
        ...


class InMemoryBalanceLedger(BalanceCollaborator):
    """In-memory balance ledger for local development and tests."""

    def __init__(self) -> None:
        self._profiles: dict[str, PlayerProfile] = {}

    def register(self, player_id: str, name: str = "", balance: int = 0) -> PlayerProfile:
        """Create or replace a player profile."""
        profile = PlayerProfile(player_id=player_id, name=name, balance=balance)
        self._profiles[player_id] = profile
        return profile

    def get(self, player_id: str) -> PlayerProfile | None:
        """Get a player profile."""
        return self._profiles.get(player_id)

    async def credit(self, player_id: str, amount: int) -> bool:
        """Add an amount to a player's balance."""
        profile = self._profiles.get(player_id)
        if profile is None:
            logger.warning("Cannot credit unknown player %s", player_id)
            return False
        profile.balance += amount
        return True

    async def debit(self, player_id: str, amount: int) -> bool:
        """Subtract an amount from a player's balance."""
        profile = self._profiles.get(player_id)
        if profile is None:
            logger.warning("Cannot debit unknown player %s", player_id)
            return False
        profile.balance -= amount
        return True

    async def record_win(self, player_id: str) -> bool:
        """Increment a player's persisted win count."""
        profile = self._profiles.get(player_id)
        if profile is None:
            logger.warning("Cannot record win for unknown player %s", player_id)
            return False
        profile.games_won += 1
        return True
