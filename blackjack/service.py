"""Game service: the boundary operations around a single game."""

import asyncio
import logging
from random import Random
from typing import Awaitable, Callable

from config import config
from blackjack.errors import InvalidMoveError, SettlementFailure
from blackjack.ledger import BalanceCollaborator
from blackjack.rules import TableRules
from blackjack.game import BlackjackGame, EventType, GameStatus, Move, Outcome

logger = logging.getLogger(__name__)

SettlementStep = tuple[str, Callable[[], Awaitable[bool]]]


class GameService:
    """
    Starts games, applies moves and settles finished games.

    Games are independent of each other; the service holds no per-game
    state, so one service can drive any number of concurrent games.
    """

    def __init__(
        self,
        ledger: BalanceCollaborator,
        rules: TableRules | None = None,
        settlement_timeout: float | None = None,
        seed: int | None = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            ledger: Balance collaborator used for settlement
            rules: Table rules for new games (from configuration if not provided)
            settlement_timeout: Seconds allowed per collaborator call
            seed: Seed for the sequence of per-game random generators (random if None)
        """
        self.ledger = ledger
        self.rules = rules or TableRules.from_config()
        self.settlement_timeout = (
            settlement_timeout if settlement_timeout is not None else config.settlement_timeout
        )
        # Each new game draws its own seed from here, so a seeded service
        # replays the same sequence of games without repeating a deck
        self._seeds = Random(seed if seed is not None else config.rng_seed)

    def initiate_game(
        self,
        player_id: str,
        rng: Random | None = None,
        games_won: int = 0,
    ) -> BlackjackGame:
        """Create a game with a freshly shuffled deck and deal the initial hands."""
        game = BlackjackGame(
            player_id,
            rules=self.rules,
            rng=rng or Random(self._seeds.getrandbits(64)),
            games_won=games_won,
        )
        game.deal_initial_cards()
        logger.debug("Started game for player %s", player_id)
        return game

    def place_bet(self, game: BlackjackGame, amount: int) -> BlackjackGame:
        """Record the player's bet."""
        game.bet(amount)
        return game

    def play(self, game: BlackjackGame, move: Move, bet: int | None = None) -> BlackjackGame:
        """
        Apply a move, placing the bet first when one is given.

        A bet on a natural blackjack ends the player's turn, so the move is
        not applied.
        """
        if bet is not None:
            game.bet(bet)
            if not game.can_move:
                logger.debug("Turn over for player %s, ignoring %s", game.player.player_id, move.value)
                return game

        game.move(move)
        return game

    def player_makes_move(self, game: BlackjackGame, move: Move) -> BlackjackGame:
        """Apply a move for a game whose bet is already placed."""
        game.move(move)
        return game

    def croupier_makes_move(self, game: BlackjackGame) -> BlackjackGame:
        """Play the croupier's hand once the player's turn has ended."""
        game.play_dealer()
        return game

    async def determine_final_status(self, game: BlackjackGame) -> BlackjackGame:
        """
        Resolve the winner, finish the game and settle it.

        Raises:
            SettlementFailure: If the balance collaborator fails; the game
                stays finished and can be settled again with settle()
        """
        game.determine_outcome()
        await self.settle(game)
        return game

    def _settlement_steps(self, game: BlackjackGame) -> list[SettlementStep]:
        player_id = game.player.player_id
        amount = game.player.initial_bet

        if game.outcome == Outcome.WIN:
            return [
                ("credit", lambda: self.ledger.credit(player_id, amount)),
                ("record_win", lambda: self.ledger.record_win(player_id)),
            ]
        if game.outcome == Outcome.LOSE:
            return [("debit", lambda: self.ledger.debit(player_id, amount))]
        return []

    async def settle(self, game: BlackjackGame) -> BlackjackGame:
        """
        Report a finished game to the balance collaborator.

        Steps that already succeeded are not repeated, so calling this again
        after a SettlementFailure only runs what is left.
        """
        if game.status != GameStatus.FINISHED:
            raise InvalidMoveError(f"Cannot settle a game that is {game.status.name.lower()}")
        if game.settled:
            return game

        player_id = game.player.player_id
        for step, call in self._settlement_steps(game):
            if step in game.settled_steps:
                continue

            try:
                ok = await asyncio.wait_for(call(), timeout=self.settlement_timeout)
            except asyncio.TimeoutError as exc:
                self._settlement_failed(game, step, "timed out")
                raise SettlementFailure(player_id, step, "timed out") from exc
            except Exception as exc:
                self._settlement_failed(game, step, str(exc))
                raise SettlementFailure(player_id, step, str(exc)) from exc

            if not ok:
                self._settlement_failed(game, step, "rejected by balance collaborator")
                raise SettlementFailure(player_id, step, "rejected by balance collaborator")

            game.settled_steps.add(step)

        game.settled = True
        game.events.emit_new(
            EventType.SETTLEMENT_COMPLETED,
            outcome=game.outcome.value if game.outcome else None,
            amount=game.player.initial_bet,
        )
        return game

    def _settlement_failed(self, game: BlackjackGame, step: str, reason: str) -> None:
        logger.warning(
            "Settlement step %s failed for player %s: %s",
            step,
            game.player.player_id,
            reason,
        )
        game.events.emit_new(EventType.SETTLEMENT_FAILED, step=step, reason=reason)
