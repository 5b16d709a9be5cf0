"""Tests for the game service boundaries and settlement."""

import asyncio

import pytest

from blackjack.errors import InvalidBetError, InvalidMoveError, MoveBeforeBetError, SettlementFailure
from blackjack.game import EventType, GamePhase, GameStatus, Move, Outcome, PlayerStatus
from blackjack.ledger import InMemoryBalanceLedger
from blackjack.service import GameService

from conftest import PLAYER_ID, stacked_game


class FlakyLedger(InMemoryBalanceLedger):
    """Ledger whose record_win fails until told otherwise."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_record_win = True
        self.credits = 0

    async def credit(self, player_id: str, amount: int) -> bool:
        self.credits += 1
        return await super().credit(player_id, amount)

    async def record_win(self, player_id: str) -> bool:
        if self.fail_record_win:
            raise ConnectionError("balance store unavailable")
        return await super().record_win(player_id)


class HangingLedger(InMemoryBalanceLedger):
    """Ledger that never answers a debit."""

    async def debit(self, player_id: str, amount: int) -> bool:
        await asyncio.sleep(10)
        return True


class TestInitiateGame:
    """Tests for starting games."""

    def test_initiate_game(self, service):
        """A new game has a shuffled deck and dealt hands."""
        game = service.initiate_game(PLAYER_ID)

        assert game.player.player_id == PLAYER_ID
        assert len(game.player.hand) == 2
        assert len(game.croupier.hand) == 2
        assert game.deck.cards_remaining == 48
        assert game.status == GameStatus.IN_PROGRESS

    def test_seeded_services_replay_the_same_games(self, ledger):
        """Two services with the same seed deal the same sequence of games."""
        first = GameService(ledger, seed=3)
        second = GameService(ledger, seed=3)

        for _ in range(3):
            a = first.initiate_game(PLAYER_ID)
            b = second.initiate_game(PLAYER_ID)
            assert a.player.hand.cards == b.player.hand.cards
            assert a.croupier.hand.cards == b.croupier.hand.cards
            assert a.deck._cards == b.deck._cards

    def test_consecutive_games_get_different_decks(self, ledger):
        """A seeded service does not deal the same deck to every game."""
        service = GameService(ledger, seed=3)
        first = service.initiate_game(PLAYER_ID)
        second = service.initiate_game(PLAYER_ID)

        assert first.deck is not second.deck
        assert first.deck._cards != second.deck._cards

    def test_rules_from_config(self, ledger):
        """Without explicit rules the configured limits apply."""
        service = GameService(ledger)
        assert service.rules.min_bet == 5
        assert service.rules.max_bet == 150


class TestPlay:
    """Tests for the move boundary."""

    def test_play_with_bet(self, service):
        """The first move places the bet and applies the move."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"))
        service.play(game, Move.STAND, bet=50)

        assert game.player.initial_bet == 50
        assert game.player.status == PlayerStatus.STAND

    def test_play_invalid_bet(self, service):
        """An invalid bet stops the move too."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "2C")

        with pytest.raises(InvalidBetError):
            service.play(game, Move.HIT, bet=200)

        assert game.player.initial_bet == 0
        assert len(game.player.hand) == 2
        assert game.phase == GamePhase.BETTING

    def test_play_without_bet(self, service):
        """A move without any bet is rejected."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"))
        with pytest.raises(MoveBeforeBetError):
            service.play(game, Move.HIT)

    def test_play_on_blackjack_ignores_move(self, service):
        """The move is not applied to a natural."""
        game = stacked_game(("AS", "KH"), ("10C", "6D"), "5C")
        service.play(game, Move.HIT, bet=10)

        assert game.player.status == PlayerStatus.BLACKJACK
        assert len(game.player.hand) == 2

    def test_play_after_turn_over_rejects_move(self, service):
        """A later move on a finished turn is rejected rather than ignored."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "2C")
        service.play(game, Move.STAND, bet=10)

        with pytest.raises(InvalidMoveError):
            service.play(game, Move.HIT)
        assert len(game.player.hand) == 2

    def test_player_makes_move_repeatedly(self, service):
        """Later moves go through player_makes_move."""
        game = stacked_game(("2S", "3H"), ("10C", "6D"), "4C")
        service.place_bet(game, 10)
        service.player_makes_move(game, Move.HIT)
        service.player_makes_move(game, Move.STAND)

        assert game.player.hand_value == 9
        assert game.player.status == PlayerStatus.STAND

    def test_croupier_makes_move(self, service):
        """The dealer-turn boundary plays the croupier's hand."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "2C")
        service.play(game, Move.STAND, bet=10)
        service.croupier_makes_move(game)

        assert game.croupier.hand_value == 18
        assert game.phase == GamePhase.RESOLVING


class TestSettlement:
    """Tests for resolution and settlement."""

    async def _play_to_end(self, service, game, bet=20):
        service.play(game, Move.STAND, bet=bet)
        service.croupier_makes_move(game)
        return await service.determine_final_status(game)

    @pytest.mark.asyncio
    async def test_win_credits_bet(self, service, ledger):
        """Player 19 against croupier 16 + 2: the bet is credited."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "2C")
        await self._play_to_end(service, game, bet=25)

        profile = ledger.get(PLAYER_ID)
        assert game.outcome == Outcome.WIN
        assert game.player.status == PlayerStatus.WIN
        assert game.player_wins
        assert game.status == GameStatus.FINISHED
        assert game.settled
        assert profile.balance == 1025
        assert profile.games_won == 1

    @pytest.mark.asyncio
    async def test_loss_debits_bet(self, service, ledger):
        """Player 19 against croupier 16 + 5: the bet is debited."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "5C")
        await self._play_to_end(service, game, bet=25)

        profile = ledger.get(PLAYER_ID)
        assert game.outcome == Outcome.LOSE
        assert game.player.status == PlayerStatus.LOSE
        assert not game.player_wins
        assert profile.balance == 975
        assert profile.games_won == 0

    @pytest.mark.asyncio
    async def test_bust_loses_against_anything(self, service, ledger):
        """A bust player is debited whatever the croupier holds."""
        game = stacked_game(("10S", "5H"), ("10C", "6D"), "9C", "KC")
        service.play(game, Move.HIT, bet=10)
        service.croupier_makes_move(game)
        await service.determine_final_status(game)

        assert game.player.status == PlayerStatus.LOSE
        assert ledger.get(PLAYER_ID).balance == 990

    @pytest.mark.asyncio
    async def test_blackjack_wins(self, service, ledger):
        """A natural is credited."""
        game = stacked_game(("AS", "KH"), ("10C", "7D"))
        service.play(game, Move.STAND, bet=10)
        service.croupier_makes_move(game)
        await service.determine_final_status(game)

        assert game.player.status == PlayerStatus.WIN
        assert ledger.get(PLAYER_ID).balance == 1010

    @pytest.mark.asyncio
    async def test_unknown_player_fails_settlement(self, rules):
        """A collaborator rejection surfaces as SettlementFailure."""
        service = GameService(InMemoryBalanceLedger(), rules=rules)
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "2C")

        with pytest.raises(SettlementFailure) as exc_info:
            await self._play_to_end(service, game)

        assert exc_info.value.step == "credit"
        assert game.status == GameStatus.FINISHED
        assert not game.settled
        assert EventType.SETTLEMENT_FAILED in game.events.types()

    @pytest.mark.asyncio
    async def test_retry_does_not_repeat_completed_steps(self, rules):
        """Only the failed step runs again on retry."""
        ledger = FlakyLedger()
        ledger.register(PLAYER_ID, balance=100)
        service = GameService(ledger, rules=rules)
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "2C")

        with pytest.raises(SettlementFailure) as exc_info:
            await self._play_to_end(service, game, bet=10)
        assert exc_info.value.step == "record_win"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

        ledger.fail_record_win = False
        await service.settle(game)

        assert ledger.credits == 1
        assert ledger.get(PLAYER_ID).balance == 110
        assert ledger.get(PLAYER_ID).games_won == 1
        assert game.settled

    @pytest.mark.asyncio
    async def test_settle_is_applied_once(self, service, ledger):
        """Settling a settled game changes nothing."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "2C")
        await self._play_to_end(service, game, bet=10)
        await service.settle(game)

        assert ledger.get(PLAYER_ID).balance == 1010

    @pytest.mark.asyncio
    async def test_settlement_timeout(self, rules):
        """A hung collaborator call surfaces as SettlementFailure."""
        ledger = HangingLedger()
        ledger.register(PLAYER_ID, balance=100)
        service = GameService(ledger, rules=rules, settlement_timeout=0.01)
        game = stacked_game(("10S", "9H"), ("10C", "6D"), "5C")

        with pytest.raises(SettlementFailure, match="timed out"):
            await self._play_to_end(service, game)

        assert game.status == GameStatus.FINISHED

    @pytest.mark.asyncio
    async def test_cannot_settle_unfinished_game(self, service):
        """Settlement needs a finished game."""
        game = stacked_game(("10S", "9H"), ("10C", "6D"))
        with pytest.raises(InvalidMoveError):
            await service.settle(game)

    @pytest.mark.asyncio
    async def test_concurrent_games_are_independent(self, service, ledger):
        """Games settled side by side each apply their own bet."""
        ledger.register("player-2", balance=500)
        winning = stacked_game(("10S", "9H"), ("10C", "6D"), "2C")
        losing = stacked_game(("10S", "9H"), ("10C", "6D"), "5C")
        losing.player.player_id = "player-2"

        for game in (winning, losing):
            service.play(game, Move.STAND, bet=30)
            service.croupier_makes_move(game)

        await asyncio.gather(
            service.determine_final_status(winning),
            service.determine_final_status(losing),
        )

        assert ledger.get(PLAYER_ID).balance == 1030
        assert ledger.get("player-2").balance == 470
