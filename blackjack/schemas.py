"""Pydantic schemas for reporting a game's state."""

from pydantic import BaseModel, Field
from typing import Literal

from blackjack.cards import Card
from blackjack.hand import Hand
from blackjack.game import BlackjackGame


class CardReport(BaseModel):
    """Card representation with its resolved value in the hand."""

    rank: str
    suit: str
    value: int = Field(..., ge=1, le=11)


class HandReport(BaseModel):
    """Hand representation."""

    cards: list[CardReport]
    value: int
    is_soft: bool
    is_blackjack: bool
    is_busted: bool

    @classmethod
    def from_hand(cls, hand: Hand) -> "HandReport":
        return cls(
            cards=[_card_report(card, value) for card, value in zip(hand.cards, hand.values)],
            value=hand.value,
            is_soft=hand.is_soft,
            is_blackjack=hand.is_blackjack,
            is_busted=hand.is_busted,
        )


class PlayerReport(BaseModel):
    """Player state."""

    player_id: str
    hand: HandReport
    status: Literal["playing", "hit", "stand", "bust", "blackjack", "win", "lose"]
    initial_bet: int = Field(..., ge=0)
    games_won: int = Field(..., ge=0)


class GameReport(BaseModel):
    """Snapshot of a game, handed off for reporting."""

    status: Literal["in_progress", "finished", "abandoned"]
    phase: str
    player: PlayerReport
    croupier: HandReport
    player_wins: bool
    outcome: Literal["win", "lose", "push"] | None = None
    settled: bool
    cards_remaining: int

    @classmethod
    def from_game(cls, game: BlackjackGame) -> "GameReport":
        """Build a report from a game in any phase."""
        player = game.player
        return cls(
            status=game.status.name.lower(),
            phase=game.phase.name.lower(),
            player=PlayerReport(
                player_id=player.player_id,
                hand=HandReport.from_hand(player.hand),
                status=player.status.name.lower(),
                initial_bet=player.initial_bet,
                games_won=player.games_won,
            ),
            croupier=HandReport.from_hand(game.croupier.hand),
            player_wins=game.player_wins,
            outcome=game.outcome.value if game.outcome else None,
            settled=game.settled,
            cards_remaining=game.deck.cards_remaining,
        )


def _card_report(card: Card, value: int) -> CardReport:
    return CardReport(rank=str(card.rank), suit=card.suit.name.lower(), value=value)
