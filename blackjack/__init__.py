"""Blackjack rules engine - single table, one player against the croupier."""

from blackjack.cards import Ace, Card, Court, Deck, Figure, Number, Rank, Suit, new_deck
from blackjack.errors import (
    BlackjackError,
    EmptyDeckError,
    InvalidBetError,
    InvalidMoveError,
    MoveBeforeBetError,
    SettlementFailure,
)
from blackjack.hand import Hand, hand_value, resolve_aces
from blackjack.rules import TableRules

__all__ = [
    "Ace",
    "Card",
    "Court",
    "Deck",
    "Figure",
    "Number",
    "Rank",
    "Suit",
    "new_deck",
    "BlackjackError",
    "EmptyDeckError",
    "InvalidBetError",
    "InvalidMoveError",
    "MoveBeforeBetError",
    "SettlementFailure",
    "Hand",
    "hand_value",
    "resolve_aces",
    "TableRules",
]
