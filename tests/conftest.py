"""Pytest fixtures for blackjack rules engine tests."""

import pytest
from random import Random

from hypothesis import strategies as st

from blackjack.cards import Card, Deck, Suit, RANKS, new_deck
from blackjack.hand import Hand
from blackjack.ledger import InMemoryBalanceLedger
from blackjack.rules import TableRules
from blackjack.service import GameService
from blackjack.game import BlackjackGame

PLAYER_ID = "player-1"


class StackedRandom(Random):
    """Random generator that never shuffles and always draws the first card."""

    def shuffle(self, x) -> None:
        pass

    def randrange(self, start, stop=None, step=1) -> int:
        return 0


def cards(*codes: str) -> list[Card]:
    """Build cards from strings like 'AS', '10H', 'KD'."""
    return [Card.from_string(code) for code in codes]


def stacked_deck(*codes: str) -> Deck:
    """A deck that deals the given cards in order."""
    return Deck(cards=cards(*codes), rng=StackedRandom())


def stacked_game(
    player: tuple[str, str],
    croupier: tuple[str, str],
    *draws: str,
    rules: TableRules | None = None,
) -> BlackjackGame:
    """
    A dealt game with known hands.

    Args:
        player: The player's two cards
        croupier: The croupier's two cards
        *draws: Cards dealt afterwards, in order
    """
    deck = stacked_deck(*player, *croupier, *draws)
    game = BlackjackGame(PLAYER_ID, rules=rules, rng=StackedRandom(), deck=deck)
    game.deal_initial_cards()
    return game


def hand_of(*codes: str) -> Hand:
    """A hand holding the given cards."""
    return Hand(cards=cards(*codes))


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    return new_deck(rng)


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return hand_of("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return hand_of("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return hand_of("10S", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return hand_of("10S", "6H", "KC")


@pytest.fixture
def rules():
    """Default table rules."""
    return TableRules()


@pytest.fixture
def game(rng):
    """A new, dealt game instance."""
    game = BlackjackGame(PLAYER_ID, rng=rng)
    game.deal_initial_cards()
    return game


@pytest.fixture
def ledger():
    """In-memory balance ledger with one registered player."""
    ledger = InMemoryBalanceLedger()
    ledger.register(PLAYER_ID, name="Alice", balance=1000)
    return ledger


@pytest.fixture
def service(ledger, rules):
    """Game service backed by the in-memory ledger."""
    return GameService(ledger, rules=rules, settlement_timeout=1.0)


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(RANKS))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random hand."""
    return Hand(cards=draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards)))
