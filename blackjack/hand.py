"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from typing import Iterator, Sequence

from blackjack.cards import Card

BLACKJACK = 21
SOFT_ACE_BONUS = 10


def resolve_aces(cards: Sequence[Card], running_total: int | None = None) -> tuple[int, ...]:
    """
    Resolve the point value of every card in a hand.

    Every Ace first counts 1. Then, walking the hand in order, each Ace is
    promoted to 11 if that keeps the running total at or below 21.

    Args:
        cards: Cards in hand order
        running_total: Value of the non-Ace cards (computed if not provided)

    Returns:
        The resolved value of each card, in hand order
    """
    if running_total is None:
        running_total = sum(card.value for card in cards if not card.is_ace)

    values = [card.value for card in cards]
    running_total += sum(1 for card in cards if card.is_ace)

    for i, card in enumerate(cards):
        if card.is_ace and running_total + SOFT_ACE_BONUS <= BLACKJACK:
            values[i] += SOFT_ACE_BONUS
            running_total += SOFT_ACE_BONUS

    return tuple(values)


def hand_value(cards: Sequence[Card]) -> int:
    """Return the total value of a hand after Ace resolution."""
    return sum(resolve_aces(cards))


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    @property
    def values(self) -> tuple[int, ...]:
        """Resolved value of each card, in hand order."""
        return resolve_aces(self.cards)

    @property
    def value(self) -> int:
        """Total hand value."""
        return sum(self.values)

    @property
    def is_soft(self) -> bool:
        """Check if an Ace in the hand currently counts 11."""
        return any(
            card.is_ace and value > card.value
            for card, value in zip(self.cards, self.values)
        )

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == BLACKJACK

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > BLACKJACK

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"
