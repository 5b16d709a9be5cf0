"""Card and Deck classes - immutable card representations."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random

from blackjack.errors import EmptyDeckError


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Figure(Enum):
    """Court card figures."""

    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Ace:
    """The Ace rank, worth 1 or 11 depending on the hand."""

    def __str__(self) -> str:
        return "A"


@dataclass(frozen=True, slots=True)
class Number:
    """A numbered rank from 2 to 10."""

    pips: int

    def __post_init__(self) -> None:
        if not 2 <= self.pips <= 10:
            raise ValueError(f"Number rank must be between 2 and 10, got {self.pips}")

    def __str__(self) -> str:
        return str(self.pips)


@dataclass(frozen=True, slots=True)
class Court:
    """A court rank (Jack, Queen or King), always worth 10."""

    figure: Figure

    def __str__(self) -> str:
        return str(self.figure)


Rank = Ace | Number | Court

COURT_VALUE = 10

# Every rank of one suit, in deck construction order
RANKS: tuple[Rank, ...] = (
    Ace(),
    *(Number(pips) for pips in range(2, 11)),
    *(Court(figure) for figure in Figure),
)


def base_value(rank: Rank) -> int:
    """Return the hard point value of a rank (Ace = 1)."""
    match rank:
        case Ace():
            return 1
        case Number(pips=pips):
            return pips
        case Court():
            return COURT_VALUE
    raise TypeError(f"Unknown rank: {rank!r}")


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the hard point value (an Ace counts 1 until resolved)."""
        return base_value(self.rank)

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return isinstance(self.rank, Ace)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        rank: Rank
        if rank_str == "A":
            rank = Ace()
        elif rank_str == "T":
            rank = Number(10)
        elif rank_str in {f.value for f in Figure}:
            rank = Court(Figure(rank_str))
        elif rank_str.isdigit() and 2 <= int(rank_str) <= 10:
            rank = Number(int(rank_str))
        else:
            raise ValueError(f"Invalid rank: {rank_str}")

        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank, suit_map[suit_str])


class Deck:
    """A single 52-card deck that is drawn from at random positions."""

    def __init__(self, cards: list[Card] | None = None, rng: Random | None = None) -> None:
        """
        Initialize a deck.

        Args:
            cards: Cards in deck order (a full ordered deck if not provided)
            rng: Random number generator used for shuffling and drawing
        """
        self._rng = rng or Random()
        self._cards: list[Card] = (
            list(cards) if cards is not None
            else [Card(rank, suit) for suit in Suit for rank in RANKS]
        )

    def shuffle(self) -> None:
        """Shuffle the remaining cards."""
        self._rng.shuffle(self._cards)

    def draw(self) -> Card:
        """Remove and return the card at a random remaining position."""
        if not self._cards:
            raise EmptyDeckError()
        index = self._rng.randrange(len(self._cards))
        return self._cards.pop(index)

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)


def new_deck(rng: Random | None = None) -> Deck:
    """Build all 52 cards and shuffle them."""
    deck = Deck(rng=rng)
    deck.shuffle()
    return deck
