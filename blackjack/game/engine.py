"""Blackjack game engine with state machine."""

import logging
from random import Random
from typing import Callable

from transitions import Machine

from blackjack.cards import Card, Deck, new_deck
from blackjack.errors import EmptyDeckError, InvalidMoveError, MoveBeforeBetError
from blackjack.hand import BLACKJACK
from blackjack.rules import TableRules
from blackjack.game.events import EventEmitter, EventType, GameEvent
from blackjack.game.participants import Croupier, Participant, Player
from blackjack.game.state import GamePhase, GameStatus, Move, Outcome, PlayerStatus

logger = logging.getLogger(__name__)


class BlackjackGame:
    """
    One game of blackjack between a player and the croupier.

    The game owns its deck, both participants and its random generator.
    Every operation either completes or raises without changing state.
    """

    # State machine states
    STATES = [s.name.lower() for s in GamePhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "cards_dealt", "source": "dealing", "dest": "betting"},
        {"trigger": "bet_placed", "source": "betting", "dest": "player_turn"},
        {"trigger": "player_done", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "dealer_done", "source": "dealer_turn", "dest": "resolving"},
        {"trigger": "resolve", "source": "resolving", "dest": "finished"},
        {"trigger": "abandon", "source": "*", "dest": "abandoned"},
    ]

    def __init__(
        self,
        player_id: str,
        rules: TableRules | None = None,
        rng: Random | None = None,
        deck: Deck | None = None,
        games_won: int = 0,
    ) -> None:
        """
        Initialize a new game with a freshly shuffled deck.

        Args:
            player_id: Identity of the persisted player profile
            rules: Table rules (uses defaults if not provided)
            rng: Random number generator for reproducible games
            deck: Prepared deck (a new shuffled deck if not provided)
            games_won: Player's win count carried into this game
        """
        self.rules = rules or TableRules()
        self.rng = rng or Random()
        self.deck = deck if deck is not None else new_deck(self.rng)

        self.player = Player(player_id, games_won=games_won)
        self.croupier = Croupier()
        self.player_wins = False
        self.outcome: Outcome | None = None

        # Settlement steps already applied by the balance collaborator
        self.settled_steps: set[str] = set()
        self.settled = False

        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="dealing",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> GamePhase:
        """Get current game phase as enum."""
        return GamePhase[self._machine_state.upper()]  # type: ignore

    @property
    def status(self) -> GameStatus:
        """Overall game status."""
        if self.phase == GamePhase.FINISHED:
            return GameStatus.FINISHED
        if self.phase == GamePhase.ABANDONED:
            return GameStatus.ABANDONED
        return GameStatus.IN_PROGRESS

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def _require_phase(self, phase: GamePhase, action: str) -> None:
        if self.phase != phase:
            raise InvalidMoveError(f"Cannot {action} while game is in phase {self.phase}")

    def _draw(self) -> Card:
        """Draw a card, abandoning the game if the deck is exhausted."""
        try:
            return self.deck.draw()
        except EmptyDeckError:
            logger.error("Deck exhausted for player %s, abandoning game", self.player.player_id)
            self.abandon()
            self.events.emit_new(EventType.GAME_ABANDONED, reason="empty deck")
            raise

    def _deal_card_to(self, participant: Participant) -> Card:
        """Deal a card to a participant."""
        card = self._draw()
        participant.take(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card),
            hand="croupier" if participant is self.croupier else "player",
            hand_value=participant.hand_value,
        )
        return card

    def deal_initial_cards(self) -> None:
        """Deal two cards each to the player and the croupier."""
        self._require_phase(GamePhase.DEALING, "deal")

        # Player's two cards first, then the croupier's
        self._deal_card_to(self.player)
        self._deal_card_to(self.player)
        self._deal_card_to(self.croupier)
        self._deal_card_to(self.croupier)

        self.events.emit_new(
            EventType.GAME_STARTED,
            player_id=self.player.player_id,
            hand_value=self.player.hand_value,
        )
        logger.debug(
            "Dealt %s to player %s and %s to croupier",
            self.player.hand,
            self.player.player_id,
            self.croupier.hand,
        )

        if self.player.hand_value == BLACKJACK:
            self.player.advance(PlayerStatus.BLACKJACK)
            self.events.emit_new(EventType.PLAYER_BLACKJACK)

        self.cards_dealt()

    def bet(self, amount: int) -> None:
        """
        Record the player's bet.

        Args:
            amount: Bet amount

        Raises:
            InvalidBetError: If the amount is outside the table limits
            InvalidMoveError: If a bet cannot be placed now
        """
        self._require_phase(GamePhase.BETTING, "bet")
        self.rules.validate_bet(amount)

        self.player.initial_bet = amount
        self.events.emit_new(EventType.BET_PLACED, amount=amount)
        self.bet_placed()

        # A natural leaves nothing to play
        if self.player.status.ends_turn:
            self.player_done()

    def move(self, move: Move) -> None:
        """
        Apply a player move.

        Raises:
            MoveBeforeBetError: If no bet has been recorded
            InvalidMoveError: If the move is unknown or the player's turn is over
        """
        if not self.player.has_bet:
            raise MoveBeforeBetError()

        match move:
            case Move.HIT:
                self.hit()
            case Move.STAND:
                self.stand()
            case _:
                raise InvalidMoveError(f"Unknown move: {move!r}")

    def hit(self) -> None:
        """Player hits (takes another card)."""
        self._require_phase(GamePhase.PLAYER_TURN, "hit")

        self._deal_card_to(self.player)
        self.player.advance(PlayerStatus.HIT)
        value = self.player.hand_value
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=value)

        if value > BLACKJACK:
            self.player.advance(PlayerStatus.BUST)
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=value)
        elif value == BLACKJACK:
            self.player.advance(PlayerStatus.STAND)
            self.events.emit_new(EventType.PLAYER_STAND, hand_value=value)

        if self.player.status.ends_turn:
            self.player_done()

    def stand(self) -> None:
        """Player stands (keeps current hand)."""
        self._require_phase(GamePhase.PLAYER_TURN, "stand")

        self.player.advance(PlayerStatus.STAND)
        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player.hand_value)
        self.player_done()

    def play_dealer(self) -> None:
        """Croupier draws until reaching the standing total or busting."""
        self._require_phase(GamePhase.DEALER_TURN, "play dealer")

        # Nothing the croupier draws can change a bust
        if self.player.status == PlayerStatus.BUST:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.croupier.hand_value)
            self.dealer_done()
            return

        while self._dealer_should_hit():
            self._deal_card_to(self.croupier)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.croupier.hand_value)

        if self.croupier.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.croupier.hand_value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.croupier.hand_value)

        self.dealer_done()

    def _dealer_should_hit(self) -> bool:
        """Determine if dealer should hit."""
        return self.croupier.hand_value < self.rules.dealer_stands_on

    def _decide_outcome(self) -> Outcome:
        """Apply the outcome rules in priority order."""
        status = self.player.status
        player_value = self.player.hand_value
        croupier_value = self.croupier.hand_value

        if status == PlayerStatus.BLACKJACK:
            return Outcome.WIN
        if player_value <= BLACKJACK and player_value > croupier_value:
            return Outcome.WIN
        if croupier_value > BLACKJACK:
            return Outcome.WIN
        if status == PlayerStatus.BUST:
            return Outcome.LOSE
        if player_value <= BLACKJACK and player_value <= croupier_value:
            return Outcome.LOSE
        return Outcome.PUSH

    def determine_outcome(self) -> Outcome:
        """
        Decide the winner and finish the game.

        Settlement with the balance collaborator is not done here.

        Returns:
            The outcome from the player's side
        """
        self._require_phase(GamePhase.RESOLVING, "resolve")

        outcome = self._decide_outcome()

        if outcome == Outcome.WIN:
            self.player.advance(PlayerStatus.WIN)
            self.player.games_won += 1
            self.player_wins = True
            self.events.emit_new(
                EventType.PLAYER_WINS,
                amount=self.player.initial_bet,
                hand_value=self.player.hand_value,
            )
        elif outcome == Outcome.LOSE:
            self.player.advance(PlayerStatus.LOSE)
            self.player_wins = False
            self.events.emit_new(
                EventType.PLAYER_LOSES,
                amount=self.player.initial_bet,
                hand_value=self.player.hand_value,
            )
        else:
            self.events.emit_new(EventType.PUSH, hand_value=self.player.hand_value)

        self.outcome = outcome
        self.resolve()
        self.events.emit_new(EventType.GAME_FINISHED, outcome=outcome.value)
        logger.info(
            "Game finished for player %s: %s (player %d, croupier %d)",
            self.player.player_id,
            outcome.value,
            self.player.hand_value,
            self.croupier.hand_value,
        )
        return outcome

    @property
    def can_move(self) -> bool:
        """Check if the player may hit or stand."""
        return self.phase == GamePhase.PLAYER_TURN
