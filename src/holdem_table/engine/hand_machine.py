"""Hand state machine: drives one hand from the blinds to settlement."""

import inspect
import random
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from pokerkit import Card

from holdem_table.config import TableConfig
from holdem_table.engine.actions import (
    Action,
    ActionType,
    DecisionContext,
    SeatView,
    amount_to_call,
    legal_actions,
    validate_action,
)
from holdem_table.engine.deck import Deck, format_cards
from holdem_table.engine.errors import (
    HandStateError,
    IllegalActionError,
    InsufficientPlayersError,
    SeatError,
)
from holdem_table.engine.evaluator import HandEvaluator, pokerkit_rank
from holdem_table.engine.events import (
    ActionRejected,
    ActionTaken,
    BlindPosted,
    ButtonMoved,
    CardsRevealed,
    CommunityCardsDealt,
    Event,
    EventSink,
    HandDecided,
    HandSettled,
    HandStarted,
    HoleCardsDealt,
    LoggingEventSink,
    StageChanged,
    TurnChanged,
)
from holdem_table.engine.ledger import PotLedger
from holdem_table.engine.registry import Player, PlayerRegistry
from holdem_table.engine.sequencer import TurnSequencer
from holdem_table.engine.settlement import Settlement, settle_hand
from holdem_table.observability.logger import get_logger

logger = get_logger(__name__)


class HandStage(str, Enum):
    PRE_FLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    RESET = "reset"


BETTING_STAGES = (HandStage.PRE_FLOP, HandStage.FLOP, HandStage.TURN, HandStage.RIVER)
COMMUNITY_CARD_COUNTS = {HandStage.FLOP: 3, HandStage.TURN: 1, HandStage.RIVER: 1}
HOLE_CARD_COUNT = 2
BOARD_SIZE = 5


class DecisionProvider(Protocol):
    """Supplies one action per turn; may be a plain or an async method."""

    def decide(self, context: DecisionContext) -> Action | Awaitable[Action]:
        ...


@dataclass
class ActionRecord:
    """A single applied action."""
    seat: int
    stage: str
    action: Action
    paid: int
    defaulted: bool = False


@dataclass
class HandResult:
    """Result of a completed hand."""
    hand_number: int
    button_seat: int
    board: tuple[Card, ...]
    pot: int
    payouts: dict[int, int]
    winners: tuple[int, ...]
    revealed: dict[int, tuple[Card, ...]]
    decided_by_elimination: bool
    stages: list[str] = field(default_factory=list)
    actions: list[ActionRecord] = field(default_factory=list)
    final_stacks: dict[int, int] = field(default_factory=dict)

    @property
    def board_cards(self) -> str:
        return format_cards(self.board)


class HandStateMachine:
    """
    Runs hands at one table.

    Stages advance PreFlop -> Flop -> Turn -> River -> Reset. A hand ends in
    Reset with every card revealed; the next hand can only start once the
    collaborator has shown the reveal and called ``acknowledge_reveal()``.
    """

    def __init__(
        self,
        config: TableConfig,
        evaluator: HandEvaluator = pokerkit_rank,
        deck_factory: Callable[[], Deck] | None = None,
        sinks: Iterable[EventSink] | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the table.

        Args:
            config: Buy-in, blinds and flow settings
            evaluator: Ranks a player's hole cards against the board
            deck_factory: Builds the deck for each hand (shuffled deck if omitted)
            sinks: Event observers (a logging sink if omitted)
            rng: Random source for the default deck factory
        """
        self.config = config
        self.evaluator = evaluator
        self.rng = rng or random.Random()
        self.deck_factory = deck_factory or (lambda: Deck(self.rng))
        self.sinks = list(sinks) if sinks is not None else [LoggingEventSink()]

        self.registry = PlayerRegistry(config.max_seats)
        self.providers: dict[int, DecisionProvider] = {}
        self.ledger = PotLedger()

        self.stage = HandStage.PRE_FLOP
        self.hand_number = 0
        self.button_seat: int | None = None
        self.deck: Deck | None = None
        self.sequencer: TurnSequencer | None = None
        self.community_cards: list[Card] = []

        self._stages_seen: list[str] = []
        self._actions: list[ActionRecord] = []
        self._log = logger

    # -- table membership -------------------------------------------------

    def seat_player(
        self,
        name: str,
        provider: DecisionProvider,
        stack: int | None = None,
    ) -> Player:
        """Seat a player with the buy-in (or a given stack) and their provider."""
        player = self.registry.join(name, self.config.buy_in if stack is None else stack)
        self.providers[player.seat] = provider
        return player

    def remove_player(self, seat: int) -> Player:
        player = self.registry.leave(seat)
        self.providers.pop(seat, None)
        return player

    @property
    def players(self) -> list[Player]:
        return self.registry.seated

    @property
    def current_player(self) -> Player | None:
        """The one player whose turn it is, if a betting round is running."""
        return self.sequencer.current if self.sequencer else None

    # -- hand flow --------------------------------------------------------

    async def play_hand(self) -> HandResult:
        """
        Play one hand from the blinds to settlement.

        Returns:
            HandResult; the machine is left in Reset until acknowledged.

        Raises:
            InsufficientPlayersError: fewer than two players have chips
            DeckExhaustedError: the deck cannot cover hole and board cards

        Any other error raised mid-hand aborts the hand (contributions are
        refunded and the table returns to PreFlop) before propagating.
        """
        if self.stage is not HandStage.PRE_FLOP:
            raise HandStateError(f"Cannot start a hand during {self.stage.value}")

        self._start_hand()
        try:
            for stage in BETTING_STAGES:
                self._enter_stage(stage)
                if await self._run_betting_round():
                    break
            return self._reset()
        except BaseException:  # cancellation included
            self._abort_hand()
            raise

    def _abort_hand(self) -> None:
        # after settlement the pot is already empty
        refunded = self.ledger.refund_all() if self.ledger.total_pot() else 0
        self._log.error(
            "Hand aborted",
            extra={"extra_fields": {"stage": self.stage.value, "refunded": refunded}},
        )
        self.registry.reinstate_folded()
        self.registry.end_hand()
        self.community_cards = []
        self.deck = None
        self.sequencer = None
        self.stage = HandStage.PRE_FLOP

    def acknowledge_reveal(self) -> None:
        """Finish Reset after the reveal pause: clear the hand and return to PreFlop."""
        if self.stage is not HandStage.RESET:
            raise HandStateError(f"No reveal pending during {self.stage.value}")
        self.registry.end_hand()
        self.community_cards = []
        self.deck = None
        self.sequencer = None
        self.stage = HandStage.PRE_FLOP
        self._log.debug("Reveal acknowledged")

    def _start_hand(self) -> None:
        eligible = self.registry.with_chips()
        if len(eligible) < 2:
            logger.warning(
                "Not enough players to start a hand",
                extra={"extra_fields": {"players_with_chips": len(eligible)}},
            )
            raise InsufficientPlayersError(
                f"Need at least 2 players with chips, have {len(eligible)}"
            )
        for player in eligible:
            if player.seat not in self.providers:
                raise SeatError(f"Seat {player.seat} has no decision provider")

        # checked before anything moves so a short deck aborts cleanly
        deck = self.deck_factory()
        deck.require(HOLE_CARD_COUNT * len(eligible) + BOARD_SIZE)

        self.deck = deck
        self.hand_number += 1
        self._log = logger.bind(hand=self.hand_number)
        self._stages_seen = []
        self._actions = []
        self.community_cards = []

        players = self.registry.begin_hand()
        self.ledger.begin_hand(players)
        self.sequencer = TurnSequencer(players)
        self._emit(HandStarted(self.hand_number, seats=tuple(p.seat for p in players)))

    def _enter_stage(self, stage: HandStage) -> None:
        self.stage = stage
        self._stages_seen.append(stage.value)
        self._log.info("Stage started", extra={"extra_fields": {"stage": stage.value}})
        self._emit(StageChanged(self.hand_number, stage=stage.value))

        self.ledger.reset_round_contributions()
        ring = self.sequencer.ring

        if stage is HandStage.PRE_FLOP:
            self._advance_button()
            self._deal_hole_cards()
            big_blind_player = self._post_blinds()
            self.sequencer.begin_round(
                stage.value,
                first_to_act=ring.next(big_blind_player),
                closing_player=big_blind_player,
                current_bet=self.config.big_blind,
            )
        else:
            cards = self.deck.deal(COMMUNITY_CARD_COUNTS[stage])
            self.community_cards.extend(cards)
            self._emit(CommunityCardsDealt(
                self.hand_number,
                stage=stage.value,
                cards=tuple(cards),
                board=tuple(self.community_cards),
            ))
            first = ring.after_seat(self.button_seat)
            self.sequencer.begin_round(
                stage.value,
                first_to_act=first,
                closing_player=ring.previous(first),
            )

    def _advance_button(self) -> None:
        ring = self.sequencer.ring
        if self.button_seat is None:
            self.button_seat = next(iter(ring)).seat
        else:
            self.button_seat = ring.after_seat(self.button_seat).seat
        self._emit(ButtonMoved(self.hand_number, seat=self.button_seat))

    def _deal_hole_cards(self) -> None:
        players = list(self.sequencer.ring)
        for _ in range(HOLE_CARD_COUNT):
            for player in players:
                player.receive_card(self.deck.deal_card())
        for player in players:
            self._emit(HoleCardsDealt(
                self.hand_number, seat=player.seat, cards=tuple(player.hole_cards)
            ))

    def _post_blinds(self) -> Player:
        """Post both blinds; returns the big blind player."""
        ring = self.sequencer.ring
        small = ring.after_seat(self.button_seat)
        big = ring.next(small)
        for player, blind, amount in (
            (small, "small", self.config.small_blind),
            (big, "big", self.config.big_blind),
        ):
            posted = self.ledger.take_blind(player, amount)
            self._emit(BlindPosted(self.hand_number, seat=player.seat, blind=blind, amount=posted))
        self.ledger.check()
        return big

    async def _run_betting_round(self) -> bool:
        """
        Run turns until the round closes.

        Returns:
            True if folds left a single player (the hand is decided)
        """
        sequencer = self.sequencer
        while True:
            actor = sequencer.current
            sequencer.check_cursor()

            action, defaulted = None, False
            if self._needs_decision(actor):
                self._emit(TurnChanged(
                    self.hand_number,
                    seat=actor.seat,
                    stage=self.stage.value,
                    current_bet=sequencer.current_bet,
                    amount_to_call=amount_to_call(actor, sequencer.current_bet),
                ))
                action, defaulted = await self._request_action(actor)

            closed = sequencer.is_round_closed(actor)
            if action is not None:
                self._apply_action(actor, action, defaulted)
                if sequencer.is_decided():
                    winner = next(iter(sequencer.ring))
                    self._log.info("Hand decided by folds", extra={"extra_fields": {"seat": winner.seat}})
                    self._emit(HandDecided(self.hand_number, seat=winner.seat))
                    return True
                if action.action_type is ActionType.BET:
                    closed = False

            self.ledger.check()
            if closed:
                return False
            sequencer.advance()

    def _needs_decision(self, player: Player) -> bool:
        """An all-in player, or the last player with chips once matched, has nothing to decide."""
        if player.is_all_in:
            return False
        others_with_chips = [
            p for p in self.sequencer.ring if p is not player and not p.is_all_in
        ]
        if not others_with_chips and player.round_contribution >= self.sequencer.current_bet:
            return False
        return True

    async def _request_action(self, player: Player) -> tuple[Action, bool]:
        """
        Ask the player's provider for a legal action.

        Illegal answers are rejected and the provider is asked again, up to
        ``decision_retries`` times; after that the default action (check if
        free, otherwise fold) is used.
        """
        provider = self.providers[player.seat]
        current_bet = self.sequencer.current_bet

        for _ in range(self.config.decision_retries + 1):
            action = provider.decide(self._context_for(player))
            if inspect.isawaitable(action):
                action = await action
            try:
                validate_action(action, player, current_bet)
            except IllegalActionError as e:
                self._log.warning(
                    "Rejected action",
                    extra={"extra_fields": {"seat": player.seat, "reason": e.reason}},
                )
                self._emit(ActionRejected(
                    self.hand_number, seat=player.seat, action=action, reason=e.reason
                ))
                continue
            return action, False

        default = Action.call() if amount_to_call(player, current_bet) == 0 else Action.fold()
        self._log.warning(
            "Using default action",
            extra={"extra_fields": {"seat": player.seat, "action": str(default)}},
        )
        return default, True

    def _apply_action(self, player: Player, action: Action, defaulted: bool) -> None:
        sequencer = self.sequencer
        current_bet = sequencer.current_bet

        if action.action_type is ActionType.FOLD:
            self.registry.fold(player)
            sequencer.remove(player)
            paid = 0
        elif action.action_type is ActionType.CALL:
            paid = self.ledger.call(player, current_bet)
        else:
            paid = self.ledger.bet(player, action.amount)
            sequencer.record_bet(player, max(player.round_contribution, current_bet))

        record = ActionRecord(
            seat=player.seat,
            stage=self.stage.value,
            action=action,
            paid=paid,
            defaulted=defaulted,
        )
        self._actions.append(record)
        self._log.info(
            "Action",
            extra={"extra_fields": {
                "seat": player.seat,
                "action": str(action),
                "paid": paid,
                "pot": self.ledger.total_pot(),
            }},
        )
        self._emit(ActionTaken(
            self.hand_number,
            seat=player.seat,
            stage=self.stage.value,
            action=action,
            paid=paid,
            pot=self.ledger.total_pot(),
            defaulted=defaulted,
        ))

    def _reset(self) -> HandResult:
        self.stage = HandStage.RESET
        self._stages_seen.append(HandStage.RESET.value)
        self._log.info("Stage started", extra={"extra_fields": {"stage": HandStage.RESET.value}})
        self._emit(StageChanged(self.hand_number, stage=HandStage.RESET.value))

        settlement: Settlement = settle_hand(
            self.registry,
            self.ledger,
            self.community_cards,
            self.evaluator,
            self.button_seat,
        )
        self._emit(CardsRevealed(self.hand_number, hole_cards=settlement.revealed))
        self._emit(HandSettled(
            self.hand_number,
            payouts=settlement.payouts,
            winners=settlement.winners,
            pot=settlement.pot,
        ))

        return HandResult(
            hand_number=self.hand_number,
            button_seat=self.button_seat,
            board=tuple(self.community_cards),
            pot=settlement.pot,
            payouts=settlement.payouts,
            winners=settlement.winners,
            revealed=settlement.revealed,
            decided_by_elimination=settlement.decided_by_elimination,
            stages=list(self._stages_seen),
            actions=list(self._actions),
            final_stacks={p.seat: p.stack for p in self.registry.seated},
        )

    def _context_for(self, player: Player) -> DecisionContext:
        current_bet = self.sequencer.current_bet
        return DecisionContext(
            hand_number=self.hand_number,
            stage=self.stage.value,
            seat=player.seat,
            name=player.name,
            stack=player.stack,
            hole_cards=tuple(player.hole_cards),
            round_contribution=player.round_contribution,
            current_bet=current_bet,
            amount_to_call=amount_to_call(player, current_bet),
            pot=self.ledger.total_pot(),
            community_cards=tuple(self.community_cards),
            legal_actions=tuple(legal_actions(player, current_bet)),
            opponents=tuple(
                SeatView(
                    seat=p.seat,
                    name=p.name,
                    stack=p.stack,
                    round_contribution=p.round_contribution,
                    status=p.status,
                )
                for p in self.registry.dealt_in
                if p is not player
            ),
        )

    def _emit(self, event: Event) -> None:
        for sink in self.sinks:
            sink.emit(event)
