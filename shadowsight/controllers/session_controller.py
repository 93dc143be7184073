import chess
from blinker import Signal

from ..audio.tones import AudioCue
from ..config.settings import GameSettings
from ..exceptions import StorageError
from ..logging_config import get_logger
from ..models.ads import request_ad_best_effort
from ..models.board_projection import project_board
from ..models.board_state import MoveResult
from ..models.interfaces import (
    AdProvider,
    AudioCuePlayer,
    OpponentPolicy,
    RulesEngine,
    Scheduler,
)
from ..models.progression import ProgressionStore
from ..models.session_state import EndOfGame, GameOutcome, SessionPhase

logger = get_logger(__name__)


class SessionController:
    """
    Runs one human-vs-random-opponent session at a time.

    Turns clicks into moves on the rules engine, schedules the opponent's
    reply, plays sound cues, and at the end of the game updates and
    persists the player's progression before asking the view to show the
    result. Side to move and game-over status are always read from the
    rules engine, never cached here.

    Delayed work goes through the scheduler tagged with the session
    generation; a callback that fires after a reset finds a newer
    generation and does nothing.
    """

    def __init__(
        self,
        rules: RulesEngine,
        progression: ProgressionStore,
        opponent: OpponentPolicy,
        audio: AudioCuePlayer,
        scheduler: Scheduler,
        ads: AdProvider | None = None,
        settings: GameSettings | None = None,
    ):
        self.rules = rules
        self.progression = progression
        self.opponent = opponent
        self.audio = audio
        self.scheduler = scheduler
        self.ads = ads
        self.settings = settings or GameSettings()
        self.human_color: chess.Color = self.settings.human_color

        self.selected_square: chess.Square | None = None
        self.last_move: MoveResult | None = None
        self.end_of_game: EndOfGame | None = None
        self._phase = SessionPhase.AWAITING_SELECTION
        self._generation = 0

        # Signals the VIEW should subscribe to:
        #   board_updated: cells (list[CellDescriptor])
        #   phase_changed: phase (SessionPhase)
        #   progression_changed: record, rank
        #   game_over: outcome, reason, record
        #   modal_requested: outcome, reason, record, rank
        #   overlays_hidden: no arguments
        self.board_updated = Signal()
        self.phase_changed = Signal()
        self.progression_changed = Signal()
        self.game_over = Signal()
        self.modal_requested = Signal()
        self.overlays_hidden = Signal()

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def generation(self) -> int:
        return self._generation

    # —— Session lifecycle —— #

    def start_session(self) -> None:
        """Begin a fresh game from the rules engine's initial position."""
        self._generation += 1
        logger.info(f"Starting session {self._generation}")
        self._request_ad()
        self.overlays_hidden.send(self)

        self.rules.reset()
        self.selected_square = None
        self.last_move = None
        self.end_of_game = None

        self._emit_board_update()
        self._emit_progression()

        if self._is_human_turn():
            self._set_phase(SessionPhase.AWAITING_SELECTION)
        else:
            self._set_phase(SessionPhase.OPPONENT_THINKING)
            self._schedule(self.settings.opponent_delay_ms, self.run_opponent_turn)

    def reset_session(self) -> None:
        """Abandon the current game and start over. Pending delays become no-ops."""
        self.start_session()

    # —— Input —— #

    def handle_square_activated(self, square: chess.Square) -> None:
        """
        The human clicked a square. Selects one of their pieces, or tries
        to move the selected piece there. Ignored unless it is the human's
        turn in a live game.
        """
        if self._phase == SessionPhase.TERMINAL or self.rules.is_game_over():
            return
        if not self._is_human_turn():
            return

        piece = self.rules.piece_at(square)
        if piece is not None and piece.color == self.human_color:
            self.selected_square = square
            self._set_phase(SessionPhase.AWAITING_DESTINATION)
            self._emit_board_update()
            return

        if self.selected_square is None:
            return

        src = self.selected_square
        self.selected_square = None
        result = self.rules.apply_move(src, square, chess.QUEEN)

        if result is None:
            self._set_phase(SessionPhase.AWAITING_SELECTION)
            self._emit_board_update()
            return

        self._record_move(result)
        if not self.rules.is_game_over():
            self._set_phase(SessionPhase.OPPONENT_THINKING)
            self._schedule(self.settings.opponent_delay_ms, self.run_opponent_turn)
        self.evaluate_end_of_game()

    # —— Opponent —— #

    def run_opponent_turn(self) -> None:
        """Let the opponent policy pick and play a move, if it is its turn."""
        if self._phase == SessionPhase.TERMINAL or self.rules.is_game_over():
            return
        if self._is_human_turn():
            return

        moves = self.rules.legal_moves()
        if not moves:
            logger.error(
                "Opponent has no legal moves but the game is not over; turn stalled"
            )
            return

        move = self.opponent.choose_move(moves)
        result = self.rules.apply_move(move.from_square, move.to_square, move.promotion)
        if result is None:
            logger.error(f"Opponent chose an illegal move {move.uci()}; turn stalled")
            return

        self._record_move(result)
        self._set_phase(SessionPhase.AWAITING_SELECTION)
        self.evaluate_end_of_game()

    # —— End of game —— #

    def evaluate_end_of_game(self) -> EndOfGame | None:
        """
        Settle a finished game: sound, progression update, persistence, and
        the delayed reveal of the result. Returns None while the game is in
        progress. Settling happens once per session; later calls return the
        recorded result unchanged.
        """
        if not self.rules.is_game_over():
            return None
        if self.end_of_game is not None:
            return self.end_of_game

        self._set_phase(SessionPhase.TERMINAL)
        self.audio.play(AudioCue.END)

        outcome = GameOutcome.DRAW
        if self.rules.in_checkmate():
            # the side to move is the side that has been mated
            winner = not self.rules.turn_to_move()
            won = winner == self.human_color
            outcome = GameOutcome.WIN if won else GameOutcome.LOSS
            self.progression.apply_outcome(won)
            if not won:
                self._schedule(self.settings.loss_ad_delay_ms, self._request_ad)

        try:
            self.progression.save()
        except StorageError as e:
            logger.warning(f"Could not persist progression: {e}")

        reason = self.rules.game_status()
        record = self.progression.record
        self.end_of_game = EndOfGame(outcome=outcome, reason=reason, record=record)
        logger.info(
            f"Game over: {reason}, {outcome}; rating {record.rating}, "
            f"streak {record.streak}"
        )

        self._emit_progression()
        self.game_over.send(self, outcome=outcome, reason=reason, record=record)
        self._schedule(self.settings.reveal_delay_ms, self._reveal_end_of_game)
        return self.end_of_game

    def _reveal_end_of_game(self) -> None:
        self._request_ad()
        if self.end_of_game is None:
            return
        self.modal_requested.send(
            self,
            outcome=self.end_of_game.outcome,
            reason=self.end_of_game.reason,
            record=self.end_of_game.record,
            rank=self.progression.rank,
        )

    # —— Internal helpers —— #

    def _is_human_turn(self) -> bool:
        return self.rules.turn_to_move() == self.human_color

    def _record_move(self, result: MoveResult) -> None:
        self.last_move = result
        self.audio.play(AudioCue.CAPTURE if result.is_capture else AudioCue.MOVE)
        self._emit_board_update()

    def _schedule(self, delay_ms: int, callback) -> None:
        """Run callback after delay_ms unless the session has been reset meanwhile."""
        token = self._generation

        def fire():
            if token != self._generation:
                logger.debug(f"Dropping stale callback from session {token}")
                return
            callback()

        self.scheduler.call_later(delay_ms, fire)

    def _request_ad(self) -> None:
        request_ad_best_effort(self.ads, self.settings.ad_context_tag)

    def _set_phase(self, phase: SessionPhase) -> None:
        if phase != self._phase:
            self._phase = phase
            self.phase_changed.send(self, phase=phase)

    def _emit_board_update(self) -> None:
        cells = project_board(
            self.rules.board_grid(),
            self.selected_square,
            self.last_move,
            orientation=self.human_color,
        )
        self.board_updated.send(self, cells=cells)

    def _emit_progression(self) -> None:
        self.progression_changed.send(
            self, record=self.progression.record, rank=self.progression.rank
        )
