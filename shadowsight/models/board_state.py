from dataclasses import dataclass

import chess

from ..exceptions import IllegalMoveError
from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MoveResult:
    """Description of a move that has been applied to the board."""

    from_square: chess.Square
    to_square: chess.Square
    piece: chess.Piece
    captured: chess.Piece | None = None
    promotion: chess.PieceType | None = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def uci(self) -> str:
        return chess.Move(self.from_square, self.to_square, self.promotion).uci()


class BoardState:
    """
    Rules engine for a session: wraps a python-chess Board and answers the
    questions the session controller asks about legality, turn and
    terminal status.
    """

    def __init__(self, fen: str = chess.STARTING_FEN):
        """
        :param fen: position restored by reset() (defaults to standard start)
        """
        self._initial_fen = fen
        self._board = chess.Board(fen)

    @property
    def board(self) -> chess.Board:
        """
        Return a copy of the current internal board.
        Use this for inspection only; do not mutate.
        """
        return self._board.copy()

    def reset(self) -> None:
        """Return to the position this rules engine was created with."""
        self._board = chess.Board(self._initial_fen)

    def turn_to_move(self) -> chess.Color:
        """Return chess.WHITE or chess.BLACK for whose turn it is."""
        return self._board.turn

    def is_game_over(self) -> bool:
        """
        True for checkmate, stalemate, insufficient material, and draws by
        repetition or the fifty-move rule that have already happened. A draw
        the side to move could only claim with its next move does not count.
        """
        return (
            self._board.is_game_over()
            or self._fifty_moves_reached()
            or self._threefold_reached()
        )

    def in_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def piece_at(self, square: chess.Square) -> chess.Piece | None:
        return self._board.piece_at(square)

    def legal_moves(self) -> list[chess.Move]:
        """Return a list of all legal moves in the current position."""
        return list(self._board.legal_moves)

    def board_grid(self) -> list[list[chess.Piece | None]]:
        """
        Return the 8x8 piece placement, rank 8 first and file a first in
        each row, matching how the board is drawn for white.
        """
        return [
            [self._board.piece_at(chess.square(file, rank)) for file in range(8)]
            for rank in range(7, -1, -1)
        ]

    def make_move(self, move: chess.Move) -> MoveResult:
        """
        Push a move to the board if it is legal.
        :raises IllegalMoveError: if the move is not legal in this position
        """
        if move not in self._board.legal_moves:
            raise IllegalMoveError(move.uci(), self._board.fen())

        piece = self._board.piece_at(move.from_square)
        captured = None
        if self._board.is_en_passant(move):
            captured = chess.Piece(chess.PAWN, not self._board.turn)
        elif self._board.is_capture(move):
            captured = self._board.piece_at(move.to_square)

        self._board.push(move)
        logger.debug(f"Applied {move.uci()}")
        return MoveResult(
            from_square=move.from_square,
            to_square=move.to_square,
            piece=piece,
            captured=captured,
            promotion=move.promotion,
        )

    def apply_move(
        self,
        src_square: chess.Square,
        dst_square: chess.Square,
        promotion: chess.PieceType | None = chess.QUEEN,
    ) -> MoveResult | None:
        """
        Create a Move from two square indexes and push it.
        The promotion piece is only used when a pawn reaches the last rank.
        Returns None if the move is illegal.
        """
        piece = self._board.piece_at(src_square)

        if (
            piece
            and piece.piece_type == chess.PAWN
            and (
                (piece.color == chess.WHITE and chess.square_rank(dst_square) == 7)
                or (piece.color == chess.BLACK and chess.square_rank(dst_square) == 0)
            )
        ):
            mv = chess.Move(src_square, dst_square, promotion=promotion or chess.QUEEN)
        else:
            mv = chess.Move(src_square, dst_square)

        try:
            return self.make_move(mv)
        except IllegalMoveError as e:
            logger.debug(f"Rejected move: {e}")
            return None

    def game_status(self) -> str:
        """
        Return a human-readable game status:
         - 'Checkmate'
         - 'Stalemate'
         - 'Draw by insufficient material'
         - 'Draw by fifty-move rule'
         - 'Draw by threefold repetition'
         - 'In progress'
        """
        b = self._board
        if b.is_checkmate():
            return "Checkmate"
        if b.is_stalemate():
            return "Stalemate"
        if b.is_insufficient_material():
            return "Draw by insufficient material"
        if self._fifty_moves_reached():
            return "Draw by fifty-move rule"
        if self._threefold_reached():
            return "Draw by threefold repetition"
        return "In progress"

    def _fifty_moves_reached(self) -> bool:
        return self._board.halfmove_clock >= 100

    def _threefold_reached(self) -> bool:
        return self._board.is_repetition(3)
