"""Tests for BoardState, the python-chess backed rules engine.

Uses deterministic FEN positions from conftest.py for stalemate and insufficient
material, and constructs FEN strings directly for checkmate, fifty-move, and
in-progress states.
"""

import pytest
import chess

from shadowsight.exceptions import IllegalMoveError
from shadowsight.models.board_state import BoardState


class TestBoardStateTerminalStates:
    """Tests for game_status() and is_game_over() across terminal states."""

    def test_game_status_checkmate(self):
        # Fool's mate: white is already mated in this position
        bs = BoardState("rnb1kbnr/pppp1ppp/4p3/8/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3")
        assert bs.game_status() == "Checkmate"
        assert bs.is_game_over()
        assert bs.in_checkmate()

    def test_game_status_stalemate(self, stalemate_fen):
        bs = BoardState(stalemate_fen)
        assert bs.game_status() == "Stalemate"
        assert bs.is_game_over()
        assert not bs.in_checkmate()

    def test_game_status_insufficient_material(self, insufficient_material_fen):
        bs = BoardState(insufficient_material_fen)
        assert bs.game_status() == "Draw by insufficient material"
        assert bs.is_game_over()

    def test_game_status_fifty_move_rule(self):
        # KR vs K with the halfmove clock at 100 (fifty-move claimable)
        bs = BoardState("8/8/8/8/8/5k2/8/4K1R1 w - - 100 150")
        assert bs.game_status() == "Draw by fifty-move rule"
        assert bs.is_game_over()

    def test_game_status_threefold_repetition(self):
        bs = BoardState()
        for uci in ["g1f3", "g8f6", "f3g1", "f6g8"] * 2:
            bs.make_move(chess.Move.from_uci(uci))
        assert bs.game_status() == "Draw by threefold repetition"
        assert bs.is_game_over()

    def test_halfmove_clock_ninety_nine_is_still_live(self):
        # the draw is only claimable after the next quiet move
        bs = BoardState("8/8/8/8/8/5k2/8/4K1R1 w - - 99 150")
        assert not bs.is_game_over()
        assert bs.game_status() == "In progress"

        bs.apply_move(chess.G1, chess.G2)
        assert bs.is_game_over()
        assert bs.game_status() == "Draw by fifty-move rule"

    def test_position_seen_twice_is_still_live(self):
        bs = BoardState()
        for uci in ["g1f3", "g8f6", "f3g1", "f6g8", "g1f3", "g8f6", "f3g1"]:
            bs.make_move(chess.Move.from_uci(uci))
        assert not bs.is_game_over()
        assert bs.game_status() == "In progress"

        bs.make_move(chess.Move.from_uci("f6g8"))
        assert bs.is_game_over()

    def test_game_status_in_progress(self):
        bs = BoardState()
        assert bs.game_status() == "In progress"
        assert not bs.is_game_over()


class TestBoardStateMoves:
    def test_apply_move_returns_result(self):
        bs = BoardState()
        result = bs.apply_move(chess.E2, chess.E4)
        assert result is not None
        assert result.piece == chess.Piece(chess.PAWN, chess.WHITE)
        assert result.captured is None
        assert not result.is_capture
        assert result.uci == "e2e4"
        assert bs.turn_to_move() == chess.BLACK

    def test_apply_illegal_move_returns_none_and_keeps_position(self):
        bs = BoardState()
        before = bs.board.fen()
        assert bs.apply_move(chess.E2, chess.E5) is None
        assert bs.board.fen() == before

    def test_apply_move_from_empty_square_returns_none(self):
        bs = BoardState()
        assert bs.apply_move(chess.E4, chess.E5) is None

    def test_make_move_raises_illegal_move_error(self):
        bs = BoardState()
        with pytest.raises(IllegalMoveError) as exc:
            bs.make_move(chess.Move.from_uci("e2e5"))
        assert exc.value.move == "e2e5"
        assert exc.value.position_fen == chess.STARTING_FEN

    def test_capture_reports_captured_piece(self):
        bs = BoardState("rnbqkbnr/ppp1pppp/8/3p4/4P3/8/PPPP1PPP/RNBQKBNR w KQkq d6 0 2")
        result = bs.apply_move(chess.E4, chess.D5)
        assert result.captured == chess.Piece(chess.PAWN, chess.BLACK)
        assert result.is_capture

    def test_en_passant_reports_captured_pawn(self):
        bs = BoardState("rnbqkbnr/ppp1p1pp/8/3pPp2/8/8/PPPP1PPP/RNBQKBNR w KQkq f6 0 3")
        result = bs.apply_move(chess.E5, chess.F6)
        assert result.captured == chess.Piece(chess.PAWN, chess.BLACK)
        assert bs.piece_at(chess.F5) is None

    def test_pawn_promotion_defaults_to_queen(self):
        bs = BoardState("8/7P/8/8/8/8/8/k6K w - - 0 1")
        result = bs.apply_move(chess.H7, chess.H8)
        assert result.promotion == chess.QUEEN
        assert bs.piece_at(chess.H8) == chess.Piece(chess.QUEEN, chess.WHITE)

    def test_pawn_promotion_explicit_piece(self):
        for promotion_piece in [chess.ROOK, chess.BISHOP, chess.KNIGHT]:
            bs = BoardState("8/7P/8/8/8/8/8/k6K w - - 0 1")
            bs.apply_move(chess.H7, chess.H8, promotion=promotion_piece)
            assert bs.piece_at(chess.H8).piece_type == promotion_piece

    def test_promotion_argument_ignored_for_non_promoting_moves(self):
        bs = BoardState()
        result = bs.apply_move(chess.G1, chess.F3, promotion=chess.QUEEN)
        assert result is not None
        assert result.promotion is None

    def test_legal_moves_lists_all_moves(self):
        assert len(BoardState().legal_moves()) == 20

    def test_board_property_is_a_copy(self):
        bs = BoardState()
        bs.board.push(chess.Move.from_uci("e2e4"))
        assert bs.turn_to_move() == chess.WHITE


class TestBoardStateGridAndReset:
    def test_board_grid_is_rank_eight_first(self):
        grid = BoardState().board_grid()
        assert len(grid) == 8 and all(len(row) == 8 for row in grid)
        assert grid[0][0] == chess.Piece(chess.ROOK, chess.BLACK)  # a8
        assert grid[7][4] == chess.Piece(chess.KING, chess.WHITE)  # e1
        assert grid[4][4] is None  # e4

    def test_reset_restores_construction_position(self):
        bs = BoardState()
        bs.apply_move(chess.E2, chess.E4)
        bs.reset()
        assert bs.board.fen() == chess.STARTING_FEN

        custom = BoardState("8/8/8/8/8/5k2/8/4K1R1 w - - 0 1")
        custom.apply_move(chess.G1, chess.G2)
        custom.reset()
        assert custom.board.fen() == "8/8/8/8/8/5k2/8/4K1R1 w - - 0 1"
