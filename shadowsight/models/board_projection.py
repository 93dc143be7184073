"""Projection of the rules-engine board into drawable cells."""

from dataclasses import dataclass

import chess

from .board_state import MoveResult


@dataclass(frozen=True)
class CellDescriptor:
    """Everything a renderer needs to draw one square."""

    square: chess.Square
    name: str
    piece: chess.Piece | None
    is_selected: bool
    is_last_move: bool
    is_light: bool


def project_board(
    grid: list[list[chess.Piece | None]],
    selected_square: chess.Square | None = None,
    last_move: MoveResult | None = None,
    orientation: chess.Color = chess.WHITE,
) -> list[CellDescriptor]:
    """
    Build the 64 cells of the board in display order, top-left first.

    :param grid: piece placement from RulesEngine.board_grid(), rank 8 first
    :param selected_square: square whose piece awaits a destination
    :param last_move: move to highlight at both endpoints
    :param orientation: side drawn at the bottom of the board
    """
    highlighted = set()
    if last_move is not None:
        highlighted = {last_move.from_square, last_move.to_square}

    cells = []
    for row in range(8):
        for col in range(8):
            if orientation == chess.WHITE:
                file, rank = col, 7 - row
            else:
                file, rank = 7 - col, row
            square = chess.square(file, rank)
            cells.append(
                CellDescriptor(
                    square=square,
                    name=chess.square_name(square),
                    piece=grid[7 - rank][file],
                    is_selected=square == selected_square,
                    is_last_move=square in highlighted,
                    # a8 and h1 are light squares
                    is_light=(file + rank) % 2 == 1,
                )
            )
    return cells
