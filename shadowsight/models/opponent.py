"""
RandomOpponent: picks a uniformly random legal move.

The session controller only depends on the OpponentPolicy protocol, so a
stronger policy can replace this one without touching the controller.
"""

import random
from collections.abc import Sequence

import chess


class RandomOpponent:
    """Opponent that picks uniformly among the legal moves by index."""

    def __init__(self, rng: random.Random | None = None):
        """
        :param rng: source of randomness; pass a seeded Random for repeatable games
        """
        self._rng = rng or random.Random()

    def choose_move(self, legal_moves: Sequence[chess.Move]) -> chess.Move:
        """
        :raises ValueError: if there are no legal moves to choose from
        """
        if not legal_moves:
            raise ValueError("No legal moves to choose from")
        return legal_moves[self._rng.randrange(len(legal_moves))]
