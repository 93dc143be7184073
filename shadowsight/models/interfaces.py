"""Interfaces for the collaborators the session controller depends on.

The controller only talks to these protocols, so tests substitute small
doubles and the desktop build plugs in python-chess, wx and a JSON file.
"""

from collections.abc import Callable, Sequence
from typing import Protocol

import chess

from .board_state import MoveResult


class RulesEngine(Protocol):
    """Authoritative chess rules: legality, turn and terminal status."""

    def reset(self) -> None: ...

    def turn_to_move(self) -> chess.Color: ...

    def is_game_over(self) -> bool: ...

    def in_checkmate(self) -> bool: ...

    def piece_at(self, square: chess.Square) -> chess.Piece | None: ...

    def legal_moves(self) -> list[chess.Move]: ...

    def apply_move(
        self,
        src_square: chess.Square,
        dst_square: chess.Square,
        promotion: chess.PieceType | None = chess.QUEEN,
    ) -> MoveResult | None:
        """Apply a move, returning None if it is illegal."""
        ...

    def board_grid(self) -> list[list[chess.Piece | None]]: ...

    def game_status(self) -> str: ...


class KeyValueStore(Protocol):
    """Durable string storage keyed by fixed identifiers."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class OpponentPolicy(Protocol):
    """Chooses the opponent's reply from the legal moves."""

    def choose_move(self, legal_moves: Sequence[chess.Move]) -> chess.Move: ...


class AudioCuePlayer(Protocol):
    """Fire-and-forget sound for a named event category."""

    def play(self, cue: str) -> None: ...


class AdProvider(Protocol):
    """Interstitial trigger. Callers must not assume it succeeds."""

    def request_ad(self, context_tag: str) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay on the game's thread of control."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None: ...
