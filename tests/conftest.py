"""Shared pytest fixtures for Shadow Sight tests.

Centralizes FEN position fixtures and the collaborator doubles the session
controller is wired with: a manual scheduler that only runs delayed
callbacks when told to, recording audio and ad providers, and a scripted
opponent.
"""

import chess
import pytest

from shadowsight.config.settings import GameSettings
from shadowsight.controllers.session_controller import SessionController
from shadowsight.models.board_state import BoardState
from shadowsight.models.progression import ProgressionStore
from shadowsight.models.storage import MemoryStore


class ManualScheduler:
    """Collects call_later requests and runs them only when asked."""

    def __init__(self):
        self.pending: list[tuple[int, object]] = []

    @property
    def delays(self) -> list[int]:
        return [delay for delay, _ in self.pending]

    def call_later(self, delay_ms, callback):
        self.pending.append((delay_ms, callback))

    def run_pending(self):
        """Run the callbacks queued so far, shortest delay first."""
        due = sorted(self.pending, key=lambda item: item[0])
        self.pending = []
        for _, callback in due:
            callback()

    def run_all(self, limit: int = 20):
        """Run callbacks until nothing is queued, including ones queued meanwhile."""
        for _ in range(limit):
            if not self.pending:
                return
            self.run_pending()
        raise AssertionError("scheduler did not drain")


class RecordingAudio:
    def __init__(self):
        self.cues: list[str] = []

    def play(self, cue):
        self.cues.append(str(cue))


class RecordingAds:
    def __init__(self):
        self.tags: list[str] = []

    def request_ad(self, context_tag):
        self.tags.append(context_tag)


class ScriptedOpponent:
    """Plays the listed UCI moves when legal, otherwise the first legal move."""

    def __init__(self, *ucis: str):
        self.script = [chess.Move.from_uci(u) for u in ucis]
        self.offered: list[list[chess.Move]] = []

    def choose_move(self, legal_moves):
        self.offered.append(list(legal_moves))
        while self.script:
            move = self.script.pop(0)
            if move in legal_moves:
                return move
        return legal_moves[0]


@pytest.fixture
def stalemate_fen() -> str:
    """FEN for a stalemate position: black king on a8 stalemated by white queen and king."""
    return "k7/2Q5/2K5/8/8/8/8/8 b - - 0 1"


@pytest.fixture
def insufficient_material_fen() -> str:
    """FEN for a draw by insufficient material: kings only."""
    return "4k3/8/8/8/8/8/8/4K3 w - - 0 1"


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def ads():
    return RecordingAds()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def make_session(scheduler, audio, ads, store):
    """Factory for a started SessionController over a chosen position."""

    def _make(fen=chess.STARTING_FEN, opponent=None, rating=None, streak=None, **game):
        if rating is not None:
            store.set("m_chess_elo", str(rating))
        if streak is not None:
            store.set("m_chess_streak", str(streak))
        progression = ProgressionStore(store)
        progression.load()
        controller = SessionController(
            rules=BoardState(fen),
            progression=progression,
            opponent=opponent or ScriptedOpponent(),
            audio=audio,
            scheduler=scheduler,
            ads=ads,
            settings=GameSettings(**game),
        )
        controller.start_session()
        return controller

    return _make


@pytest.fixture
def scripted_opponent():
    """The ScriptedOpponent class, for tests that script the opponent's replies."""
    return ScriptedOpponent
