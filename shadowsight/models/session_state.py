"""Session phase and game outcome definitions."""

from dataclasses import dataclass
from enum import StrEnum

from .progression import ProgressionRecord


class SessionPhase(StrEnum):
    """States of the session controller."""

    AWAITING_SELECTION = "awaiting_selection"
    AWAITING_DESTINATION = "awaiting_destination"
    OPPONENT_THINKING = "opponent_thinking"
    TERMINAL = "terminal"


class GameOutcome(StrEnum):
    """Result of a finished game from the human's point of view."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"

    @property
    def headline(self) -> str:
        match self:
            case GameOutcome.WIN:
                return "Victory"
            case GameOutcome.LOSS:
                return "Defeat"
            case _:
                return "Draw"


@dataclass(frozen=True)
class EndOfGame:
    """What the controller recorded when the game reached a terminal position."""

    outcome: GameOutcome
    reason: str
    record: ProgressionRecord
