"""Persistent skill rating, win streak and the rank derived from them."""

from dataclasses import dataclass, replace

from pydantic import TypeAdapter, ValidationError

from .interfaces import KeyValueStore
from ..exceptions import StorageError
from ..logging_config import get_logger

logger = get_logger(__name__)


RANKS = ("Novice", "Acolyte", "Warden", "Shadow", "Master", "Legend")
RANK_WIDTH = 400

DEFAULT_RATING = 400
DEFAULT_STREAK = 0

WIN_BASE_GAIN = 15
STREAK_BONUS = 2
LOSS_PENALTY = 10

RATING_KEY = "m_chess_elo"
STREAK_KEY = "m_chess_streak"

_int_adapter = TypeAdapter(int)


@dataclass(frozen=True)
class ProgressionRecord:
    """Rating and consecutive-win streak of the player."""

    rating: int = DEFAULT_RATING
    streak: int = DEFAULT_STREAK


@dataclass(frozen=True)
class Rank:
    """Named tier for a rating and how far the rating is through it."""

    name: str
    index: int
    progress_percent: float


def compute_rank(rating: int) -> Rank:
    """
    Bucket a rating into RANKS, RANK_WIDTH points per rank.

    Ratings past the last bucket stay in the last rank; negative ratings
    are shown as the first rank with no progress.
    """
    if rating < 0:
        return Rank(name=RANKS[0], index=0, progress_percent=0.0)
    index = min(rating // RANK_WIDTH, len(RANKS) - 1)
    progress = ((rating % RANK_WIDTH) / RANK_WIDTH) * 100
    return Rank(name=RANKS[index], index=index, progress_percent=progress)


def apply_outcome(record: ProgressionRecord, won: bool) -> ProgressionRecord:
    """
    Return the record after a decisive game.

    A win earns WIN_BASE_GAIN plus STREAK_BONUS per game of the current
    streak and extends the streak. A loss costs LOSS_PENALTY and clears the
    streak. Rating has no floor.
    """
    if won:
        return replace(
            record,
            rating=record.rating + WIN_BASE_GAIN + record.streak * STREAK_BONUS,
            streak=record.streak + 1,
        )
    return replace(record, rating=record.rating - LOSS_PENALTY, streak=0)


class ProgressionStore:
    """
    Owns the player's ProgressionRecord and keeps it in a KeyValueStore.
    """

    def __init__(
        self,
        store: KeyValueStore,
        rating_key: str = RATING_KEY,
        streak_key: str = STREAK_KEY,
    ):
        self.store = store
        self.rating_key = rating_key
        self.streak_key = streak_key
        self.record = ProgressionRecord()

    @property
    def rank(self) -> Rank:
        return compute_rank(self.record.rating)

    def load(self) -> ProgressionRecord:
        """
        Read the record from the store. Missing, unreadable or non-integer
        values fall back to the defaults.
        """
        self.record = ProgressionRecord(
            rating=self._read_int(self.rating_key, DEFAULT_RATING),
            streak=self._read_int(self.streak_key, DEFAULT_STREAK),
        )
        logger.info(
            f"Loaded progression: rating {self.record.rating}, "
            f"streak {self.record.streak}"
        )
        return self.record

    def apply_outcome(self, won: bool) -> ProgressionRecord:
        """Update the current record for a decisive game. Does not persist."""
        self.record = apply_outcome(self.record, won)
        return self.record

    def save(self, record: ProgressionRecord | None = None) -> None:
        """
        Write the record (the current one by default) to the store.
        :raises StorageError: if the store cannot be written
        """
        if record is not None:
            self.record = record
        self.store.set(self.rating_key, str(self.record.rating))
        self.store.set(self.streak_key, str(self.record.streak))
        logger.debug(f"Saved progression {self.record}")

    def _read_int(self, key: str, default: int) -> int:
        try:
            raw = self.store.get(key)
        except StorageError as e:
            logger.warning(f"Could not read {key}, using default: {e}")
            return default
        if raw is None:
            return default
        try:
            return _int_adapter.validate_python(raw)
        except ValidationError:
            logger.warning(f"Ignoring non-integer value for {key}: {raw!r}")
            return default
