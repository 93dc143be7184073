"""Configuration management for the Shadow Sight client."""

import json
from dataclasses import dataclass, field
from pathlib import Path

import chess
from pydantic import TypeAdapter, ValidationError

from ..exceptions import SettingsError


@dataclass
class UISettings:
    """UI configuration settings."""

    square_size: int = 64
    piece_unicode: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Initialize default values that require computation."""
        if not self.piece_unicode:
            self.piece_unicode = {
                "P": "♙",
                "N": "♘",
                "B": "♗",
                "R": "♖",
                "Q": "♕",
                "K": "♔",
                "p": "♟",
                "n": "♞",
                "b": "♝",
                "r": "♜",
                "q": "♛",
                "k": "♚",
            }

    @property
    def board_size(self) -> int:
        """Calculate total board size in pixels."""
        return 8 * self.square_size


@dataclass
class GameSettings:
    """Session sequencing settings."""

    human_color: chess.Color = chess.WHITE
    opponent_delay_ms: int = 500  # pause before the opponent replies
    loss_ad_delay_ms: int = 500
    reveal_delay_ms: int = 800  # pause before the end-of-game modal
    ad_context_tag: str = "midgame"


@dataclass
class AudioSettings:
    """Sound cue settings."""

    enabled: bool = True
    sample_rate: int = 22050
    volume: float = 1.0


@dataclass
class StorageSettings:
    """Where and under which keys progression is persisted."""

    data_file: Path = field(
        default_factory=lambda: Path.home() / ".shadowsight" / "progress.json"
    )
    rating_key: str = "m_chess_elo"
    streak_key: str = "m_chess_streak"


@dataclass
class Settings:
    """Application settings container."""

    ui: UISettings = field(default_factory=UISettings)
    game: GameSettings = field(default_factory=GameSettings)
    audio: AudioSettings = field(default_factory=AudioSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)

    @classmethod
    def default(cls) -> "Settings":
        """Create settings with default values."""
        return cls()

    def validate(self) -> None:
        """Validate all settings."""
        if self.ui.square_size <= 0:
            raise ValueError("UI square_size must be positive")

        for name in ("opponent_delay_ms", "loss_ad_delay_ms", "reveal_delay_ms"):
            if getattr(self.game, name) < 0:
                raise ValueError(f"Game {name} must not be negative")

        if self.audio.sample_rate < 8000:
            raise ValueError("Audio sample_rate must be at least 8000")

        if not 0.0 <= self.audio.volume <= 1.0:
            raise ValueError("Audio volume must be between 0.0 and 1.0")

        if not self.storage.rating_key or not self.storage.streak_key:
            raise ValueError("Storage keys must not be empty")

        if self.storage.rating_key == self.storage.streak_key:
            raise ValueError("Storage rating_key and streak_key must differ")


def load_settings_from_json(json_data: str) -> Settings:
    """
    Parse and validate settings from a JSON document.

    Missing sections and fields keep their defaults.

    :raises SettingsError: if the document is malformed or fails validation
    """
    adapter = TypeAdapter(Settings)
    try:
        settings = adapter.validate_python(json.loads(json_data))
        settings.validate()
    except (json.JSONDecodeError, ValidationError, ValueError) as e:
        raise SettingsError("Invalid settings", str(e)) from e
    return settings


def load_settings(path: str | Path) -> Settings:
    """
    Load settings from a JSON file, or defaults if the file does not exist.

    :raises SettingsError: if the file exists but cannot be read or validated
    """
    settings_path = Path(path)
    if not settings_path.exists():
        return Settings.default()
    try:
        json_data = settings_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsError(f"Could not read settings file {settings_path}", str(e))
    return load_settings_from_json(json_data)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.default()
        _settings.validate()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    settings.validate()
    _settings = settings
