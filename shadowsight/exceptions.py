"""Exception hierarchy for Shadow Sight Chess."""


class ShadowSightError(Exception):
    """Base exception for all Shadow Sight application errors."""

    def __init__(self, message: str, details: str | None = None):
        """Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional detailed error information
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(ShadowSightError):
    """Configuration-related errors."""

    pass


class SettingsError(ConfigurationError):
    """Raised when settings validation or loading fails."""

    pass


class GameError(ShadowSightError):
    """Base class for game-related errors."""

    pass


class IllegalMoveError(GameError):
    """Raised when an illegal chess move is attempted."""

    def __init__(self, move: str, position_fen: str | None = None):
        """Initialize with move and optional position.

        Args:
            move: The illegal move (e.g., "e2e5")
            position_fen: FEN string of the position where move was attempted
        """
        message = f"Illegal move: {move}"
        details = f"in position: {position_fen}" if position_fen else None
        super().__init__(message, details)
        self.move = move
        self.position_fen = position_fen


class StorageError(ShadowSightError):
    """Raised when the persistent key-value store cannot be read or written."""

    def __init__(self, location: str, reason: str | None = None):
        """Initialize with the failing key or path and an optional reason.

        Args:
            location: Store key or file path involved in the failure
            reason: Optional reason for failure
        """
        message = f"Storage failure at {location}"
        super().__init__(message, reason)
        self.location = location
        self.reason = reason


class AudioError(ShadowSightError):
    """Raised when sound cues cannot be prepared for playback."""

    pass


class AdError(ShadowSightError):
    """Raised by ad providers when an interstitial request fails."""

    pass
