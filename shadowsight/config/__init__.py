"""Configuration management for Shadow Sight."""

from .settings import (
    Settings,
    UISettings,
    GameSettings,
    AudioSettings,
    StorageSettings,
)

__all__ = [
    "Settings",
    "UISettings",
    "GameSettings",
    "AudioSettings",
    "StorageSettings",
]
