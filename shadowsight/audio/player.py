"""Sound cue players."""

from array import array

import pygame

from .tones import AudioCue, synthesize
from ..exceptions import AudioError
from ..logging_config import get_logger

logger = get_logger(__name__)


class MixerAudioPlayer:
    """
    Plays synthesized cues through the pygame mixer.

    All cues are rendered once at construction. Each play() starts the cue
    on a free mixer channel, so a cue that is still sounding keeps playing
    underneath the next one.
    """

    def __init__(
        self,
        sample_rate: int = 22050,
        volume: float = 1.0,
        voices: int = 8,
        mixer=pygame.mixer,
    ):
        """
        :param voices: number of cues that can sound at the same time
        :raises AudioError: if the mixer cannot be opened
        """
        self._mixer = mixer
        try:
            if not mixer.get_init():
                mixer.init(frequency=sample_rate, size=-16, channels=1)
            mixer.set_num_channels(voices)
            frequency, sample_format, channels = mixer.get_init()
            if sample_format != -16:
                raise AudioError("Unsupported mixer format", str(sample_format))
            self._sounds = {
                cue: mixer.Sound(buffer=_pcm(cue, frequency, channels, volume))
                for cue in AudioCue
            }
        except pygame.error as e:
            raise AudioError("Could not open audio mixer", str(e)) from e
        logger.info(f"Audio ready ({frequency} Hz, {voices} voices)")

    def play(self, cue: str) -> None:
        channel = self._sounds[AudioCue(cue)].play()
        if channel is None:
            logger.debug(f"No free voice for sound cue '{cue}'")


def _pcm(cue: AudioCue, frequency: int, channels: int, volume: float) -> bytes:
    """Render a cue as native-endian 16-bit PCM, duplicated across channels."""
    samples = synthesize(cue, frequency, volume)
    if channels > 1:
        samples = array("h", (s for s in samples for _ in range(channels)))
    return samples.tobytes()


class NullAudioPlayer:
    """Silent player, used when audio is disabled or no device is available."""

    def play(self, cue: str) -> None:
        logger.debug(f"Sound cue '{cue}' (muted)")
