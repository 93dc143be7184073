"""Synthesized sound cues.

Each cue is a short oscillator tone described by a ToneSpec and rendered
to 16-bit mono PCM, so the game ships without sound files.
"""

import math
from array import array
from dataclasses import dataclass
from enum import StrEnum


class AudioCue(StrEnum):
    """Event categories that make a sound."""

    MOVE = "move"
    CAPTURE = "capture"
    END = "end"


class Waveform(StrEnum):
    SINE = "sine"
    SQUARE = "square"


class Sweep(StrEnum):
    NONE = "none"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


@dataclass(frozen=True)
class ToneSpec:
    """Oscillator settings for one cue."""

    waveform: Waveform
    start_hz: float
    end_hz: float
    sweep: Sweep
    sweep_seconds: float
    gain: float
    duration: float = 0.5


TONES: dict[AudioCue, ToneSpec] = {
    AudioCue.MOVE: ToneSpec(
        waveform=Waveform.SINE,
        start_hz=300.0,
        end_hz=150.0,
        sweep=Sweep.EXPONENTIAL,
        sweep_seconds=0.1,
        gain=0.05,
    ),
    AudioCue.CAPTURE: ToneSpec(
        waveform=Waveform.SQUARE,
        start_hz=120.0,
        end_hz=120.0,
        sweep=Sweep.NONE,
        sweep_seconds=0.0,
        gain=0.03,
    ),
    AudioCue.END: ToneSpec(
        waveform=Waveform.SINE,
        start_hz=400.0,
        end_hz=600.0,
        sweep=Sweep.LINEAR,
        sweep_seconds=0.5,
        gain=0.05,
    ),
}


def frequency_at(tone: ToneSpec, t: float) -> float:
    """Instantaneous frequency t seconds into the tone; holds end_hz after the sweep."""
    if tone.sweep == Sweep.NONE:
        return tone.start_hz
    if t >= tone.sweep_seconds:
        return tone.end_hz
    fraction = t / tone.sweep_seconds
    match tone.sweep:
        case Sweep.LINEAR:
            return tone.start_hz + (tone.end_hz - tone.start_hz) * fraction
        case _:
            return tone.start_hz * (tone.end_hz / tone.start_hz) ** fraction


def synthesize(cue: AudioCue, sample_rate: int = 22050, volume: float = 1.0) -> array:
    """Render a cue to signed 16-bit samples."""
    tone = TONES[AudioCue(cue)]
    n_samples = int(tone.duration * sample_rate)
    amplitude = tone.gain * volume * 32767
    samples = array("h")
    phase = 0.0
    for i in range(n_samples):
        t = i / sample_rate
        if tone.waveform == Waveform.SQUARE:
            value = 1.0 if math.sin(phase) >= 0 else -1.0
        else:
            value = math.sin(phase)
        samples.append(int(round(value * amplitude)))
        # accumulate phase so sweeps stay continuous
        phase += 2 * math.pi * frequency_at(tone, t) / sample_rate
    return samples
