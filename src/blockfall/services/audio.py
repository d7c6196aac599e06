from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import pygame

from blockfall.game import EventBus, GameEvent


logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050
MASTER_GAIN = 0.07
ATTACK_S = 0.005


@dataclass(frozen=True)
class Tone:
    freq: float
    duration: float
    waveform: str = "square"
    offset: float = 0.0


def _oscillator(waveform: str, phase: np.ndarray) -> np.ndarray:
    # phase is in cycles
    frac = phase - np.floor(phase)
    if waveform == "sine":
        return np.sin(2.0 * np.pi * phase)
    if waveform == "square":
        return np.where(frac < 0.5, 1.0, -1.0)
    if waveform == "sawtooth":
        return 2.0 * frac - 1.0
    if waveform == "triangle":
        return 1.0 - 4.0 * np.abs(frac - 0.5)
    raise ValueError(f"Unknown waveform: {waveform}")


def synthesize_tone(freq: float, duration: float, waveform: str = "square",
                    sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Float samples in [-1, 1] with a short exponential attack and decay."""
    n = max(1, int(round(duration * sample_rate)))
    t = np.arange(n, dtype=np.float64) / sample_rate
    wave = _oscillator(waveform, freq * t)
    attack = min(n, max(1, int(ATTACK_S * sample_rate)))
    envelope = np.empty(n, dtype=np.float64)
    envelope[:attack] = np.geomspace(1e-4, 1.0, attack)
    if n > attack:
        envelope[attack:] = np.geomspace(1.0, 1e-4, n - attack)
    return wave * envelope


def render_sequence(tones: Iterable[Tone], sample_rate: int = SAMPLE_RATE,
                    gain: float = MASTER_GAIN) -> np.ndarray:
    """Mix tones at their offsets into one int16 mono buffer."""
    tones = list(tones)
    if not tones:
        return np.zeros(0, dtype=np.int16)
    total = max(int(round((t.offset + t.duration) * sample_rate)) for t in tones) + 1
    mix = np.zeros(total, dtype=np.float64)
    for tone in tones:
        samples = synthesize_tone(tone.freq, tone.duration, tone.waveform, sample_rate)
        start = int(round(tone.offset * sample_rate))
        mix[start:start + samples.size] += samples
    mix = np.clip(mix * gain, -1.0, 1.0)
    return (mix * 32767).astype(np.int16)


CUES: Dict[str, List[Tone]] = {
    "rotate": [Tone(660, 0.04, "triangle")],
    "move": [Tone(520, 0.03, "sine")],
    "drop": [Tone(220, 0.06, "sawtooth")],
    "lock": [Tone(160, 0.09, "square")],
    "game_over": [Tone(200, 0.12, "sawtooth"), Tone(140, 0.18, "square", offset=0.12)],
}


def clear_cue(lines: int) -> List[Tone]:
    return [Tone(520 + i * 120, 0.06, "triangle", offset=i * 0.07) for i in range(lines)]


class SoundService:
    """Plays synthesized cues for game events through pygame.mixer.

    When the mixer is unavailable the service stays silent but keeps
    tracking mute state and the cues it would have played.
    """

    def __init__(self, enabled: bool = True, muted: bool = False) -> None:
        self.muted = muted
        self.played: List[str] = []
        self._cache: Dict[Tuple[str, int], "pygame.mixer.Sound"] = {}
        self._mixer_ready = False
        if enabled:
            try:
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
                self._mixer_ready = pygame.mixer.get_init() is not None
            except pygame.error as exc:
                logger.warning("Audio disabled, mixer unavailable: %s", exc)

    def attach(self, events: EventBus) -> None:
        events.subscribe(GameEvent.MOVED, self._on_moved)
        events.subscribe(GameEvent.ROTATED, lambda delta: self.play("rotate"))
        events.subscribe(GameEvent.HARD_DROPPED, lambda distance: self.play("drop"))
        events.subscribe(GameEvent.LOCKED, lambda cells: self.play("lock"))
        events.subscribe(GameEvent.LINES_CLEARED, lambda count, rows: self.play("clear", count))
        events.subscribe(GameEvent.GAME_OVER, lambda score, lines, level: self.play("game_over"))
        events.subscribe(GameEvent.MUTED, self.set_muted)

    def _on_moved(self, dx: int, dy: int) -> None:
        # Gravity and soft drop stay quiet; only sideways moves click
        if dx != 0:
            self.play("move")

    def set_muted(self, muted: bool) -> None:
        self.muted = bool(muted)
        if self.muted and self._mixer_ready:
            pygame.mixer.stop()

    def play(self, cue: str, lines: int = 0) -> None:
        if self.muted:
            return
        self.played.append(cue)
        if not self._mixer_ready:
            return
        sound = self._sound_for(cue, lines)
        if sound is not None:
            sound.play()

    def _sound_for(self, cue: str, lines: int) -> Optional["pygame.mixer.Sound"]:
        key = (cue, lines)
        if key not in self._cache:
            tones = clear_cue(lines) if cue == "clear" else CUES.get(cue)
            if not tones:
                return None
            frequency, _, channels = pygame.mixer.get_init()
            samples = render_sequence(tones, sample_rate=frequency)
            if channels > 1:
                samples = np.repeat(samples[:, None], channels, axis=1)
            self._cache[key] = pygame.sndarray.make_sound(np.ascontiguousarray(samples))
        return self._cache[key]

    def close(self) -> None:
        if self._mixer_ready:
            pygame.mixer.quit()
            self._mixer_ready = False
