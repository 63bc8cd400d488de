"""Treat an assistive switch plugged into a microphone jack as the switch.

Pressing such a switch discharges the mic bias, which shows up as a sharp
falling edge in the audio signal.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

log = logging.getLogger(__name__)


@dataclass
class DetectorConfig:
    upper_offset: float = -0.2
    lower_offset: float = -0.5
    samplerate: int = 44_100
    blocksize: int = 256
    debounce_ms: int = 40
    device: Optional[int | str] = None

    def refractory_samples(self) -> int:
        return int(math.ceil((self.debounce_ms / 1_000) * self.samplerate))


@dataclass
class EdgeState:
    armed: bool = True
    cooldown: int = 0
    prev_sample: float = 0.0
    bias: float = 0.0


def detect_edges(
    block: np.ndarray,
    state: EdgeState,
    upper_offset: float,
    lower_offset: float,
    refractory_samples: int,
) -> Tuple[EdgeState, bool]:
    """Look for one falling edge in ``block``.

    A press is a step from at or above ``bias + upper_offset`` to at or below
    ``bias + lower_offset``. After a press the detector stays disarmed for
    ``refractory_samples`` and until the signal recovers above the upper level.
    Returns the new state and whether a press was found.
    """

    if block.ndim != 1:
        raise ValueError(f"block must be a 1-D array (got shape {block.shape})")
    if len(block) == 0:
        return state, False

    bias = state.bias
    if state.armed:
        bias = 0.995 * bias + 0.005 * float(block.mean())

    upper = bias + upper_offset
    lower = bias + lower_offset

    samples = np.concatenate(([state.prev_sample], block))
    crossings = (samples[:-1] >= upper) & (samples[1:] <= lower)

    armed = state.armed
    cooldown = state.cooldown
    press_at: int | None = None

    if armed:
        hits = np.flatnonzero(crossings)
        if hits.size:
            press_at = int(hits[0])
    elif cooldown >= len(block):
        cooldown -= len(block)
    elif samples[cooldown] >= upper:
        # cooldown ran out inside this block and the line has recovered
        armed = True
        hits = np.flatnonzero(crossings[cooldown:])
        if hits.size:
            press_at = int(hits[0]) + cooldown

    if press_at is not None:
        armed = False
        cooldown = refractory_samples - (len(block) - press_at - 1)
        if cooldown <= 0:
            cooldown = 0
            armed = bool(block[-1] >= upper)

    return EdgeState(armed, cooldown, float(block[-1]), bias), press_at is not None


class SwitchDetector:
    """Stateful wrapper feeding successive audio blocks to :func:`detect_edges`."""

    def __init__(self, config: DetectorConfig | None = None) -> None:
        self.config = config or DetectorConfig()
        if self.config.upper_offset <= self.config.lower_offset:
            raise ValueError("upper_offset must be > lower_offset (both negative values)")
        self.state = EdgeState()
        self._refractory = self.config.refractory_samples()

    def feed(self, block: np.ndarray) -> bool:
        if block.ndim > 1:
            block = block.mean(axis=1) if block.shape[1] > 1 else block[:, 0]
        self.state, pressed = detect_edges(
            block,
            self.state,
            self.config.upper_offset,
            self.config.lower_offset,
            self._refractory,
        )
        return pressed


def check_device(config: DetectorConfig | None = None) -> None:
    """Raise ``RuntimeError`` if the input device can't be opened."""
    import sounddevice as sd

    config = config or DetectorConfig()
    try:
        with sd.InputStream(
            samplerate=config.samplerate,
            blocksize=config.blocksize,
            channels=1,
            dtype="float32",
            device=config.device,
            callback=lambda *a: None,
        ):
            pass
    except sd.PortAudioError as exc:
        raise RuntimeError("Failed to open audio input device") from exc


def listen(
    on_press: Callable[[], None],
    config: DetectorConfig | None = None,
    stop: threading.Event | None = None,
) -> None:
    """Block, calling ``on_press`` for every detected press until ``stop`` is set."""
    import sounddevice as sd

    detector = SwitchDetector(config)
    config = detector.config
    stop = stop or threading.Event()

    def _callback(indata: np.ndarray, frames: int, _: object, status: object) -> None:
        if status:
            log.debug("audio status: %s", status)
        if detector.feed(indata):
            log.debug("audio switch press")
            on_press()

    try:
        with sd.InputStream(
            samplerate=config.samplerate,
            blocksize=config.blocksize,
            channels=1,
            dtype="float32",
            device=config.device,
            callback=_callback,
        ):
            log.info("listening for switch presses on %s", config.device or "default device")
            stop.wait()
    except sd.PortAudioError as exc:
        raise RuntimeError("Failed to open audio input device") from exc
