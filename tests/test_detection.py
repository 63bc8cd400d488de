import numpy as np
import pytest

from switch_scan.detection import DetectorConfig, EdgeState, SwitchDetector, detect_edges


def _press_block(n=64, at=10, depth=-0.8):
    block = np.zeros(n, dtype=np.float32)
    block[at:at + 5] = depth
    return block


def test_detect_edges_requires_1d():
    state = EdgeState(armed=True, cooldown=0)
    block = np.zeros((2, 2))
    with pytest.raises(ValueError) as excinfo:
        detect_edges(block, state, -0.2, -0.5, 1)
    assert "block must be a 1-D array" in str(excinfo.value)
    assert "(2, 2)" in str(excinfo.value)


def test_single_press_detected():
    state, pressed = detect_edges(_press_block(), EdgeState(), -0.2, -0.5, 4)
    assert pressed
    assert state.cooldown == 0
    assert state.armed


def test_quiet_block_is_not_a_press():
    state, pressed = detect_edges(np.zeros(64, dtype=np.float32), EdgeState(), -0.2, -0.5, 4)
    assert not pressed
    assert state.armed


def test_empty_block_keeps_state():
    state = EdgeState(armed=False, cooldown=3)
    new_state, pressed = detect_edges(np.zeros(0, dtype=np.float32), state, -0.2, -0.5, 4)
    assert new_state is state
    assert not pressed


def test_refractory_period_suppresses_bounce():
    det = SwitchDetector(DetectorConfig(debounce_ms=10, samplerate=1000))
    assert det.feed(_press_block(at=60))
    assert not det.state.armed
    # bounce inside the refractory window
    assert not det.feed(_press_block(at=2))
    assert not det.feed(np.zeros(64, dtype=np.float32))
    assert det.feed(_press_block(at=20))


def test_detector_accepts_stereo_blocks():
    det = SwitchDetector()
    stereo = np.stack([_press_block(), _press_block()], axis=1)
    assert det.feed(stereo)


def test_detector_rejects_inverted_offsets():
    with pytest.raises(ValueError):
        SwitchDetector(DetectorConfig(upper_offset=-0.6, lower_offset=-0.5))


def test_refractory_samples():
    assert DetectorConfig(debounce_ms=40, samplerate=44_100).refractory_samples() == 1764
