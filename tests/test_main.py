import logging
import sys
import time

import pytest

from switch_scan import logging as sslogging
from switch_scan.__main__ import apply_args, build_parser, connect_switches
from switch_scan.config import ScanConfig
from switch_scan.kb_layout import Keyboard
from switch_scan.scan_engine import ScanPhase, Scanner
from switch_scan.selection import SelectionExecutor
from switch_scan.switch_router import SwitchRouter
from switch_scan.text_buffer import TextBuffer
from switch_scan.timers import VirtualScheduler


def test_cli_overrides_config():
    args = build_parser().parse_args(
        ["--speed", "600", "--debounce", "25", "--no-speech", "--audio-switch", "--layout", "x.json"]
    )
    cfg = apply_args(ScanConfig(), args)
    assert cfg.speed_ms == 600
    assert cfg.debounce_ms == 25
    assert cfg.speech is False
    assert cfg.audio_switch is True
    assert cfg.layout == "x.json"


def test_cli_defaults_keep_config():
    args = build_parser().parse_args([])
    cfg = apply_args(ScanConfig(speed_ms=1500, speech=False), args)
    assert cfg.speed_ms == 1500
    assert cfg.speech is False


def test_cli_rejects_bad_speed():
    args = build_parser().parse_args(["--speed", "0"])
    with pytest.raises(ValueError):
        apply_args(ScanConfig(), args)


def test_logging_setup_writes_file(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", list(root.handlers))
    monkeypatch.setattr(root, "level", root.level)
    log_file = tmp_path / "scan.log"
    sslogging.setup("debug", log_file)
    logging.getLogger("switch_scan.test").debug("hello")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "switch_scan.test: hello" in log_file.read_text()


def test_logging_setup_rejects_unknown_level(tmp_path):
    with pytest.raises(ValueError):
        sslogging.setup("LOUD", tmp_path / "x.log")


class DummyRoot:
    def __init__(self):
        self.scheduled = []

    def after(self, ms, func):
        self.scheduled.append((ms, func))


class DummyVK:
    def __init__(self):
        self.root = DummyRoot()
        self.bindings = {}

    def bind_switch(self, keysym, on_switch):
        self.bindings[keysym] = on_switch


def _router(speed_ms=1000):
    sched = VirtualScheduler()
    scanner = Scanner(Keyboard.from_labels([["A", "B"], ["C", "D"]]), sched, speed_ms=speed_ms)
    return SwitchRouter(scanner, SelectionExecutor([TextBuffer()])), sched


def test_keyboard_switch_is_handled_before_the_next_tick():
    router, sched = _router()
    vk = DummyVK()
    connect_switches(vk, router, ScanConfig(switch_key="Return"))
    press = vk.bindings["Return"]

    press()
    sched.advance_to(997)
    press()  # row 0 is still lit
    sched.advance_to(1010)
    assert router.scanner.phase is ScanPhase.ITEMS
    assert router.scanner.state.group_index == 0
    # no polling loop without a background switch source
    assert vk.root.scheduled == []


def test_audio_switch_goes_through_the_press_queue(monkeypatch):
    import switch_scan.__main__ as cli

    started = []
    monkeypatch.setattr(cli, "check_device", lambda cfg: None)
    monkeypatch.setattr(cli, "listen", lambda on_press, cfg: started.append((on_press, cfg)))

    router, _ = _router()
    vk = DummyVK()
    connect_switches(vk, router, ScanConfig(audio_switch=True, audio_device="usb"))
    for _ in range(50):
        if started:
            break
        time.sleep(0.01)
    on_press, det_cfg = started[0]
    assert det_cfg.device == "usb"
    assert vk.bindings["space"] == router.on_switch_activated

    on_press()
    assert router.scanner.phase is ScanPhase.IDLE
    _, pump = vk.root.scheduled[0]
    pump()
    assert router.scanner.phase is ScanPhase.GROUPS
    assert len(vk.root.scheduled) == 2


def test_audio_device_failure_is_reported(monkeypatch):
    import switch_scan.__main__ as cli

    def _fail(cfg):
        raise RuntimeError("Failed to open audio input device")

    monkeypatch.setattr(cli, "check_device", _fail)
    router, _ = _router()
    with pytest.raises(RuntimeError, match="Could not open audio input device"):
        connect_switches(DummyVK(), router, ScanConfig(audio_switch=True))
