"""Command line entry point for the scanning keyboard."""

from __future__ import annotations

import argparse
import json
import logging
import threading

from . import logging as sslogging
from .config import CONFIG_FILE, ScanConfig, load_config, save_config
from .detection import DetectorConfig, check_device, listen
from .kb_layout_io import load_keyboard
from .scan_engine import Scanner
from .selection import SelectionExecutor
from .speech import SpeechAnnouncer
from .switch_router import SwitchRouter
from .text_buffer import TextBuffer
from .timers import TkScheduler

log = logging.getLogger(__name__)

PUMP_INTERVAL_MS = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="switch_scan",
        description="Run the single-switch scanning keyboard",
    )
    parser.add_argument("--layout", help="Path to keyboard layout JSON")
    parser.add_argument(
        "--speed",
        type=int,
        help="Milliseconds each row stays highlighted (keys scan twice as fast)",
    )
    parser.add_argument(
        "--debounce",
        type=int,
        help="Ignore switch presses closer together than this many ms",
    )
    parser.add_argument("--no-speech", action="store_true", help="Disable spoken feedback")
    parser.add_argument(
        "--type-to-os",
        action="store_true",
        help="Also type selected characters into the focused window",
    )
    parser.add_argument(
        "--audio-switch",
        action="store_true",
        help="Listen for a switch plugged into the microphone input",
    )
    parser.add_argument("--config", default=CONFIG_FILE, help="Settings file")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def apply_args(cfg: ScanConfig, args: argparse.Namespace) -> ScanConfig:
    """Return ``cfg`` with command line overrides applied."""
    if args.layout:
        cfg.layout = args.layout
    if args.speed is not None:
        cfg.speed_ms = args.speed
    if args.debounce is not None:
        cfg.debounce_ms = args.debounce
    if args.no_speech:
        cfg.speech = False
    if args.audio_switch:
        cfg.audio_switch = True
    return cfg.validate()


def connect_switches(vk, router: SwitchRouter, cfg: ScanConfig) -> None:
    """Route every configured switch source into ``router``.

    The keyboard switch is handled directly on the Tk thread, in order with
    the scan ticks. The audio detector runs on its own thread and goes
    through the router's press queue, drained from the Tk loop.
    """
    vk.bind_switch(cfg.switch_key, router.on_switch_activated)
    if not cfg.audio_switch:
        return

    det_cfg = DetectorConfig(device=cfg.audio_device)
    try:
        check_device(det_cfg)
    except RuntimeError as exc:
        raise RuntimeError("Could not open audio input device") from exc
    threading.Thread(target=listen, args=(router.post, det_cfg), daemon=True).start()

    def _pump_queue() -> None:
        router.pump()
        vk.root.after(PUMP_INTERVAL_MS, _pump_queue)

    vk.root.after(PUMP_INTERVAL_MS, _pump_queue)


def main(argv: list[str] | None = None) -> None:
    """Launch the scanning keyboard."""
    parser = build_parser()
    args = parser.parse_args(argv)
    sslogging.setup(args.log_level)

    try:
        cfg = apply_args(load_config(args.config), args)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        keyboard = load_keyboard(cfg.layout)
    except FileNotFoundError:
        parser.error(f"Layout file '{cfg.layout}' not found")
    except json.JSONDecodeError as exc:
        parser.error(f"Invalid JSON in layout file '{cfg.layout}': {exc.msg}")
    except (KeyError, ValueError) as exc:
        parser.error(f"Invalid layout file '{cfg.layout}': {exc}")

    from .kb_gui import VirtualKeyboard

    buffer = TextBuffer()
    vk = VirtualKeyboard(keyboard, buffer, speed_ms=cfg.speed_ms, high_contrast=cfg.high_contrast)

    announcer = SpeechAnnouncer(on_text=vk.show_feedback) if cfg.speech else None
    sinks = [buffer]
    if args.type_to_os:
        from .pc_control import PCController

        sinks.append(PCController())

    scanner = Scanner(keyboard, TkScheduler(vk.root), speed_ms=cfg.speed_ms, surface=vk)
    router = SwitchRouter(scanner, SelectionExecutor(sinks, announcer), debounce_ms=cfg.debounce_ms)

    def _on_speed(speed_ms: int) -> None:
        router.on_speed_changed(speed_ms)
        cfg.speed_ms = speed_ms
        save_config(cfg, args.config)

    def _on_speak() -> None:
        buffer.read_aloud(announcer or _FeedbackOnly(vk))

    vk.on_speed = _on_speed
    vk.on_speak = _on_speak
    connect_switches(vk, router, cfg)
    log.info("ready: press %s to start scanning", cfg.switch_key)
    try:
        vk.run()
    finally:
        scanner.stop_scan()
        if announcer is not None:
            announcer.close()


class _FeedbackOnly:
    def __init__(self, vk) -> None:
        self.vk = vk

    def announce(self, text: str) -> None:
        self.vk.show_feedback(text)


if __name__ == "__main__":  # pragma: no cover - manual entry point
    main()
