import logging
import threading

from switch_scan.speech import SpeechAnnouncer


class DummyEngine:
    def __init__(self):
        self.said = []
        self.props = {}
        self.done = threading.Event()

    def setProperty(self, name, value):
        self.props[name] = value

    def say(self, text):
        self.said.append(text)

    def runAndWait(self):
        self.done.set()


def test_announce_speaks_on_worker_thread():
    engine = DummyEngine()
    shown = []
    speech = SpeechAnnouncer(on_text=shown.append, engine_factory=lambda: engine, rate=150)
    speech.announce("a")
    assert engine.done.wait(2.0)
    speech.close()
    assert engine.said == ["a"]
    assert engine.props == {"rate": 150}
    assert shown == ["a"]


def test_engine_failure_disables_speech(caplog):
    def _broken():
        raise RuntimeError("no espeak")

    shown = []
    speech = SpeechAnnouncer(on_text=shown.append, engine_factory=_broken)
    with caplog.at_level(logging.WARNING, logger="switch_scan.speech"):
        speech.announce("Space")
        speech._thread.join(2.0)
    assert not speech.available
    assert any("speech engine unavailable" in r.message for r in caplog.records)
    # still mirrored to the feedback label, never raises
    speech.announce("Enter")
    assert shown == ["Space", "Enter"]


def test_close_without_announcements():
    SpeechAnnouncer(engine_factory=DummyEngine).close()
