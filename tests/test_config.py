import json
import logging

import pytest

from switch_scan.config import ScanConfig, load_config, save_config


def test_save_and_load(tmp_path):
    cfg = ScanConfig(speed_ms=700, layout="big.json", debounce_ms=30, speech=False)
    path = tmp_path / "sub" / "config.json"
    save_config(cfg, path=str(path))
    assert load_config(path=str(path)) == cfg


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(path=str(tmp_path / "none.json")) == ScanConfig()


def test_unknown_keys_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"speed_ms": 400, "colour": "red"}))
    assert load_config(path=str(path)).speed_ms == 400


@pytest.mark.parametrize("content", ["{not json", json.dumps({"speed_ms": 0}), json.dumps([1, 2])])
def test_bad_file_gives_defaults(tmp_path, caplog, content):
    path = tmp_path / "config.json"
    path.write_text(content)
    with caplog.at_level(logging.WARNING, logger="switch_scan.config"):
        assert load_config(path=str(path)) == ScanConfig()
    assert any("ignoring unreadable config" in r.message for r in caplog.records)


def test_validate():
    with pytest.raises(ValueError):
        ScanConfig(speed_ms=-1).validate()
    with pytest.raises(ValueError):
        ScanConfig(debounce_ms=-1).validate()
    assert ScanConfig().validate().speed_ms == 1000
