import re
import sys
from dataclasses import dataclass
from datetime import datetime

import pytest

from sbfupload.uploadlog import LogLevel, log, timestamp


@dataclass
class _Cfg:
    log_dir: str
    log_level: LogLevel = LogLevel.INFO


def test_log_level_order_and_labels():
    assert LogLevel(1) < LogLevel(2) < LogLevel(3) < LogLevel(4)
    assert LogLevel(1) is LogLevel.DEBUG
    assert [LogLevel(i).label for i in range(5)] == ["", "DEBUG", "INFO", "WARNING", "ERROR"]


def test_timestamp_given_time():
    assert timestamp(datetime(2024, 1, 2, 3, 4, 5, 678900)) == "[03:04:05.678] "


def test_timestamp_default_shape():
    value = timestamp()
    assert len(value) == 15
    assert value[0] == "["
    assert value[-2:] == "] "
    assert value[3] == ":" and value[6] == ":" and value[9] == "."
    assert value[1:3].isdigit() and value[10:13].isdigit()


def test_log_writes_daily_file(tmp_path):
    cfg = _Cfg(log_dir=str(tmp_path) + "/")
    assert log(cfg, "hello", LogLevel.INFO) is True
    assert log(cfg, "again", LogLevel.ERROR) is True
    files = list(tmp_path.glob("SBFspotUpload*.log"))
    assert len(files) == 1
    assert re.fullmatch(r"SBFspotUpload\d{8}\.log", files[0].name)
    lines = files[0].read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert re.fullmatch(r"\[\d{2}:\d{2}:\d{2}\.\d{3}\] INFO: hello", lines[0])
    assert lines[1].endswith("] ERROR: again")


def test_log_below_level_is_dropped(tmp_path):
    cfg = _Cfg(log_dir=str(tmp_path) + "/", log_level=LogLevel.WARNING)
    assert log(cfg, "quiet", LogLevel.INFO) is False
    assert list(tmp_path.iterdir()) == []


def test_log_empty_dir_goes_to_stdout(monkeypatch, capsys):
    monkeypatch.setattr(sys, "platform", "linux")
    cfg = _Cfg(log_dir="")
    assert log(cfg, "boom", LogLevel.ERROR) is True
    assert capsys.readouterr().out == "ERROR: boom\n"


def test_log_unwritable_dir_reports_error(tmp_path, capsys):
    blocker = tmp_path / "notadir"
    blocker.write_text("x", encoding="utf-8")
    cfg = _Cfg(log_dir=str(blocker) + "/")
    assert log(cfg, "lost", LogLevel.ERROR) is False
    assert "Unable to write to logfile [" in capsys.readouterr().err


def test_log_rejects_unknown_level(tmp_path):
    cfg = _Cfg(log_dir=str(tmp_path) + "/")
    with pytest.raises(ValueError):
        log(cfg, "odd", 9)