# tests/test_log_setup.py
import io
import json
import logging

import pytest

from valuedispatch.core import log


def _record(msg, **extra):
    rec = logging.LogRecord("valuedispatch.greet", logging.DEBUG, __file__, 1, msg, (), None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_json_handler_emits_one_object_per_line():
    buf = io.StringIO()
    h = log.JsonHandler(stream=buf)
    h.emit(_record("first"))
    h.emit(_record("second"))

    lines = buf.getvalue().splitlines()
    assert len(lines) == 2
    obj = json.loads(lines[0])
    assert obj["msg"] == "first"
    assert obj["lvl"] == "DEBUG"
    assert obj["name"] == "valuedispatch.greet"
    assert "multimethod" not in obj


def test_json_handler_includes_dispatch_extras():
    buf = io.StringIO()
    h = log.JsonHandler(stream=buf)
    h.emit(_record("no method", multimethod="greet", dispatch_value=("order", 3)))

    obj = json.loads(buf.getvalue())
    assert obj["multimethod"] == "greet"
    assert obj["dispatch_value"] == "('order', 3)"


def test_set_level_accepts_names_and_falls_back_to_info():
    root = logging.getLogger()
    old = root.level
    try:
        log.set_level("warning")
        assert root.level == logging.WARNING
        log.set_level("nonsense")
        assert root.level == logging.INFO
    finally:
        root.setLevel(old)


def test_get_returns_namespaced_logger():
    assert log.get("valuedispatch.x") is logging.getLogger("valuedispatch.x")


@pytest.fixture
def fresh_root(monkeypatch):
    """Let setup() run again, then put the session's root logger back."""
    root = logging.getLogger()
    # pytest attaches its own capture handlers per test phase; leave those alone
    own = [h for h in root.handlers if not type(h).__module__.startswith("_pytest")]
    level = root.level
    monkeypatch.setattr(log, "_configured", False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_JSON", raising=False)
    yield root
    for h in root.handlers[:]:
        if not type(h).__module__.startswith("_pytest"):
            root.removeHandler(h)
    for h in own:
        root.addHandler(h)
    root.setLevel(level)


def test_setup_json_mode_from_env(fresh_root, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_JSON", "1")
    log.setup(force=True)
    assert len(fresh_root.handlers) == 1
    assert isinstance(fresh_root.handlers[0], log.JsonHandler)


def test_setup_text_mode_by_default(fresh_root, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    log.setup(force=True)
    (h,) = fresh_root.handlers
    assert not isinstance(h, log.JsonHandler)
    assert h.formatter._fmt == log.TEXT_FORMAT
    assert fresh_root.level == logging.INFO


def test_setup_reads_level_from_dotenv(fresh_root, monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("LOG_LEVEL=WARNING\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    log.setup(force=True)
    assert fresh_root.level == logging.WARNING


def test_environment_beats_dotenv(fresh_root, monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("LOG_LEVEL=WARNING\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    log.setup(force=True)
    assert fresh_root.level == logging.ERROR


def test_second_setup_without_force_is_a_no_op(fresh_root, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    log.setup("ERROR")
    before = fresh_root.handlers[:]
    log.setup("DEBUG", json_mode=True)
    assert fresh_root.level == logging.ERROR
    assert fresh_root.handlers == before

    log.setup("DEBUG", force=True)
    assert fresh_root.level == logging.DEBUG
