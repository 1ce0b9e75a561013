"""Test logging configuration and stage timers.

Tests for polytrace.utils.logging_config and polytrace.utils.profiler:
    - setup_logging() writes JSON lines with context, replaces its own
      handlers on repeated calls and leaves foreign handlers alone
    - Human format carries pushed context fields
    - timer() reports through a sink or stdout; log_sink() logs at DEBUG

Test cases:
    - test_logging_idempotency()
    - test_logging_keeps_foreign_handlers()
    - test_human_format_context()
    - test_push_pop_context()
    - test_profiler_timer()
    - test_profiler_timer_prints()
    - test_profiler_log_sink()

Run:
    pytest tests/test_utils.py -v
"""

import json
import logging

import pytest

from polytrace.utils import logging_config, profiler


@pytest.fixture(autouse=True)
def clean_logging():
    """Undo setup_logging() side effects after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    logging_config.reset_logging()
    logging_config.pop_context()
    logging.captureWarnings(False)
    root.setLevel(level)


# ============================================================================
# LOGGING TESTS
# ============================================================================

def test_logging_idempotency(tmp_path):
    """Test logging file output and idempotency."""
    log_path = tmp_path / "trace.log"

    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "test"}
    )
    logger = logging_config.get_logger("utils_test")
    logger.info("hello")

    logging_config.setup_logging(
        log_level="INFO",
        log_file=str(log_path),
        json=True,
        to_stderr=False,
        context={"app": "test"}
    )
    logger.info("world")

    lines = log_path.read_text().strip().splitlines()
    assert len(lines) == 2

    rec = json.loads(lines[0])
    assert rec["msg"] == "hello"
    assert rec["lvl"] == "INFO"
    assert rec.get("app") == "test"


def test_logging_keeps_foreign_handlers(tmp_path):
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        info = logging_config.setup_logging(log_file=str(tmp_path / "a.log"), to_stderr=False)
        assert len(info["handlers"]) == 1

        logging_config.setup_logging(log_file=str(tmp_path / "b.log"), to_stderr=False)
        assert foreign in root.handlers
        assert info["handlers"][0] not in root.handlers
    finally:
        root.removeHandler(foreign)


def test_human_format_context():
    logging_config.push_context(app="polytrace", image="scan_004.png")
    formatter = logging_config.ContextFormatter("human", use_color=False)
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "thin %d px", (12,), None)

    line = formatter.format(record)

    assert "WARNING" in line
    assert "app=polytrace image=scan_004.png |" in line
    assert line.endswith("thin 12 px")


def test_push_pop_context():
    logging_config.push_context(app="polytrace", job="batch")
    logging_config.pop_context(keys=["job"])

    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    rec = json.loads(logging_config.ContextFormatter("json").format(record))
    assert rec["app"] == "polytrace"
    assert "job" not in rec

    logging_config.pop_context()
    rec = json.loads(logging_config.ContextFormatter("json").format(record))
    assert "app" not in rec


def test_rotation_mode_rejected(tmp_path):
    with pytest.raises(ValueError, match="rotation mode"):
        logging_config.setup_logging(
            log_file=str(tmp_path / "r.log"), to_stderr=False, rotate={"mode": "weekly"}
        )


# ============================================================================
# PROFILER TESTS
# ============================================================================

def test_profiler_timer():
    """Test profiler timer functionality."""
    times = []
    with profiler.timer('test_op', sink=lambda n, t: times.append((n, t))):
        sum(range(10000))

    assert len(times) == 1
    assert times[0][0] == 'test_op'
    assert times[0][1] >= 0.0


def test_profiler_timer_prints(capsys):
    with profiler.timer('thinning'):
        pass

    out = capsys.readouterr().out
    assert out.startswith("thinning: ")
    assert out.strip().endswith(" s")


def test_profiler_timer_reports_on_error():
    times = []
    with pytest.raises(RuntimeError):
        with profiler.timer('boom', sink=lambda n, t: times.append(n)):
            raise RuntimeError("fail")
    assert times == ['boom']


def test_profiler_log_sink(caplog):
    logger = logging.getLogger("polytrace.test_profiler")
    with caplog.at_level(logging.DEBUG, logger="polytrace.test_profiler"):
        with profiler.timer('tracing', sink=profiler.log_sink(logger)):
            pass

    assert any(r.getMessage().startswith("tracing: ") for r in caplog.records)
    assert caplog.records[-1].levelno == logging.DEBUG


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
