from unittest.mock import Mock

from skyrelay.analytics import EventLogger


def test_sampling_uses_rate():
    assert EventLogger(sample_rate=0.1, rng=lambda: 0.05).emit({"key": "JFK"}) is True
    assert EventLogger(sample_rate=0.1, rng=lambda: 0.5).emit({"key": "JFK"}) is False
    assert EventLogger(sample_rate=0.0, rng=lambda: 0.0).emit({"key": "JFK"}) is False


def test_emit_never_raises(caplog):
    logger = EventLogger(sample_rate=1.0, rng=Mock(side_effect=RuntimeError("boom")))
    assert logger.emit({"key": "JFK"}) is False
    assert "Analytics sink failed" in caplog.text
