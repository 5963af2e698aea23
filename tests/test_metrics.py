import logging

from assembly_sync.metrics import SyncMetrics, build_metrics_from_env

logger = logging.getLogger("tests.metrics")


def test_record_logs_every_n_events(caplog):
    metrics = SyncMetrics(log_every=2, log_interval=3600)
    metrics._last_log = float("inf")  # suppress the interval trigger
    with caplog.at_level(logging.INFO, logger="tests.metrics"):
        metrics.record("push", 5, 3, logger=logger)
        assert "sync-metrics" not in caplog.text
        metrics.record("pull", 5, 1, logger=logger)
    assert "sync-metrics total=2 orders=4 breakdown=pull@5:1, push@5:1" in caplog.text


def test_force_log_without_events(caplog):
    metrics = SyncMetrics()
    with caplog.at_level(logging.INFO, logger="tests.metrics"):
        metrics.force_log(logger=logger)
    assert "total=0 orders=0 breakdown=<none>" in caplog.text


def test_build_metrics_from_env(monkeypatch):
    monkeypatch.setenv("METRIC_LOG_EVERY", "0")
    monkeypatch.setenv("METRIC_LOG_INTERVAL", "1")
    metrics = build_metrics_from_env()
    assert metrics._log_every == 1
    assert metrics._log_interval == 10
