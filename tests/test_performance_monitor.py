import logging

from salary_api.services.performance_monitor import PerformanceMonitor, classify_response_time, format_rate


def test_classification_thresholds() -> None:
    assert classify_response_time(10) == "excellent"
    assert classify_response_time(50) == "good"
    assert classify_response_time(150) == "moderate"
    assert classify_response_time(200) == "slow"


def test_success_rate_formatting() -> None:
    assert format_rate(0, 0) == "100%"
    assert format_rate(39, 40) == "97.5%"


def test_samples_are_bounded() -> None:
    monitor = PerformanceMonitor(max_samples=100)
    for i in range(150):
        monitor.record_metric("prediction_total", float(i))

    stats = monitor.stats("prediction_total")
    assert stats["count"] == 100
    assert stats["min"] == 50.0
    assert stats["max"] == 149.0
    assert stats["avg"] == 100


def test_unknown_metric_has_zero_stats() -> None:
    assert PerformanceMonitor().stats("nope") == {"avg": 0, "min": 0, "max": 0, "count": 0}


def test_request_counters() -> None:
    monitor = PerformanceMonitor()
    assert monitor.success_rate() == "100%"
    monitor.record_request(success=True)
    monitor.record_request(success=True)
    monitor.record_request(success=False)
    monitor.record_request(success=True)
    assert monitor.requests_total == 4
    assert monitor.requests_failed == 1
    assert monitor.success_rate() == "75.0%"


def test_summary_reports_cache_hit_rate() -> None:
    monitor = PerformanceMonitor()
    monitor.record_metric("prediction_total", 20)
    monitor.record_metric("prediction_total", 40)
    monitor.record_metric("prediction_cache_hit", 1)

    summary = monitor.summary()
    assert summary == {"status": "excellent", "avgResponseTime": 30, "cacheHitRate": 33}


def test_log_report(caplog) -> None:
    monitor = PerformanceMonitor()
    monitor.record_metric("prediction_total", 120)
    with caplog.at_level(logging.INFO, logger="salary_api.services.performance_monitor"):
        monitor.log_report()
    assert "MODERATE" in caplog.text
    assert "prediction_total" in caplog.text
