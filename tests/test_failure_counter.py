"""
Tests for the consecutive failure counter.
"""

from unittest.mock import Mock

from repo_monitor.polling.failure_counter import FailureCounter


class TestFailureCounter:
    """Test failure gating at the threshold boundary."""

    def setup_method(self):
        self.counter = FailureCounter()
        self.report = Mock()

    def test_default_threshold(self):
        assert self.counter.threshold_allowed == 5
        assert self.counter.count == 0
        assert self.counter.is_under_limit() is True

    def test_first_five_failures_reported(self):
        for _ in range(5):
            assert self.counter.on_failure(500, "boom", self.report) is True

        assert self.report.call_count == 5
        assert self.counter.count == 5

    def test_sixth_failure_suppressed(self):
        for _ in range(5):
            self.counter.on_failure(403, "rate limited", self.report)

        assert self.counter.on_failure(403, "rate limited", self.report) is False
        assert self.report.call_count == 5
        assert self.counter.count == 5

    def test_report_receives_status_and_message(self):
        self.counter.on_failure(404, "Not Found", self.report)
        self.report.assert_called_once_with(404, "Not Found")

    def test_success_resets_count(self):
        for _ in range(7):
            self.counter.on_failure(500, None, self.report)

        self.counter.on_success()

        assert self.counter.count == 0
        assert self.counter.on_failure(500, None, self.report) is True
        assert self.report.call_count == 6

    def test_zero_threshold_suppresses_everything(self):
        counter = FailureCounter(threshold_allowed=0)

        assert counter.on_failure(500, None, self.report) is False
        self.report.assert_not_called()

    def test_state(self):
        self.counter.on_failure(500, None, self.report)

        state = self.counter.state
        assert state.count == 1
        assert state.threshold_allowed == 5
