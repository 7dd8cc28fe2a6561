"""Unit tests for the result ledger and retry set selection."""
from __future__ import annotations

import pytest

from push_service.infra.push.ledger import ResultLedger, is_retryable, select_retry_set
from push_service.infra.push.results import Failure, Indeterminate, Success


@pytest.mark.unit
class TestResultLedger:
    """Test suite for ResultLedger."""

    def test_starts_indeterminate(self):
        ledger = ResultLedger(["a", "b"])
        assert len(ledger) == 2
        assert ledger["a"] == Indeterminate()
        assert "b" in ledger
        assert "c" not in ledger

    def test_record_overwrites_reported_only(self):
        """Test that recipients missing from an attempt keep their outcome."""
        ledger = ResultLedger(["a", "b", "c"])
        ledger.record(["a", "b", "c"], [Success("1"), Failure("Unavailable"), Failure("NotRegistered")])
        ledger.record(["b"], [Success("2")])

        assert ledger.outcomes_for(["a", "b", "c"]) == (
            Success("1"),
            Success("2"),
            Failure("NotRegistered"),
        )

    def test_outcomes_for_follows_requested_order(self):
        ledger = ResultLedger(["a", "b"])
        ledger.record(["a", "b"], [Success("1"), Failure("x")])
        assert ledger.outcomes_for(["b", "a"]) == (Failure("x"), Success("1"))

    def test_record_length_mismatch(self):
        ledger = ResultLedger(["a", "b"])
        with pytest.raises(ValueError):
            ledger.record(["a", "b"], [Success("1")])


@pytest.mark.unit
class TestSelectRetrySet:
    """Test suite for select_retry_set."""

    def test_selects_retryable_in_candidate_order(self):
        ledger = ResultLedger(["4", "8", "15", "16", "23", "42"])
        ledger.record(
            ["4", "8", "15", "16", "23", "42"],
            [
                Success("msg4"),
                Failure("Unavailable"),
                Failure("Unavailable"),
                Success("msg16"),
                Failure("InternalServerError"),
                Failure("D'OH!"),
            ],
        )
        assert select_retry_set(["4", "8", "15", "16", "23", "42"], ledger) == ["8", "15", "23"]

    def test_only_candidates_considered(self):
        """Test that recipients outside the candidate list are never selected."""
        ledger = ResultLedger(["a", "b", "c"])
        assert select_retry_set(["c", "a"], ledger) == ["c", "a"]

    def test_indeterminate_is_retryable(self):
        assert is_retryable(Indeterminate())
        assert not is_retryable(Success("1"))
        assert not is_retryable(Failure("NotRegistered"))

    def test_custom_retryable_errors(self):
        ledger = ResultLedger(["a", "b"])
        ledger.record(["a", "b"], [Failure("Unavailable"), Failure("DeviceQuotaExceeded")])
        assert select_retry_set(["a", "b"], ledger, frozenset({"DeviceQuotaExceeded"})) == ["b"]

    def test_unknown_candidate_treated_as_indeterminate(self):
        assert select_retry_set(["x"], {}) == ["x"]
